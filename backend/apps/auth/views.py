from django.conf import settings
from drf_spectacular.utils import extend_schema
from rest_framework import status
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from apps.api.exceptions import ApplicationError
from apps.api.schemas import error_responses
from apps.api.utils import error_response
from apps.common import get_logger
from apps.users.dtos import user_to_dto
from .container import build_registration_service, build_session_service
from .cookies import clear_auth_cookies, set_auth_cookies
from .serializers import (
    DetailResponseSerializer,
    LoginRequestSerializer,
    RefreshRequestSerializer,
    RegisterRequestSerializer,
    SessionSerializer,
    UserEnvelopeSerializer,
    UserSerializer,
)

logger = get_logger(__name__).bind(component="auth", layer="view")


def _refresh_token_from(request):
    token = request.COOKIES.get(settings.AUTH_REFRESH_COOKIE)
    if token:
        return token
    serializer = RefreshRequestSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)
    return serializer.validated_data.get("refresh") or None


@extend_schema(tags=["Auth"])
class RegisterView(APIView):
    permission_classes = [AllowAny]
    authentication_classes = []
    service = build_registration_service()
    log = logger.bind(view="RegisterView")

    @extend_schema(
        summary="Register customer",
        request=RegisterRequestSerializer,
        responses={201: UserEnvelopeSerializer, **error_responses(400)},
    )
    def post(self, request):
        serializer = RegisterRequestSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        user, error = self.service.register(serializer.validated_data)
        if error:
            code, message, details = error
            self.log.warning("Registration failed", code=code, detail=message)
            return error_response(code, message, details)
        self.log.info("Registration completed", user_id=user.id)
        return Response({"user": UserSerializer(user).data}, status=status.HTTP_201_CREATED)


@extend_schema(tags=["Auth"])
class LoginView(APIView):
    permission_classes = [AllowAny]
    authentication_classes = []
    service = build_session_service()
    log = logger.bind(view="LoginView")

    @extend_schema(
        summary="Login with email and password",
        description="Sets the access and refresh JWTs as http-only cookies.",
        request=LoginRequestSerializer,
        responses={200: UserEnvelopeSerializer, **error_responses(400, 401)},
    )
    def post(self, request):
        serializer = LoginRequestSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        result, error = self.service.login(
            request,
            serializer.validated_data["email"],
            serializer.validated_data["password"],
        )
        if error:
            code, message, details = error
            raise ApplicationError(code, message, status_code=status.HTTP_401_UNAUTHORIZED, details=details)
        response = Response({"user": UserSerializer(result["user"]).data})
        return set_auth_cookies(response, result["access"], result["refresh"])


@extend_schema(tags=["Auth"])
class RefreshView(APIView):
    permission_classes = [AllowAny]
    authentication_classes = []
    service = build_session_service()
    log = logger.bind(view="RefreshView")

    @extend_schema(
        summary="Refresh the access cookie",
        request=RefreshRequestSerializer,
        responses={200: DetailResponseSerializer, **error_responses(401)},
    )
    def post(self, request):
        result, error = self.service.refresh(_refresh_token_from(request))
        if error:
            code, message, details = error
            return error_response(code, message, details)
        return set_auth_cookies(Response({"detail": "Token refreshed"}), result["access"])


@extend_schema(tags=["Auth"])
class LogoutView(APIView):
    permission_classes = [AllowAny]
    service = build_session_service()
    log = logger.bind(view="LogoutView")

    @extend_schema(
        summary="Logout",
        description="Blacklists the refresh token when present and clears both cookies. Always succeeds.",
        request=RefreshRequestSerializer,
        responses={200: DetailResponseSerializer},
    )
    def post(self, request):
        actor_id = getattr(request.user, "id", None)
        raw_refresh = request.COOKIES.get(settings.AUTH_REFRESH_COOKIE)
        if not raw_refresh and isinstance(request.data, dict):
            raw_refresh = request.data.get("refresh")
        self.service.logout(raw_refresh, actor_id)
        return clear_auth_cookies(Response({"detail": "Logged out"}, status=status.HTTP_200_OK))


@extend_schema(tags=["Auth"])
class MeView(APIView):
    permission_classes = [IsAuthenticated]
    log = logger.bind(view="MeView")

    @extend_schema(summary="Current user profile", responses={200: UserEnvelopeSerializer, **error_responses(401)})
    def get(self, request):
        self.log.debug("Returning current user profile", user_id=request.user.id)
        return Response({"user": UserSerializer(user_to_dto(request.user)).data})


@extend_schema(tags=["Auth"])
class SessionView(APIView):
    permission_classes = [AllowAny]
    service = build_session_service()
    log = logger.bind(view="SessionView")

    @extend_schema(
        summary="Session status",
        description="Never fails for anonymous callers; reports whether the cookie carries a valid session.",
        responses={200: SessionSerializer},
    )
    def get(self, request):
        return Response(SessionSerializer(self.service.describe_session(request.user)).data)
