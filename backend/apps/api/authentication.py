from django.conf import settings
from rest_framework.exceptions import AuthenticationFailed
from rest_framework_simplejwt.authentication import JWTAuthentication
from rest_framework_simplejwt.exceptions import InvalidToken, TokenError

from apps.common import get_logger

logger = get_logger(__name__).bind(component="api", layer="authentication")


class CookieJWTAuthentication(JWTAuthentication):
    """
    JWT authentication that accepts the access token from the http-only auth
    cookie as well as from a ``Bearer`` Authorization header.

    A bad header token is an authentication failure. A bad cookie token only
    degrades the caller to anonymous, so catalog browsing keeps working after
    the access cookie expires.
    """

    def authenticate(self, request):
        header = self.get_header(request)
        if header is not None:
            return super().authenticate(request)

        raw_token = request.COOKIES.get(settings.AUTH_ACCESS_COOKIE)
        if not raw_token:
            return None
        try:
            validated_token = self.get_validated_token(raw_token.encode("utf-8"))
            user = self.get_user(validated_token)
        except (InvalidToken, TokenError, AuthenticationFailed) as exc:
            logger.info("Ignoring invalid access cookie", detail=str(exc))
            return None
        return user, validated_token
