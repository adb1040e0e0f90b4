from __future__ import annotations

from typing import Any, Dict, Optional, Tuple

from django.contrib.auth import authenticate
from django.contrib.auth.models import update_last_login
from rest_framework_simplejwt.exceptions import TokenError
from rest_framework_simplejwt.tokens import RefreshToken

from apps.common import get_logger
from apps.users.dtos import user_to_dto
from apps.users.models import normalize_login_email
from .protocols import CredentialCheckerProtocol, UserRegistrationRepositoryProtocol

logger = get_logger(__name__).bind(component="auth", layer="service")

ServiceError = Tuple[str, str, Optional[Dict[str, Any]]]

INVALID_CREDENTIALS_MESSAGE = "Invalid email or password"


class RegistrationService:
    def __init__(self, users: UserRegistrationRepositoryProtocol):
        self.users = users
        self.logger = logger.bind(service="RegistrationService")

    def _check_uniqueness(self, username: str, email: str) -> Optional[ServiceError]:
        if self.users.email_exists(email):
            self.logger.info("Registration rejected: email already exists", email=email)
            return ("VALIDATION_ERROR", "Email already exists", {"email": email})
        if self.users.username_exists(username):
            self.logger.info(
                "Registration rejected: username already exists", username=username
            )
            return ("VALIDATION_ERROR", "Username already exists", {"username": username})
        return None

    def register(self, data: Dict[str, Any]):
        username = data["username"].strip()
        email = normalize_login_email(data["email"])
        self.logger.debug("Received registration request", username=username, email=email)
        conflict = self._check_uniqueness(username, email)
        if conflict:
            return None, conflict
        user = self.users.create_user(
            username=username,
            email=email,
            password=data["password"],
            first_name=(data.get("first_name") or "").strip(),
            last_name=(data.get("last_name") or "").strip(),
        )
        self.logger.info("User registered successfully", user_id=user.id)
        return user_to_dto(user), None


class SessionService:
    """Issues, refreshes and revokes the JWT pair that backs a browser session."""

    def __init__(self, credential_checker: CredentialCheckerProtocol = authenticate):
        self.check_credentials = credential_checker
        self.logger = logger.bind(service="SessionService")

    def login(self, request, email: str, password: str):
        normalized = normalize_login_email(email)
        user = self.check_credentials(request, username=normalized, password=password)
        if user is None:
            self.logger.info("Login rejected", email=normalized)
            return None, ("UNAUTHORIZED", INVALID_CREDENTIALS_MESSAGE, None)
        refresh = RefreshToken.for_user(user)
        update_last_login(None, user)
        self.logger.info("User logged in", user_id=user.id)
        return {
            "user": user_to_dto(user),
            "access": str(refresh.access_token),
            "refresh": str(refresh),
        }, None

    def refresh(self, raw_refresh: Optional[str]):
        if not raw_refresh:
            self.logger.info("Refresh rejected: no refresh token")
            return None, ("UNAUTHORIZED", "Refresh token missing", None)
        try:
            token = RefreshToken(raw_refresh)
            access = str(token.access_token)
        except TokenError as exc:
            self.logger.info("Refresh rejected: token error", error=str(exc))
            return None, ("UNAUTHORIZED", "Invalid or expired refresh token", None)
        self.logger.debug("Access token refreshed", user_id=token.payload.get("user_id"))
        return {"access": access}, None

    def logout(self, raw_refresh: Optional[str], actor_id: Optional[int]) -> bool:
        """Blacklist the refresh token when there is one. Never fails the caller."""
        if not raw_refresh:
            self.logger.debug("Logout without refresh token", actor_id=actor_id)
            return False
        try:
            RefreshToken(raw_refresh).blacklist()
        except TokenError as exc:
            self.logger.info("Logout: refresh token already unusable", actor_id=actor_id, error=str(exc))
            return False
        self.logger.info("User logged out", actor_id=actor_id)
        return True

    def describe_session(self, user) -> Dict[str, Any]:
        if user is None or not getattr(user, "is_authenticated", False):
            return {"status": "unauthenticated", "user": None}
        return {
            "status": "authenticated",
            "user": {"id": user.id, "name": user.display_name, "email": user.email},
        }
