import threading
from enum import Enum
from typing import Any, Callable, List, Optional

import requests

from apps.common import get_logger
from .api_client import ApiClient

logger = get_logger(__name__).bind(component="cart_sync", layer="session")

SESSION_PATH = "/api/auth/session/"
LOGIN_PATH = "/api/auth/login/"
LOGOUT_PATH = "/api/auth/logout/"


class SessionStatus(str, Enum):
    LOADING = "loading"
    AUTHENTICATED = "authenticated"
    UNAUTHENTICATED = "unauthenticated"


SessionListener = Callable[[SessionStatus, SessionStatus], None]


def _session_user_id(payload: Any) -> Optional[int]:
    """User id from a session response, or ``None`` unless it reports an authenticated user."""
    if not isinstance(payload, dict) or payload.get("status") != SessionStatus.AUTHENTICATED.value:
        return None
    user = payload.get("user")
    if not isinstance(user, dict):
        return None
    raw_id = user.get("id")
    if isinstance(raw_id, bool):
        return None
    try:
        user_id = int(raw_id)
    except (TypeError, ValueError):
        return None
    return user_id if user_id > 0 else None


class SessionProvider:
    """
    Tracks whether the API considers this client logged in.

    Status and listeners are guarded by one lock, like :class:`CartStore`;
    listeners run outside it.
    """

    def __init__(self, api: ApiClient):
        self.api = api
        self._lock = threading.Lock()
        self._status = SessionStatus.LOADING
        self._user_id: Optional[int] = None
        self._listeners: List[SessionListener] = []
        self.logger = logger.bind(provider="SessionProvider")

    @property
    def status(self) -> SessionStatus:
        return self._status

    @property
    def user_id(self) -> Optional[int]:
        return self._user_id

    @property
    def is_authenticated(self) -> bool:
        return self._status is SessionStatus.AUTHENTICATED

    def subscribe(self, listener: SessionListener) -> Callable[[], None]:
        with self._lock:
            self._listeners.append(listener)

        def unsubscribe():
            with self._lock:
                if listener in self._listeners:
                    self._listeners.remove(listener)

        return unsubscribe

    def refresh(self) -> SessionStatus:
        try:
            payload = self.api.get(SESSION_PATH)
        except requests.RequestException as exc:
            self.logger.warning("Session lookup failed", error=str(exc))
            self._transition(SessionStatus.UNAUTHENTICATED, None)
            return self.status
        user_id = _session_user_id(payload)
        if user_id is None:
            if isinstance(payload, dict) and payload.get("status") == SessionStatus.AUTHENTICATED.value:
                self.logger.warning("Session response without a usable user id", user=payload.get("user"))
            self._transition(SessionStatus.UNAUTHENTICATED, None)
        else:
            self._transition(SessionStatus.AUTHENTICATED, user_id)
        return self.status

    def login(self, email: str, password: str) -> bool:
        try:
            self.api.post(LOGIN_PATH, {"email": email, "password": password})
        except requests.RequestException as exc:
            self.logger.warning(
                "Login failed",
                status=getattr(exc, "status_code", None),
                error=getattr(exc, "payload", None) or str(exc),
            )
            return False
        return self.refresh() is SessionStatus.AUTHENTICATED

    def logout(self) -> None:
        try:
            self.api.post(LOGOUT_PATH, {})
        except requests.RequestException as exc:
            self.logger.warning("Logout request failed", error=str(exc))
        self._transition(SessionStatus.UNAUTHENTICATED, None)

    def _transition(self, status: SessionStatus, user_id: Optional[int]) -> None:
        with self._lock:
            previous = self._status
            self._status = status
            self._user_id = user_id
            listeners = list(self._listeners)
        if previous is status:
            return
        self.logger.info("Session status changed", previous=previous.value, current=status.value, user_id=user_id)
        for listener in listeners:
            listener(previous, status)
