from typing import Any, Dict, Optional

import requests

from apps.common import get_logger
from .api_client import ApiClient
from .dtos import CartSnapshot, MalformedPayloadError
from .session import SessionProvider, SessionStatus
from .store import CartStore

logger = get_logger(__name__).bind(component="cart_sync", layer="client")

CART_PATH = "/api/cart/"


def line_item_path(line_item_id: int) -> str:
    return f"{CART_PATH}{line_item_id}/"


class CartSyncClient:
    """
    Cart operations against the cart API, mirrored into a :class:`CartStore`.

    Every operation needs an authenticated session. Failures are logged and
    reported as "nothing changed": mutations return ``False`` and
    :meth:`fetch` returns ``None``.
    """

    def __init__(self, api: ApiClient, store: CartStore, session: SessionProvider):
        self.api = api
        self.store = store
        self.session = session
        self.logger = logger.bind(client="CartSyncClient")

    def _require_session(self, operation: str, **context: Any) -> bool:
        if self.session.is_authenticated:
            return True
        self.logger.info(
            "Skipping cart operation without a session",
            operation=operation,
            status=self.session.status.value,
            **context,
        )
        return False

    def _log_failure(self, operation: str, exc: Exception, **context: Any) -> None:
        self.logger.warning(
            "Cart operation failed",
            operation=operation,
            status=getattr(exc, "status_code", None),
            error=getattr(exc, "payload", None) or str(exc),
            **context,
        )

    def fetch(self) -> Optional[CartSnapshot]:
        if not self._require_session("fetch"):
            self.store.reset()
            return None
        token = self.store.begin_fetch()
        try:
            snapshot = CartSnapshot.from_payload(self.api.get(CART_PATH) or {})
        except (requests.RequestException, MalformedPayloadError) as exc:
            self._log_failure("fetch", exc, token=token)
            self.store.fail(token)
            return None
        if not self.store.apply(token, snapshot):
            return None
        self.logger.debug(
            "Cart fetched",
            token=token,
            line_items=len(snapshot.line_items),
            total_quantity=snapshot.total_quantity,
        )
        return snapshot

    def _mutate(self, operation: str, send, **context: Any) -> bool:
        if not self._require_session(operation, **context):
            return False
        try:
            send()
        except requests.RequestException as exc:
            self._log_failure(operation, exc, **context)
            return False
        self.logger.info("Cart operation succeeded", operation=operation, **context)
        self.fetch()
        return True

    def add(self, product_id: int, quantity: int = 1) -> bool:
        payload: Dict[str, Any] = {"productId": product_id, "quantity": quantity}
        added = self._mutate(
            "add",
            lambda: self.api.post(CART_PATH, payload),
            product_id=product_id,
            quantity=quantity,
        )
        if added:
            self.store.notify_item_added()
        return added

    def update_quantity(self, line_item_id: int, quantity: int) -> bool:
        quantity = max(1, quantity)
        return self._mutate(
            "update_quantity",
            lambda: self.api.patch(line_item_path(line_item_id), {"quantity": quantity}),
            line_item_id=line_item_id,
            quantity=quantity,
        )

    def remove(self, line_item_id: int) -> bool:
        return self._mutate(
            "remove",
            lambda: self.api.delete(line_item_path(line_item_id)),
            line_item_id=line_item_id,
        )

    def on_session_change(self, previous: SessionStatus, current: SessionStatus) -> None:
        """Keep the cart in step with the session: fetch on sign-in, empty on sign-out."""
        if current is SessionStatus.AUTHENTICATED and previous in (
            SessionStatus.LOADING,
            SessionStatus.UNAUTHENTICATED,
        ):
            self.fetch()
        elif current is SessionStatus.UNAUTHENTICATED and previous in (
            SessionStatus.LOADING,
            SessionStatus.AUTHENTICATED,
        ):
            self.store.reset()
