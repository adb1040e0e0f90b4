import threading
import time
from typing import Callable, List, Optional

from apps.common import get_logger
from .dtos import EMPTY_CART, CartSnapshot

logger = get_logger(__name__).bind(component="cart_sync", layer="store")

ITEM_ADDED_NOTICE_SECONDS = 5

Listener = Callable[[CartSnapshot], None]


class CartStore:
    """
    Latest known cart snapshot plus the listeners that render it.

    Every fetch takes a token from :meth:`begin_fetch`. Only the newest token
    may write its result, and :meth:`reset` retires all tokens handed out so
    far, so a slow response can never overwrite a later one.
    """

    def __init__(self, clock: Callable[[], float] = time.monotonic):
        self._clock = clock
        self._lock = threading.Lock()
        self._snapshot: CartSnapshot = EMPTY_CART
        self._listeners: List[Listener] = []
        self._latest_token = 0
        self._notice_until: Optional[float] = None

    @property
    def snapshot(self) -> CartSnapshot:
        return self._snapshot

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        with self._lock:
            self._listeners.append(listener)

        def unsubscribe():
            with self._lock:
                if listener in self._listeners:
                    self._listeners.remove(listener)

        return unsubscribe

    def begin_fetch(self) -> int:
        with self._lock:
            self._latest_token += 1
            return self._latest_token

    def is_current(self, token: int) -> bool:
        return token == self._latest_token

    def apply(self, token: int, snapshot: CartSnapshot) -> bool:
        """Replace the snapshot with a fetch result; stale tokens are dropped."""
        with self._lock:
            if token != self._latest_token:
                logger.info("Discarding stale cart result", token=token, latest=self._latest_token)
                return False
            self._snapshot = snapshot
        self._publish(snapshot)
        return True

    def fail(self, token: int) -> bool:
        """A failed fetch empties the cart, unless a newer fetch has started since."""
        with self._lock:
            if token != self._latest_token:
                logger.info("Discarding stale cart failure", token=token, latest=self._latest_token)
                return False
            self._snapshot = EMPTY_CART
        self._publish(EMPTY_CART)
        return True

    def reset(self) -> None:
        with self._lock:
            self._latest_token += 1
            self._snapshot = EMPTY_CART
            self._notice_until = None
        logger.debug("Cart store reset")
        self._publish(EMPTY_CART)

    def notify_item_added(self) -> None:
        with self._lock:
            self._notice_until = self._clock() + ITEM_ADDED_NOTICE_SECONDS

    @property
    def item_added(self) -> bool:
        """True until the notice expires or is dismissed. Reading does not change state."""
        with self._lock:
            return self._notice_until is not None and self._clock() < self._notice_until

    def dismiss_item_added(self) -> None:
        with self._lock:
            self._notice_until = None

    def _publish(self, snapshot: CartSnapshot) -> None:
        with self._lock:
            listeners = list(self._listeners)
        for listener in listeners:
            listener(snapshot)
