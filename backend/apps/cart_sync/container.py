from dataclasses import dataclass
from typing import Callable, Optional

from django.conf import settings

from .api_client import ApiClient
from .client import CartSyncClient
from .session import SessionProvider
from .store import CartStore


@dataclass
class CartSync:
    api: ApiClient
    session: SessionProvider
    store: CartStore
    client: CartSyncClient


def build_cart_sync(
    base_url: Optional[str] = None,
    *,
    api: Optional[ApiClient] = None,
    clock: Optional[Callable[[], float]] = None,
) -> CartSync:
    api = api or ApiClient(base_url or settings.STOREFRONT_API_URL, include_credentials=True)
    store = CartStore(clock=clock) if clock else CartStore()
    session = SessionProvider(api)
    client = CartSyncClient(api, store, session)
    session.subscribe(client.on_session_change)
    return CartSync(api=api, session=session, store=store, client=client)
