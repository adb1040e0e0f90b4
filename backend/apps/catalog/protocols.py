from __future__ import annotations

from typing import Any, Iterable, Optional, Protocol, TYPE_CHECKING

if TYPE_CHECKING:
    from apps.catalog.models import Product, Review


class ProductRepositoryProtocol(Protocol):
    def get(self, **filters) -> Optional["Product"]: ...

    def get_detail(self, product_id: int) -> Optional["Product"]: ...

    def list(self, **filters) -> Iterable["Product"]: ...

    def related(self, product: "Product", limit: int = 4) -> Iterable["Product"]: ...

    def recalculate_rating(self, product: "Product") -> "Product": ...


class ReviewRepositoryProtocol(Protocol):
    def create(self, **data) -> "Review": ...

    def list_for_product(self, product_id: int) -> Iterable["Review"]: ...


class CacheBackendProtocol(Protocol):
    def get(self, key: str, default: Any = None) -> Any: ...

    def set(self, key: str, value: Any, timeout: Optional[int] = None) -> None: ...
