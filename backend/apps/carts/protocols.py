from __future__ import annotations

from typing import Optional, Protocol, Tuple, TYPE_CHECKING

if TYPE_CHECKING:
    from apps.carts.dtos import CartDTO, CartItemDTO
    from apps.carts.models import Cart, CartItem
    from apps.catalog.models import Product


class CartRepositoryProtocol(Protocol):
    def get_or_create_for_user(self, user_id: int) -> Tuple["Cart", bool]: ...

    def get_with_items(self, cart_id: int) -> Optional["Cart"]: ...


class CartItemRepositoryProtocol(Protocol):
    def get_with_product(self, item_id: int) -> Optional["CartItem"]: ...

    def get_for_cart_product(self, cart_id: int, product_id: int) -> Optional["CartItem"]: ...

    def create(self, **data) -> "CartItem": ...

    def increment_quantity(self, item: "CartItem", by: int) -> "CartItem": ...

    def set_quantity(self, item: "CartItem", quantity: int) -> "CartItem": ...

    def delete(self, item: "CartItem") -> None: ...


class ProductRepositoryProtocol(Protocol):
    def get(self, **filters) -> Optional["Product"]: ...


class CartMapperProtocol(Protocol):
    def to_dto(self, cart: "Cart") -> "CartDTO": ...


class CartItemMapperProtocol(Protocol):
    def to_dto(self, item: "CartItem") -> "CartItemDTO": ...
