from __future__ import annotations

from typing import Any, Dict, Optional, Tuple, Union

from django.db import IntegrityError, transaction

from apps.common import get_logger
from .commands import CartItemAddCommand, CartItemQuantityCommand
from .protocols import (
    CartItemMapperProtocol,
    CartItemRepositoryProtocol,
    CartMapperProtocol,
    CartRepositoryProtocol,
    ProductRepositoryProtocol,
)

logger = get_logger(__name__).bind(component="carts", layer="service")

ServiceError = Tuple[str, str, Optional[Dict[str, Any]]]

STAFF_CART_MESSAGE = "Staff and admin accounts cannot own carts"


class CartNotAllowedError(Exception):
    """Raised when a non-customer account would need a cart."""


class CartService:
    def __init__(
        self,
        carts: CartRepositoryProtocol,
        items: CartItemRepositoryProtocol,
        products: ProductRepositoryProtocol,
        cart_mapper: CartMapperProtocol,
        item_mapper: CartItemMapperProtocol,
    ):
        self.carts = carts
        self.items = items
        self.products = products
        self.cart_mapper = cart_mapper
        self.item_mapper = item_mapper
        self.logger = logger.bind(service="CartService")

    def get_or_create_cart(self, user_id: int, *, is_privileged: bool = False):
        """Return ``(cart, created)`` for the customer, creating an empty cart on first use."""
        if is_privileged:
            raise CartNotAllowedError(STAFF_CART_MESSAGE)
        cart, created = self.carts.get_or_create_for_user(user_id)
        if created:
            self.logger.info("Cart created", user_id=user_id, cart_id=cart.id)
        return cart, created

    def _staff_error(self, actor_id: Optional[int]) -> ServiceError:
        self.logger.warning("Cart access not allowed for staff account", actor_id=actor_id)
        return ("FORBIDDEN", STAFF_CART_MESSAGE, {"userId": actor_id})

    def get_cart_snapshot(self, actor_id: int, *, is_privileged: bool = False):
        self.logger.debug("Fetching cart snapshot", actor_id=actor_id)
        try:
            cart, _created = self.get_or_create_cart(actor_id, is_privileged=is_privileged)
        except CartNotAllowedError:
            return None, self._staff_error(actor_id)
        dto = self.cart_mapper.to_dto(self.carts.get_with_items(cart.id))
        self.logger.debug(
            "Returning cart snapshot",
            actor_id=actor_id,
            cart_id=dto.id,
            line_items=len(dto.items),
            total_quantity=dto.total_quantity,
        )
        return dto, None

    def add_item(
        self,
        actor_id: int,
        payload: Union[Dict[str, Any], CartItemAddCommand],
        *,
        is_privileged: bool = False,
    ):
        try:
            cmd = payload if isinstance(payload, CartItemAddCommand) else CartItemAddCommand.from_raw(payload)
        except ValueError as exc:
            self.logger.warning("Rejecting invalid add payload", actor_id=actor_id, error=str(exc))
            return None, ("VALIDATION_ERROR", str(exc), None)
        if not self.products.get(id=cmd.product_id):
            self.logger.info("Add rejected: product not found", actor_id=actor_id, product_id=cmd.product_id)
            return None, ("NOT_FOUND", "Product not found", {"productId": cmd.product_id})
        try:
            with transaction.atomic():
                cart, _created = self.get_or_create_cart(actor_id, is_privileged=is_privileged)
                item, merged = self._merge_item(cart.id, cmd)
        except CartNotAllowedError:
            return None, self._staff_error(actor_id)
        self.logger.info(
            "Item added to cart",
            actor_id=actor_id,
            cart_id=cart.id,
            product_id=cmd.product_id,
            line_item_id=item.id,
            added=cmd.quantity,
            quantity=item.quantity,
            merged=merged,
        )
        return "Item added to cart", None

    def _merge_item(self, cart_id: int, cmd: CartItemAddCommand):
        existing = self.items.get_for_cart_product(cart_id, cmd.product_id)
        if existing:
            return self.items.increment_quantity(existing, cmd.quantity), True
        try:
            with transaction.atomic():
                created = self.items.create(
                    cart_id=cart_id, product_id=cmd.product_id, quantity=cmd.quantity
                )
            return created, False
        except IntegrityError:
            # Lost the race against a concurrent add of the same product.
            existing = self.items.get_for_cart_product(cart_id, cmd.product_id)
            if existing is None:
                raise
            return self.items.increment_quantity(existing, cmd.quantity), True

    def _authorize_item(self, actor_id: int, line_item_id: int):
        item = self.items.get_with_product(line_item_id)
        if item is None:
            self.logger.info("Line item not found", actor_id=actor_id, line_item_id=line_item_id)
            return None, ("NOT_FOUND", "Cart item not found", {"lineItemId": line_item_id})
        if item.cart.user_id != actor_id:
            self.logger.warning(
                "Line item belongs to another user",
                actor_id=actor_id,
                line_item_id=line_item_id,
                owner_id=item.cart.user_id,
            )
            return None, ("FORBIDDEN", "You do not have permission to modify this cart item", None)
        return item, None

    def get_item(self, actor_id: int, line_item_id: int):
        item, error = self._authorize_item(actor_id, line_item_id)
        if error:
            return None, error
        return self.item_mapper.to_dto(item), None

    def update_item_quantity(
        self,
        actor_id: int,
        line_item_id: int,
        payload: Union[Dict[str, Any], CartItemQuantityCommand],
    ):
        cmd = (
            payload
            if isinstance(payload, CartItemQuantityCommand)
            else CartItemQuantityCommand.from_raw(line_item_id, payload)
        )
        if cmd.quantity is None:
            self.logger.warning("Rejecting invalid quantity", actor_id=actor_id, line_item_id=line_item_id)
            return None, (
                "VALIDATION_ERROR",
                "Quantity must be a positive integer",
                {"quantity": payload.get("quantity") if isinstance(payload, dict) else None},
            )
        item, error = self._authorize_item(actor_id, line_item_id)
        if error:
            return None, error
        previous = item.quantity
        item = self.items.set_quantity(item, cmd.quantity)
        self.logger.info(
            "Cart item quantity updated",
            actor_id=actor_id,
            line_item_id=line_item_id,
            previous=previous,
            quantity=item.quantity,
        )
        return self.item_mapper.to_dto(item), None

    def remove_item(self, actor_id: int, line_item_id: int):
        item, error = self._authorize_item(actor_id, line_item_id)
        if error:
            return False, error
        self.items.delete(item)
        self.logger.info(
            "Cart item removed",
            actor_id=actor_id,
            line_item_id=line_item_id,
            product_id=item.product_id,
        )
        return True, None
