from dataclasses import dataclass
from typing import Any, Dict, Optional


def strict_positive_int(value: Any) -> Optional[int]:
    """``value`` as an int when it is a whole number >= 1; bools and strings are not numbers."""
    if isinstance(value, bool):
        return None
    if isinstance(value, float):
        if not value.is_integer():
            return None
        value = int(value)
    if isinstance(value, int) and value >= 1:
        return value
    return None


@dataclass
class CartItemAddCommand:
    product_id: int
    quantity: int

    @staticmethod
    def from_raw(raw: Dict[str, Any]):
        if not isinstance(raw, dict):
            raise ValueError("Payload must be a dict")
        product_id = raw.get("productId", raw.get("product_id"))
        quantity = raw.get("quantity", 1)
        try:
            product_id = int(product_id)
            quantity = int(quantity)
        except (TypeError, ValueError):
            raise ValueError("productId and quantity must be integers")
        if product_id <= 0 or quantity <= 0:
            raise ValueError("productId and quantity must be positive")
        return CartItemAddCommand(product_id=product_id, quantity=quantity)


@dataclass
class CartItemQuantityCommand:
    line_item_id: int
    quantity: Optional[int]

    @staticmethod
    def from_raw(line_item_id: int, raw: Dict[str, Any]):
        data = raw if isinstance(raw, dict) else {}
        return CartItemQuantityCommand(
            line_item_id=line_item_id,
            quantity=strict_positive_int(data.get("quantity")),
        )
