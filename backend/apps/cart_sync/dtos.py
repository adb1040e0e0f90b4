from dataclasses import dataclass, field
from decimal import Decimal, InvalidOperation
from typing import Any, Dict, Iterable, Tuple


class MalformedPayloadError(ValueError):
    """A 2xx body that does not have the shape of a cart."""


def _decimal(value: Any) -> Decimal:
    try:
        return Decimal(str(value))
    except (InvalidOperation, ValueError):
        return Decimal("0")


@dataclass(frozen=True)
class ProductSnapshot:
    id: int
    title: str
    price: Decimal
    discount: int = 0
    thumbnail: str = ""
    colors: Tuple[str, ...] = ()
    sizes: Tuple[str, ...] = ()
    gallery: Tuple[str, ...] = ()

    @staticmethod
    def from_payload(data: Dict[str, Any]) -> "ProductSnapshot":
        return ProductSnapshot(
            id=int(data["id"]),
            title=data.get("title", ""),
            price=_decimal(data.get("price", "0")),
            discount=int(data.get("discount") or 0),
            thumbnail=data.get("thumbnail") or "",
            colors=tuple(data.get("colors") or ()),
            sizes=tuple(data.get("sizes") or ()),
            gallery=tuple(image.get("thumbnail", "") for image in data.get("gallery") or ()),
        )


@dataclass(frozen=True)
class LineItem:
    id: int
    product_id: int
    quantity: int
    product: ProductSnapshot

    @staticmethod
    def from_payload(data: Dict[str, Any]) -> "LineItem":
        product = ProductSnapshot.from_payload(data.get("product") or {"id": data["productId"]})
        return LineItem(
            id=int(data["id"]),
            product_id=int(data.get("productId", product.id)),
            quantity=int(data["quantity"]),
            product=product,
        )


@dataclass(frozen=True)
class CartSnapshot:
    line_items: Tuple[LineItem, ...] = field(default_factory=tuple)
    total_quantity: int = 0

    @property
    def is_empty(self) -> bool:
        return not self.line_items

    def find(self, line_item_id: int):
        return next((item for item in self.line_items if item.id == line_item_id), None)

    @staticmethod
    def of(items: Iterable[LineItem]) -> "CartSnapshot":
        items = tuple(items)
        return CartSnapshot(line_items=items, total_quantity=sum(i.quantity for i in items))

    @staticmethod
    def from_payload(payload: Dict[str, Any]) -> "CartSnapshot":
        """Build a snapshot from a cart response; totals are summed when the server omits them."""
        if not isinstance(payload, dict):
            raise MalformedPayloadError(f"Expected a JSON object, got {type(payload).__name__}")
        try:
            items = tuple(LineItem.from_payload(raw) for raw in payload.get("cartItems") or ())
        except (KeyError, TypeError, ValueError, AttributeError) as exc:
            raise MalformedPayloadError(f"Malformed cart line item: {exc!r}") from exc
        total = payload.get("totalQuantity")
        if isinstance(total, bool) or not isinstance(total, int):
            total = sum(item.quantity for item in items)
        return CartSnapshot(line_items=items, total_quantity=total)


EMPTY_CART = CartSnapshot()
