from typing import Iterable, List

from apps.catalog.dtos import GalleryImageDTO

from .dtos import CartDTO, CartItemDTO, CartItemProductDTO
from .models import Cart, CartItem


class CartItemMapper:
    @staticmethod
    def product_snapshot(product) -> CartItemProductDTO:
        return CartItemProductDTO(
            id=product.id,
            title=product.title,
            price=str(product.price),
            discount=product.discount,
            thumbnail=product.thumbnail,
            colors=list(product.colors or []),
            sizes=list(product.sizes or []),
            gallery=[GalleryImageDTO(thumbnail=img.thumbnail) for img in product.gallery.all()],
        )

    def to_dto(self, item: CartItem) -> CartItemDTO:
        return CartItemDTO(
            id=item.id,
            product_id=item.product_id,
            quantity=item.quantity,
            product=self.product_snapshot(item.product),
        )

    def many_to_dto(self, items: Iterable[CartItem]) -> List[CartItemDTO]:
        return [self.to_dto(i) for i in items]


class CartMapper:
    def __init__(self, item_mapper: CartItemMapper = None) -> None:
        self.item_mapper = item_mapper or CartItemMapper()

    def to_dto(self, cart: Cart) -> CartDTO:
        items = self.item_mapper.many_to_dto(cart.items.all())
        return CartDTO(
            id=cart.id,
            user_id=cart.user_id,
            items=items,
            total_quantity=sum(i.quantity for i in items),
        )
