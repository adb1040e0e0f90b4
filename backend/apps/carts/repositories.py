from django.db import IntegrityError, transaction
from django.db.models import F
from django.utils import timezone

from apps.common.repository import GenericRepository
from .models import Cart, CartItem

_ITEM_PRODUCT_PREFETCH = ("product__gallery",)


class CartRepository(GenericRepository[Cart]):
    def __init__(self):
        super().__init__(Cart)

    def get_or_create_for_user(self, user_id: int):
        existing = self.model.objects.filter(user_id=user_id).first()
        if existing:
            return existing, False
        try:
            with transaction.atomic():
                return self.model.objects.create(user_id=user_id), True
        except IntegrityError:
            # A concurrent request created the cart between our check and insert.
            return self.model.objects.get(user_id=user_id), False

    def get_with_items(self, cart_id: int):
        return (
            self.model.objects.filter(id=cart_id)
            .prefetch_related("items__product__gallery")
            .first()
        )


class CartItemRepository(GenericRepository[CartItem]):
    def __init__(self):
        super().__init__(CartItem)

    def queryset(self):
        return self.model.objects.select_related("cart", "product").prefetch_related(
            *_ITEM_PRODUCT_PREFETCH
        )

    def get_with_product(self, item_id: int):
        return self.queryset().filter(id=item_id).first()

    def get_for_cart_product(self, cart_id: int, product_id: int):
        return self.model.objects.filter(cart_id=cart_id, product_id=product_id).first()

    def increment_quantity(self, item: CartItem, by: int) -> CartItem:
        # Single UPDATE so concurrent adds cannot lose an increment.
        self.model.objects.filter(id=item.id).update(
            quantity=F("quantity") + by, updated_at=timezone.now()
        )
        item.refresh_from_db(fields=["quantity", "updated_at"])
        return item

    def set_quantity(self, item: CartItem, quantity: int) -> CartItem:
        item.quantity = quantity
        item.save(update_fields=["quantity", "updated_at"])
        return item
