from rest_framework import serializers

from apps.catalog.serializers import GalleryImageSerializer
from .commands import strict_positive_int


class StrictPositiveIntegerField(serializers.IntegerField):
    """Accepts JSON numbers that are whole and >= 1; rejects booleans, strings and fractions."""

    default_error_messages = {
        "strict": "Must be a positive integer.",
    }

    def to_internal_value(self, data):
        value = strict_positive_int(data)
        if value is None:
            self.fail("strict")
        return value


class CartItemProductSerializer(serializers.Serializer):
    id = serializers.IntegerField()
    title = serializers.CharField()
    price = serializers.CharField()
    discount = serializers.IntegerField()
    thumbnail = serializers.CharField()
    colors = serializers.ListField(child=serializers.CharField())
    sizes = serializers.ListField(child=serializers.CharField())
    gallery = GalleryImageSerializer(many=True)


class CartItemSerializer(serializers.Serializer):
    id = serializers.IntegerField()
    productId = serializers.IntegerField(source="product_id")
    quantity = serializers.IntegerField()
    product = CartItemProductSerializer()


class CartSerializer(serializers.Serializer):
    cartItems = CartItemSerializer(source="items", many=True)
    totalQuantity = serializers.IntegerField(source="total_quantity")


class CartItemAddSerializer(serializers.Serializer):
    productId = serializers.IntegerField(min_value=1)
    quantity = serializers.IntegerField(min_value=1, default=1)


class CartItemQuantitySerializer(serializers.Serializer):
    quantity = StrictPositiveIntegerField()


class CartItemEnvelopeSerializer(serializers.Serializer):
    cartItem = CartItemSerializer()


class CartItemUpdatedSerializer(serializers.Serializer):
    message = serializers.CharField()
    cartItem = CartItemSerializer()
