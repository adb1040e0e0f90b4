from rest_framework import serializers


class CategorySerializer(serializers.Serializer):
    id = serializers.IntegerField()
    name = serializers.CharField()


class GalleryImageSerializer(serializers.Serializer):
    thumbnail = serializers.CharField()


class ProductSummarySerializer(serializers.Serializer):
    id = serializers.IntegerField()
    title = serializers.CharField()
    price = serializers.CharField()
    discount = serializers.IntegerField()
    finalPrice = serializers.CharField(source="final_price")
    thumbnail = serializers.CharField()
    rating = serializers.CharField()
    reviewCount = serializers.IntegerField(source="review_count")
    category = CategorySerializer(allow_null=True)


class ReviewSerializer(serializers.Serializer):
    id = serializers.IntegerField()
    author = serializers.CharField()
    rating = serializers.IntegerField()
    comment = serializers.CharField()
    date = serializers.CharField(allow_null=True)


class ProductDetailSerializer(ProductSummarySerializer):
    description = serializers.CharField(allow_blank=True)
    colors = serializers.ListField(child=serializers.CharField())
    sizes = serializers.ListField(child=serializers.CharField())
    gallery = GalleryImageSerializer(many=True)
    related = ProductSummarySerializer(many=True)
    reviews = ReviewSerializer(many=True)


class RatingSummarySerializer(serializers.Serializer):
    productId = serializers.IntegerField(source="product_id")
    rating = serializers.CharField()
    reviewCount = serializers.IntegerField(source="review_count")


class ReviewWriteSerializer(serializers.Serializer):
    rating = serializers.IntegerField(min_value=1, max_value=5)
    comment = serializers.CharField(max_length=2000)


class ReviewCreatedSerializer(serializers.Serializer):
    review = ReviewSerializer()
    summary = RatingSummarySerializer()


class ReviewListSerializer(serializers.Serializer):
    productId = serializers.IntegerField()
    reviews = ReviewSerializer(many=True)
