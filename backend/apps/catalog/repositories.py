from django.db.models import Avg, Count

from apps.common.repository import GenericRepository
from .models import Product, Review

RELATED_PRODUCTS_LIMIT = 4


class ProductRepository(GenericRepository[Product]):
    def __init__(self):
        super().__init__(Product)

    def queryset(self):
        return self.model.objects.select_related("category")

    def list(self, **filters):  # type: ignore[override]
        """Newest first, category joined for summary mapping."""
        return self.queryset().filter(**filters).order_by("-created_at", "-id")

    def get_detail(self, product_id: int):
        return (
            self.queryset()
            .prefetch_related("gallery")
            .filter(id=product_id)
            .first()
        )

    def related(self, product: Product, limit: int = RELATED_PRODUCTS_LIMIT):
        if product.category_id is None:
            return self.model.objects.none()
        return (
            self.list(category_id=product.category_id)
            .exclude(id=product.id)[:limit]
        )

    def recalculate_rating(self, product: Product) -> Product:
        agg = product.reviews.aggregate(avg=Avg("rating"), count=Count("id"))
        count = agg["count"] or 0
        if not count:
            product.rating = 0
            product.review_count = 0
        else:
            product.rating = round(float(agg["avg"]) + 1e-8, 1)
            product.review_count = count
        product.save(update_fields=["rating", "review_count", "updated_at"])
        return product


class ReviewRepository(GenericRepository[Review]):
    def __init__(self):
        super().__init__(Review)

    def list_for_product(self, product_id: int):
        return (
            self.model.objects.filter(product_id=product_id)
            .select_related("user")
            .order_by("-created_at", "-id")
        )
