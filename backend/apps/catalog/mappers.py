from typing import Iterable, List, Optional

from .dtos import (
    CategoryDTO,
    GalleryImageDTO,
    ProductDetailDTO,
    ProductSummaryDTO,
    RatingSummaryDTO,
    ReviewDTO,
)
from .models import Category, Product, Review, discounted_price


class CategoryMapper:
    @staticmethod
    def to_dto(cat: Optional[Category]) -> Optional[CategoryDTO]:
        if cat is None:
            return None
        return CategoryDTO(id=cat.id, name=cat.name)


class ReviewMapper:
    @staticmethod
    def to_dto(review: Review) -> ReviewDTO:
        created_at = getattr(review, "created_at", None)
        return ReviewDTO(
            id=review.id,
            author=review.user.display_name,
            rating=review.rating,
            comment=review.comment,
            date=created_at.isoformat() if created_at else None,
        )

    @staticmethod
    def many_to_dto(reviews: Iterable[Review]) -> List[ReviewDTO]:
        return [ReviewMapper.to_dto(r) for r in reviews]


class ProductMapper:
    @staticmethod
    def _summary_fields(product: Product) -> dict:
        return dict(
            id=product.id,
            title=product.title,
            price=str(product.price),
            discount=product.discount,
            final_price=str(discounted_price(product.price, product.discount)),
            thumbnail=product.thumbnail,
            rating=str(product.rating),
            review_count=product.review_count,
            category=CategoryMapper.to_dto(product.category),
        )

    @staticmethod
    def to_summary(product: Product) -> ProductSummaryDTO:
        return ProductSummaryDTO(**ProductMapper._summary_fields(product))

    @staticmethod
    def many_to_summary(products: Iterable[Product]) -> List[ProductSummaryDTO]:
        return [ProductMapper.to_summary(p) for p in products]

    @staticmethod
    def to_detail(
        product: Product,
        *,
        related: Iterable[Product] = (),
        reviews: Iterable[Review] = (),
    ) -> ProductDetailDTO:
        return ProductDetailDTO(
            **ProductMapper._summary_fields(product),
            description=product.description,
            colors=list(product.colors or []),
            sizes=list(product.sizes or []),
            gallery=[GalleryImageDTO(thumbnail=img.thumbnail) for img in product.gallery.all()],
            related=ProductMapper.many_to_summary(related),
            reviews=ReviewMapper.many_to_dto(reviews),
        )

    @staticmethod
    def to_rating_summary(product: Product) -> RatingSummaryDTO:
        return RatingSummaryDTO(
            product_id=product.id,
            rating=str(product.rating),
            review_count=product.review_count,
        )
