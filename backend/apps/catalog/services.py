from __future__ import annotations

import hashlib
from typing import Any, Dict, Optional, Tuple, Type, Union

from django.db import transaction
from rest_framework.pagination import PageNumberPagination
from rest_framework.response import Response

from apps.common import get_logger
from .commands import ReviewCreateCommand
from .mappers import ProductMapper, ReviewMapper
from .protocols import (
    CacheBackendProtocol,
    ProductRepositoryProtocol,
    ReviewRepositoryProtocol,
)

logger = get_logger(__name__).bind(component="catalog", layer="service")

ServiceError = Tuple[str, str, Optional[Dict[str, Any]]]


class ProductService:
    def __init__(
        self,
        products: ProductRepositoryProtocol,
        reviews: ReviewRepositoryProtocol,
        cache_backend: CacheBackendProtocol,
        disable_cache: bool = False,
    ):
        self.products = products
        self.reviews = reviews
        self.cache = cache_backend
        self.disable_cache = disable_cache
        self.logger = logger.bind(service="ProductService")
        self._cache_prefix = "products:list"
        self._cache_version_key = f"{self._cache_prefix}:version"
        self._default_version = 1

    # --- listing cache -------------------------------------------------
    def _get_cache_version(self) -> int:
        v = self.cache.get(self._cache_version_key)
        return v or self._default_version

    def _bump_cache_version(self) -> None:
        v = self._get_cache_version()
        # Version key never expires; older page entries simply age out.
        self.cache.set(self._cache_version_key, v + 1, timeout=None)
        self.logger.debug("Bumped product cache version", new_version=v + 1)

    def _cache_key(self, request) -> str:
        # Pagination links are absolute, so the host is part of the key.
        digest = hashlib.sha1(request.build_absolute_uri().encode("utf-8")).hexdigest()
        return f"{self._cache_prefix}:v{self._get_cache_version()}:{digest}"

    def list_products_paginated(
        self,
        request,
        *,
        paginator_class: Optional[Type[PageNumberPagination]] = None,
        serializer_class=None,
        view=None,
    ) -> Response:
        key = None
        if not self.disable_cache:
            key = self._cache_key(request)
            cached = self.cache.get(key)
            if cached is not None:
                self.logger.debug("Product list cache hit", cache_key=key)
                return Response(cached)
            self.logger.debug("Product list cache miss", cache_key=key)

        paginator = (paginator_class or PageNumberPagination)()
        queryset = self.products.list()
        page = paginator.paginate_queryset(queryset, request, view=view)
        dtos = ProductMapper.many_to_summary(page if page is not None else queryset)
        if serializer_class is None:
            from .serializers import ProductSummarySerializer  # Avoid circular import

            serializer_class = ProductSummarySerializer
        data = serializer_class(dtos, many=True).data
        response = Response(data) if page is None else paginator.get_paginated_response(data)
        if key is not None:
            self.cache.set(key, response.data)
        return response

    # --- detail ----------------------------------------------------------
    def get_product_detail(self, product_id: int):
        self.logger.debug("Fetching product detail", product_id=product_id)
        product = self.products.get_detail(product_id)
        if not product:
            self.logger.info("Product not found", product_id=product_id)
            return None, ("NOT_FOUND", "Product not found", {"id": product_id})
        related = list(self.products.related(product))
        reviews = list(self.reviews.list_for_product(product_id))
        self.logger.debug(
            "Assembled product detail",
            product_id=product_id,
            related=len(related),
            reviews=len(reviews),
        )
        return ProductMapper.to_detail(product, related=related, reviews=reviews), None

    # --- reviews ---------------------------------------------------------
    def list_reviews(self, product_id: int):
        if not self.products.get(id=product_id):
            self.logger.info("Reviews requested for missing product", product_id=product_id)
            return None, ("NOT_FOUND", "Product not found", {"id": product_id})
        return ReviewMapper.many_to_dto(self.reviews.list_for_product(product_id)), None

    def submit_review(
        self,
        product_id: int,
        user_id: Optional[int],
        payload: Union[Dict[str, Any], ReviewCreateCommand],
    ) -> Tuple[Optional[Dict[str, Any]], Optional[ServiceError]]:
        if not user_id:
            self.logger.warning("Review rejected: no authenticated user", product_id=product_id)
            return None, ("UNAUTHORIZED", "Authentication required", None)
        cmd = (
            payload
            if isinstance(payload, ReviewCreateCommand)
            else ReviewCreateCommand.from_raw(product_id, user_id, payload)
        )
        errors = cmd.validation_errors()
        if errors:
            self.logger.warning(
                "Rejecting invalid review",
                product_id=product_id,
                user_id=user_id,
                fields=sorted(errors),
            )
            return None, ("VALIDATION_ERROR", "Invalid review", errors)
        product = self.products.get(id=product_id)
        if not product:
            self.logger.warning(
                "Review failed: product not found", product_id=product_id, user_id=user_id
            )
            return None, ("NOT_FOUND", "Product not found", {"id": product_id})
        with transaction.atomic():
            review = self.reviews.create(
                product_id=cmd.product_id,
                user_id=cmd.user_id,
                rating=cmd.rating,
                comment=cmd.comment,
            )
            product = self.products.recalculate_rating(product)
        self._bump_cache_version()
        self.logger.info(
            "Review submitted",
            product_id=product_id,
            user_id=user_id,
            review_id=review.id,
            rating=cmd.rating,
        )
        return {
            "review": ReviewMapper.to_dto(review),
            "summary": ProductMapper.to_rating_summary(product),
        }, None
