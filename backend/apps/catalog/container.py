from __future__ import annotations

from django.core.cache import cache

from .repositories import ProductRepository, ReviewRepository
from .services import ProductService


def build_product_service(*, disable_cache: bool = False) -> ProductService:
    return ProductService(
        products=ProductRepository(),
        reviews=ReviewRepository(),
        cache_backend=cache,
        disable_cache=disable_cache,
    )
