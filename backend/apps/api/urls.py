from django.urls import include, path

from apps.catalog.views import (
    ProductDetailView,
    ProductListView,
    ProductReviewListView,
)

urlpatterns = [
    path("products/", ProductListView.as_view(), name="api-products-list"),
    path(
        "products/<int:product_id>/",
        ProductDetailView.as_view(),
        name="api-products-detail",
    ),
    path(
        "products/<int:product_id>/reviews/",
        ProductReviewListView.as_view(),
        name="api-products-reviews",
    ),
    path("cart/", include("apps.carts.urls")),
    path("auth/", include("apps.auth.urls")),
]
