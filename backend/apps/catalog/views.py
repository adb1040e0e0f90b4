from drf_spectacular.utils import OpenApiParameter, extend_schema
from rest_framework import status
from rest_framework.permissions import AllowAny, IsAuthenticatedOrReadOnly
from rest_framework.response import Response
from rest_framework.views import APIView

from apps.api.schemas import error_responses, paginated_response
from apps.api.utils import error_response
from apps.common import get_logger
from .container import build_product_service
from .pagination import ProductListPagination
from .serializers import (
    ProductDetailSerializer,
    ProductSummarySerializer,
    ReviewCreatedSerializer,
    ReviewListSerializer,
    ReviewWriteSerializer,
)

logger = get_logger(__name__).bind(component="catalog", layer="view")


@extend_schema(tags=["Catalog"])
class ProductListView(APIView):
    permission_classes = [AllowAny]
    service = build_product_service()
    log = logger.bind(view="ProductListView")

    @extend_schema(
        operation_id="products_list",
        summary="List products",
        description="Newest first. Supports ?page and ?limit (max 100). Cached results may be served.",
        parameters=[
            OpenApiParameter(name="page", type=int, required=False),
            OpenApiParameter(name="limit", type=int, required=False),
        ],
        responses={200: paginated_response(ProductSummarySerializer)},
    )
    def get(self, request):
        self.log.debug("Handling product list request", query=request.query_params.dict())
        return self.service.list_products_paginated(
            request,
            paginator_class=ProductListPagination,
            serializer_class=ProductSummarySerializer,
            view=self,
        )


@extend_schema(tags=["Catalog"])
class ProductDetailView(APIView):
    permission_classes = [AllowAny]
    service = build_product_service()
    log = logger.bind(view="ProductDetailView")

    @extend_schema(
        operation_id="products_retrieve",
        summary="Get product",
        description="Product with gallery, up to four related products and reviews (newest first).",
        parameters=[OpenApiParameter("product_id", int, OpenApiParameter.PATH)],
        responses={200: ProductDetailSerializer, **error_responses(404)},
    )
    def get(self, request, product_id: int):
        dto, error = self.service.get_product_detail(product_id)
        if error:
            code, message, details = error
            return error_response(code, message, details)
        return Response(ProductDetailSerializer(dto).data)


@extend_schema(tags=["Catalog", "Reviews"])
class ProductReviewListView(APIView):
    permission_classes = [IsAuthenticatedOrReadOnly]
    service = build_product_service()
    log = logger.bind(view="ProductReviewListView")

    @extend_schema(
        summary="List product reviews",
        parameters=[OpenApiParameter("product_id", int, OpenApiParameter.PATH)],
        responses={200: ReviewListSerializer, **error_responses(404)},
    )
    def get(self, request, product_id: int):
        reviews, error = self.service.list_reviews(product_id)
        if error:
            code, message, details = error
            return error_response(code, message, details)
        return Response(ReviewListSerializer({"productId": product_id, "reviews": reviews}).data)

    @extend_schema(
        summary="Submit a review",
        description="Requires a session. Each submission refreshes the product's rating summary.",
        parameters=[OpenApiParameter("product_id", int, OpenApiParameter.PATH)],
        request=ReviewWriteSerializer,
        responses={201: ReviewCreatedSerializer, **error_responses(400, 401, 404)},
    )
    def post(self, request, product_id: int):
        serializer = ReviewWriteSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        user_id = getattr(request, "validated_user_id", None) or getattr(request.user, "id", None)
        self.log.info("Submitting review", product_id=product_id, user_id=user_id)
        result, error = self.service.submit_review(product_id, user_id, serializer.validated_data)
        if error:
            code, message, details = error
            self.log.warning(
                "Review submission failed", product_id=product_id, user_id=user_id, code=code
            )
            return error_response(code, message, details)
        return Response(ReviewCreatedSerializer(result).data, status=status.HTTP_201_CREATED)
