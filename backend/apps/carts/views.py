from drf_spectacular.utils import OpenApiParameter, extend_schema
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from apps.api.schemas import MessageSerializer, error_responses
from apps.api.utils import error_response
from apps.api.validation import parse_positive_id
from apps.common import get_logger
from .container import build_cart_service
from .serializers import (
    CartItemAddSerializer,
    CartItemEnvelopeSerializer,
    CartItemQuantitySerializer,
    CartItemSerializer,
    CartItemUpdatedSerializer,
    CartSerializer,
)

logger = get_logger(__name__).bind(component="carts", layer="view")

LINE_ITEM_PARAMETER = OpenApiParameter("line_item_id", int, OpenApiParameter.PATH)


def _actor(request):
    actor_id = getattr(request, "validated_user_id", None) or getattr(request.user, "id", None)
    is_privileged = bool(
        getattr(request, "is_privileged_user", False)
        or getattr(request.user, "is_staff", False)
        or getattr(request.user, "is_superuser", False)
    )
    return actor_id, is_privileged


@extend_schema(tags=["Cart"])
class CartView(APIView):
    permission_classes = [IsAuthenticated]
    service = build_cart_service()
    log = logger.bind(view="CartView")

    @extend_schema(
        summary="Get the current user's cart",
        description="Creates an empty cart on first access.",
        responses={200: CartSerializer, **error_responses(401, 403)},
    )
    def get(self, request):
        actor_id, is_privileged = _actor(request)
        dto, error = self.service.get_cart_snapshot(actor_id, is_privileged=is_privileged)
        if error:
            code, message, details = error
            return error_response(code, message, details)
        return Response(CartSerializer(dto).data)

    @extend_schema(
        summary="Add a product to the cart",
        description="Adding a product already in the cart increments its quantity.",
        request=CartItemAddSerializer,
        responses={200: MessageSerializer, **error_responses(400, 401, 403, 404)},
    )
    def post(self, request):
        serializer = CartItemAddSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        actor_id, is_privileged = _actor(request)
        payload = {
            "productId": serializer.validated_data["productId"],
            "quantity": serializer.validated_data["quantity"],
        }
        message, error = self.service.add_item(actor_id, payload, is_privileged=is_privileged)
        if error:
            code, msg, details = error
            return error_response(code, msg, details)
        return Response({"message": message})


@extend_schema(tags=["Cart"])
class CartItemView(APIView):
    permission_classes = [IsAuthenticated]
    service = build_cart_service()
    log = logger.bind(view="CartItemView")

    def _line_item_id(self, request, line_item_id):
        validated = getattr(request, "validated_line_item_id", None)
        return validated if validated is not None else parse_positive_id(line_item_id)

    def _invalid_id(self, line_item_id):
        return error_response(
            "VALIDATION_ERROR",
            "Cart item id must be a positive integer",
            {"lineItemId": line_item_id},
        )

    @extend_schema(
        summary="Get a cart line item",
        parameters=[LINE_ITEM_PARAMETER],
        responses={200: CartItemEnvelopeSerializer, **error_responses(400, 401, 403, 404)},
    )
    def get(self, request, line_item_id):
        item_id = self._line_item_id(request, line_item_id)
        if item_id is None:
            return self._invalid_id(line_item_id)
        actor_id, _ = _actor(request)
        dto, error = self.service.get_item(actor_id, item_id)
        if error:
            code, message, details = error
            return error_response(code, message, details)
        return Response({"cartItem": CartItemSerializer(dto).data})

    @extend_schema(
        summary="Set a line item's quantity",
        parameters=[LINE_ITEM_PARAMETER],
        request=CartItemQuantitySerializer,
        responses={200: CartItemUpdatedSerializer, **error_responses(400, 401, 403, 404)},
    )
    def patch(self, request, line_item_id):
        item_id = self._line_item_id(request, line_item_id)
        if item_id is None:
            return self._invalid_id(line_item_id)
        serializer = CartItemQuantitySerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        actor_id, _ = _actor(request)
        dto, error = self.service.update_item_quantity(
            actor_id, item_id, {"quantity": serializer.validated_data["quantity"]}
        )
        if error:
            code, message, details = error
            return error_response(code, message, details)
        return Response({"message": "Cart item updated", "cartItem": CartItemSerializer(dto).data})

    @extend_schema(
        summary="Set a line item's quantity",
        parameters=[LINE_ITEM_PARAMETER],
        request=CartItemQuantitySerializer,
        responses={200: CartItemUpdatedSerializer, **error_responses(400, 401, 403, 404)},
    )
    def put(self, request, line_item_id):
        return self.patch(request, line_item_id)

    @extend_schema(
        summary="Remove a line item",
        parameters=[LINE_ITEM_PARAMETER],
        responses={200: MessageSerializer, **error_responses(400, 401, 403, 404)},
    )
    def delete(self, request, line_item_id):
        item_id = self._line_item_id(request, line_item_id)
        if item_id is None:
            return self._invalid_id(line_item_id)
        actor_id, _ = _actor(request)
        _removed, error = self.service.remove_item(actor_id, item_id)
        if error:
            code, message, details = error
            return error_response(code, message, details)
        return Response({"message": "Item removed from cart"})
