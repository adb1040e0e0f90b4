import types

from django.conf import settings

from rest_framework.test import APIRequestFactory

from apps.api.middleware import RequestValidationMiddleware
from apps.api.validation import parse_positive_id, validate_request_context
from apps.auth.views import MeView
from apps.carts.views import CartItemView, CartView
from apps.catalog.views import ProductListView, ProductReviewListView


factory = APIRequestFactory()


def _customer(user_id=42):
    return types.SimpleNamespace(id=user_id, is_authenticated=True, is_staff=False, is_superuser=False)


def _anonymous():
    return types.SimpleNamespace(id=None, is_authenticated=False)


def test_cart_request_sets_validated_user():
    request = factory.get("/api/cart/")
    request.user = _customer()
    response = validate_request_context(request, CartView, {})
    assert response is None
    assert request.validated_user_id == 42
    assert request.is_privileged_user is False


def test_cart_request_marks_staff_as_privileged():
    request = factory.post("/api/cart/", {"productId": 1}, format="json")
    request.user = types.SimpleNamespace(id=3, is_authenticated=True, is_staff=True, is_superuser=False)
    response = validate_request_context(request, CartView, {})
    assert response is None
    assert request.is_privileged_user is True


def test_cart_request_without_user_is_401():
    request = factory.get("/api/cart/")
    request.user = _anonymous()
    response = validate_request_context(request, CartView, {})
    assert response.status_code == 401
    assert response.data["error"]["code"] == "UNAUTHORIZED"


def test_cart_request_with_garbage_cookie_is_401():
    factory.cookies[settings.AUTH_ACCESS_COOKIE] = "not-a-jwt"
    try:
        request = factory.get("/api/cart/")
        request.user = _anonymous()
        response = validate_request_context(request, CartView, {})
    finally:
        factory.cookies.clear()
    assert response.status_code == 401


def test_unsupported_method_is_left_to_the_view():
    request = factory.put("/api/cart/", {}, format="json")
    request.user = _anonymous()
    assert validate_request_context(request, CartView, {}) is None


def test_cart_item_request_parses_line_item_id():
    request = factory.patch("/api/cart/7/", {"quantity": 2}, format="json")
    request.user = _customer()
    response = validate_request_context(request, CartItemView, {"line_item_id": "7"})
    assert response is None
    assert request.validated_line_item_id == 7


def test_cart_item_request_rejects_malformed_id():
    request = factory.delete("/api/cart/abc/")
    request.user = _customer()
    response = validate_request_context(request, CartItemView, {"line_item_id": "abc"})
    assert response.status_code == 400
    assert response.data["error"]["details"] == {"lineItemId": "abc"}


def test_cart_item_request_checks_auth_before_id():
    request = factory.delete("/api/cart/abc/")
    request.user = _anonymous()
    response = validate_request_context(request, CartItemView, {"line_item_id": "abc"})
    assert response.status_code == 401


def test_review_listing_is_public():
    request = factory.get("/api/products/1/reviews/")
    request.user = _anonymous()
    response = validate_request_context(request, ProductReviewListView, {"product_id": 1})
    assert response is None


def test_review_submission_requires_user():
    request = factory.post("/api/products/1/reviews/", {"rating": 5}, format="json")
    request.user = _anonymous()
    response = validate_request_context(request, ProductReviewListView, {"product_id": 1})
    assert response.status_code == 401


def test_profile_requires_user():
    request = factory.get("/api/auth/me/")
    request.user = _anonymous()
    assert validate_request_context(request, MeView, {}).status_code == 401


def test_views_without_rules_pass_through():
    request = factory.get("/api/products/")
    request.user = _anonymous()
    assert validate_request_context(request, ProductListView, {}) is None


def test_parse_positive_id():
    assert parse_positive_id("12") == 12
    assert parse_positive_id(5) == 5
    assert parse_positive_id("0") is None
    assert parse_positive_id("-3") is None
    assert parse_positive_id("1.5") is None
    assert parse_positive_id(True) is None
    assert parse_positive_id(None) is None


def test_middleware_no_view_class_returns_none():
    middleware = RequestValidationMiddleware(lambda req: None)
    request = factory.get("/health/live")
    response = middleware.process_view(request, lambda req: req, [], {})
    assert response is None


def test_middleware_returns_rendered_error_for_blocked_request():
    middleware = RequestValidationMiddleware(lambda req: None)
    request = factory.get("/api/cart/")
    request.user = _anonymous()
    response = middleware.process_view(request, CartView.as_view(), [], {})
    assert response.status_code == 401
    response.render()
    assert b"UNAUTHORIZED" in response.content
