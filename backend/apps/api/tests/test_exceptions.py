from django.http import Http404
from rest_framework import status
from rest_framework.exceptions import MethodNotAllowed, NotAuthenticated, ValidationError
from rest_framework.test import APIRequestFactory

from apps.api.exceptions import ApplicationError, global_exception_handler

factory = APIRequestFactory()


class DummyView:
    pass


def _context(request):
    return {"request": request, "view": DummyView()}


def test_application_error_returns_structured_response():
    request = factory.post("/api/cart/")
    exc = ApplicationError(
        "FORBIDDEN",
        "Staff accounts cannot own a cart",
        status_code=status.HTTP_403_FORBIDDEN,
        details={"userId": 3},
    )
    response = global_exception_handler(exc, _context(request))
    payload = response.data["error"]
    assert response.status_code == status.HTTP_403_FORBIDDEN
    assert payload["code"] == "FORBIDDEN"
    assert payload["message"] == "Staff accounts cannot own a cart"
    assert payload["details"] == {"userId": 3}


def test_validation_error_preserves_details():
    request = factory.post("/api/cart/", data={})
    exc = ValidationError({"productId": ["This field is required."]})
    response = global_exception_handler(exc, _context(request))
    payload = response.data["error"]
    assert response.status_code == status.HTTP_400_BAD_REQUEST
    assert payload["code"] == "VALIDATION_ERROR"
    assert payload["message"] == "Validation failed"
    assert payload["details"] == {"productId": ["This field is required."]}


def test_method_not_allowed_keeps_allow_header():
    request = factory.put("/api/cart/")
    response = global_exception_handler(MethodNotAllowed("PUT"), _context(request))
    assert response.status_code == status.HTTP_405_METHOD_NOT_ALLOWED
    assert response.data["error"]["code"] == "METHOD_NOT_ALLOWED"


def test_http404_maps_to_not_found():
    request = factory.get("/api/products/999/")
    response = global_exception_handler(Http404(), _context(request))
    assert response.status_code == status.HTTP_404_NOT_FOUND
    assert response.data["error"]["code"] == "NOT_FOUND"


def test_not_authenticated_maps_to_unauthorized():
    request = factory.get("/api/cart/")
    response = global_exception_handler(NotAuthenticated(), _context(request))
    assert response.status_code == status.HTTP_401_UNAUTHORIZED
    assert response.data["error"]["code"] == "UNAUTHORIZED"


def test_unhandled_exception_returns_generic_message():
    request = factory.get("/api/cart/")
    response = global_exception_handler(RuntimeError("boom"), _context(request))
    payload = response.data["error"]
    assert response.status_code == status.HTTP_500_INTERNAL_SERVER_ERROR
    assert payload["code"] == "SERVER_ERROR"
    assert payload["message"] == "Something went wrong"
    assert "details" not in payload
