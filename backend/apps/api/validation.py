from typing import Any, Callable, Dict, Optional

from django.http import HttpRequest
from rest_framework.exceptions import AuthenticationFailed as DRFAuthenticationFailed
from rest_framework_simplejwt.exceptions import InvalidToken

from apps.api.authentication import CookieJWTAuthentication
from apps.api.utils import error_response
from apps.common import get_logger

logger = get_logger(__name__).bind(component="api", layer="validation")

_jwt_authenticator = CookieJWTAuthentication()


def _is_authenticated_user(request: HttpRequest) -> bool:
    user = getattr(request, "user", None)
    if user and getattr(user, "is_authenticated", False) and getattr(user, "id", None):
        return True

    # DRF authenticates lazily inside the view; this runs earlier, so resolve
    # the JWT from the bearer header or the access cookie here.
    try:
        authenticated = _jwt_authenticator.authenticate(request)
    except (InvalidToken, DRFAuthenticationFailed) as exc:
        logger.warning("JWT authentication failed", detail=str(exc))
        return False
    if not authenticated:
        return False

    user, token = authenticated
    if not getattr(user, "is_authenticated", False) or not getattr(user, "id", None):
        return False
    request.user = user
    request.auth = token
    logger.debug("Authenticated user from JWT", user_id=user.id)
    return True


def _is_privileged_user(user: Any) -> bool:
    return bool(getattr(user, "is_staff", False) or getattr(user, "is_superuser", False))


def _require_user(request: HttpRequest, view_name: str) -> Optional[Any]:
    if not _is_authenticated_user(request):
        logger.warning("Authentication required", view=view_name, method=request.method)
        return error_response("UNAUTHORIZED", "Authentication required")
    request.validated_user_id = int(request.user.id)
    request.is_privileged_user = _is_privileged_user(request.user)
    return None


def parse_positive_id(raw: Any) -> Optional[int]:
    """Digits-only positive integer, otherwise ``None``."""
    if isinstance(raw, bool):
        return None
    if isinstance(raw, int):
        return raw if raw > 0 else None
    if isinstance(raw, str) and raw.isdigit():
        value = int(raw)
        return value if value > 0 else None
    return None


def _validate_cart(request: HttpRequest, view_kwargs: Dict[str, Any]) -> Optional[Any]:
    return _require_user(request, "CartView")


def _validate_cart_item(request: HttpRequest, view_kwargs: Dict[str, Any]) -> Optional[Any]:
    blocked = _require_user(request, "CartItemView")
    if blocked is not None:
        return blocked
    raw_id = view_kwargs.get("line_item_id")
    line_item_id = parse_positive_id(raw_id)
    if line_item_id is None:
        logger.warning("Invalid line item identifier", value=raw_id, actor_id=request.validated_user_id)
        return error_response(
            "VALIDATION_ERROR",
            "Cart item id must be a positive integer",
            {"lineItemId": raw_id},
        )
    request.validated_line_item_id = line_item_id
    return None


def _validate_review_submission(request: HttpRequest, view_kwargs: Dict[str, Any]) -> Optional[Any]:
    if request.method != "POST":
        request.validated_user_id = None
        return None
    return _require_user(request, "ProductReviewListView")


def _validate_profile(request: HttpRequest, view_kwargs: Dict[str, Any]) -> Optional[Any]:
    return _require_user(request, "MeView")


_VIEW_RULES: Dict[str, Callable[[HttpRequest, Dict[str, Any]], Optional[Any]]] = {
    "CartView": _validate_cart,
    "CartItemView": _validate_cart_item,
    "ProductReviewListView": _validate_review_submission,
    "MeView": _validate_profile,
}


def validate_request_context(request: HttpRequest, view_class, view_kwargs) -> Any:
    """
    Request level checks for API views that need an authenticated actor or
    path parsing before the view runs.

    Returns an error response when the request is rejected; otherwise ``None``
    with the validated values attached to ``request``. Methods the view does
    not implement are left to DRF so it can answer 405 with an ``Allow`` header.
    """
    view_name = getattr(view_class, "__name__", "")
    rule = _VIEW_RULES.get(view_name)
    if rule is None:
        return None
    method = (getattr(request, "method", "") or "").lower()
    if method not in getattr(view_class, "http_method_names", ()) or not hasattr(view_class, method):
        logger.debug("Skipping validation for unsupported method", view=view_name, method=method)
        return None
    logger.debug("Running request context validation", view=view_name, method=method)
    return rule(request, view_kwargs or {})
