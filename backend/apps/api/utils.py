from collections.abc import Mapping
from typing import Any, Dict, Optional

from rest_framework import status
from rest_framework.exceptions import ValidationError
from rest_framework.response import Response
from rest_framework.serializers import as_serializer_error

ERROR_STATUS_MAP = {
    "VALIDATION_ERROR": status.HTTP_400_BAD_REQUEST,
    "UNAUTHORIZED": status.HTTP_401_UNAUTHORIZED,
    "FORBIDDEN": status.HTTP_403_FORBIDDEN,
    "NOT_FOUND": status.HTTP_404_NOT_FOUND,
    "METHOD_NOT_ALLOWED": status.HTTP_405_METHOD_NOT_ALLOWED,
    "UNSUPPORTED_MEDIA_TYPE": status.HTTP_415_UNSUPPORTED_MEDIA_TYPE,
    "SERVER_ERROR": status.HTTP_500_INTERNAL_SERVER_ERROR,
}


def _normalize_details(details: Any) -> Any:
    if isinstance(details, ValidationError):
        return as_serializer_error(details)
    if isinstance(details, Mapping):
        return dict(details)
    if isinstance(details, Exception):
        return {"type": details.__class__.__name__}
    return details


def error_response(
    code: str,
    message: str,
    details: Optional[Any] = None,
    http_status: Optional[int] = None,
    *,
    hint: Optional[str] = None,
    headers: Optional[Mapping[str, str]] = None,
) -> Response:
    """
    Build the ``{"error": {...}}`` body every API failure uses.

    The HTTP status comes from ``http_status`` when given, otherwise from the
    code (unknown codes fall back to 400).
    """
    code = (code or "").strip().upper()
    message = (message or "").strip()
    if not code or not message:
        raise ValueError("error_response requires a non-empty code and message")

    status_code = int(http_status) if http_status is not None else ERROR_STATUS_MAP.get(
        code, status.HTTP_400_BAD_REQUEST
    )
    if not 400 <= status_code <= 599:
        raise ValueError("error_response status must be a 4xx or 5xx code")

    body: Dict[str, Any] = {"code": code, "message": message, "status": status_code}
    if details is not None:
        body["details"] = _normalize_details(details)
    if hint:
        body["hint"] = hint

    response_headers = {str(k): str(v) for k, v in headers.items()} if headers else None
    return Response({"error": body}, status=status_code, headers=response_headers)
