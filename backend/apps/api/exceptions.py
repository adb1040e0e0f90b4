from __future__ import annotations

from typing import Any, Dict, Mapping, Optional, Tuple

from django.core.exceptions import (
    PermissionDenied as DjangoPermissionDenied,
    ValidationError as DjangoValidationError,
)
from django.http import Http404
from rest_framework import exceptions as drf_exceptions
from rest_framework import status
from rest_framework.response import Response
from rest_framework.views import exception_handler as drf_exception_handler

from apps.api.utils import error_response
from apps.common import get_logger

logger = get_logger(__name__).bind(component="api", layer="exception")

# Exception family -> (code, fallback message). Checked in order.
_EXCEPTION_CODES: Tuple[Tuple[tuple, str, str], ...] = (
    ((drf_exceptions.ValidationError, drf_exceptions.ParseError), "VALIDATION_ERROR", "Validation failed"),
    ((drf_exceptions.NotAuthenticated, drf_exceptions.AuthenticationFailed), "UNAUTHORIZED", "Authentication required"),
    ((drf_exceptions.PermissionDenied, DjangoPermissionDenied), "FORBIDDEN", "You do not have permission to perform this action"),
    ((drf_exceptions.NotFound, Http404), "NOT_FOUND", "Resource not found"),
    ((drf_exceptions.MethodNotAllowed,), "METHOD_NOT_ALLOWED", "Method not allowed"),
    ((drf_exceptions.UnsupportedMediaType,), "UNSUPPORTED_MEDIA_TYPE", "Unsupported media type"),
)


class ApplicationError(Exception):
    """
    Domain error raised from services or views and rendered by
    :func:`global_exception_handler`.
    """

    def __init__(
        self,
        code: str,
        message: str,
        *,
        status_code: Optional[int] = None,
        details: Optional[Any] = None,
        hint: Optional[str] = None,
        headers: Optional[Mapping[str, Any]] = None,
    ):
        super().__init__(message)
        self.code = code
        self.message = message
        self.status_code = status_code
        self.details = details
        self.hint = hint
        self.headers = headers

    def to_response(self) -> Response:
        return error_response(
            self.code,
            self.message,
            self.details,
            http_status=self.status_code,
            hint=self.hint,
            headers=self.headers,
        )


def global_exception_handler(exc: Exception, context: Dict[str, Any]) -> Response:
    """DRF ``EXCEPTION_HANDLER``: every failure leaves as an ``{"error": ...}`` body."""
    log = _bind_logger(context)

    if isinstance(exc, ApplicationError):
        log.info("Handled application error", code=exc.code, status=exc.status_code)
        return exc.to_response()

    if isinstance(exc, DjangoValidationError):
        exc = drf_exceptions.ValidationError(
            exc.message_dict if hasattr(exc, "message_dict") else list(exc.messages)
        )

    response = drf_exception_handler(exc, context)
    if response is None:
        log.exception("Unhandled exception bubbled to global handler")
        return error_response(
            "SERVER_ERROR",
            "Something went wrong",
            http_status=status.HTTP_500_INTERNAL_SERVER_ERROR,
        )

    code, message, details = _classify(exc, response)
    # DRF puts Allow on 405 and WWW-Authenticate on 401; both must survive.
    headers = {
        name: response[name]
        for name in ("Allow", "WWW-Authenticate", "Retry-After")
        if response.has_header(name)
    }
    log.info("Converted API exception", code=code, status=response.status_code)
    return error_response(
        code,
        message,
        details,
        http_status=response.status_code,
        headers=headers or None,
    )


def _bind_logger(context: Dict[str, Any]):
    log = logger
    view = context.get("view")
    request = context.get("request")
    if view is not None:
        log = log.bind(view=view.__class__.__name__)
    if request is not None:
        log = log.bind(method=getattr(request, "method", None), path=getattr(request, "path", None))
    return log


def _classify(exc: Exception, response: Response) -> Tuple[str, str, Optional[Any]]:
    payload = response.data
    for families, code, fallback in _EXCEPTION_CODES:
        if isinstance(exc, families):
            if code == "VALIDATION_ERROR":
                return code, _extract_message(payload, fallback), payload
            if code == "METHOD_NOT_ALLOWED":
                allowed = response["Allow"] if response.has_header("Allow") else ""
                details = {"allowedMethods": [m.strip() for m in allowed.split(",") if m.strip()]}
                return code, _extract_message(payload, fallback), details
            return code, _extract_message(payload, fallback), None
    if response.status_code >= 500:
        return "SERVER_ERROR", "Something went wrong", None
    return "REQUEST_FAILED", _extract_message(payload, "Request failed"), None


def _extract_message(payload: Any, fallback: str) -> str:
    if isinstance(payload, str) and payload.strip():
        return payload
    if isinstance(payload, dict) and isinstance(payload.get("detail"), str):
        return payload["detail"]
    if isinstance(payload, list) and payload and isinstance(payload[0], str):
        return payload[0]
    return fallback


__all__ = ["ApplicationError", "global_exception_handler"]
