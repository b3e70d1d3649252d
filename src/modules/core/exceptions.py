"""Project-wide DRF exception handler.

Every error leaving the API is a JSON object with a single human-readable
``error`` field.  Framework errors (authentication, parse, method, throttle)
are flattened into that shape; anything DRF does not recognise is logged
and answered with a generic 500 so no request ends in an HTML error page.
"""

from __future__ import annotations

from typing import Any, Optional

import structlog
from rest_framework import status
from rest_framework.exceptions import (
    AuthenticationFailed,
    NotAuthenticated,
    ValidationError,
)
from rest_framework.response import Response
from rest_framework.views import exception_handler

logger = structlog.get_logger(__name__)

INTERNAL_ERROR_MESSAGE = "Internal server error"


def error_response(message: str, status_code: int) -> Response:
    """Build the standard ``{"error": ...}`` response body."""
    return Response({"error": message}, status=status_code)


def api_exception_handler(exc: Exception, context: dict[str, Any]) -> Optional[Response]:
    response = exception_handler(exc, context)

    if response is None:
        view = context.get("view")
        logger.exception(
            "api.unhandled_exception",
            view=view.__class__.__name__ if view else None,
            error_type=exc.__class__.__name__,
        )
        return error_response(
            INTERNAL_ERROR_MESSAGE, status.HTTP_500_INTERNAL_SERVER_ERROR
        )

    if isinstance(exc, NotAuthenticated):
        message = "Not authenticated"
    elif isinstance(exc, AuthenticationFailed):
        message = "Invalid authentication"
    elif isinstance(exc, ValidationError):
        message = _first_message(exc.detail)
    else:
        message = _first_message(getattr(exc, "detail", str(exc)))

    response.data = {"error": message}
    return response


def _first_message(detail: Any) -> str:
    """Collapse DRF's nested error detail into one readable line."""
    if isinstance(detail, dict):
        for field, value in detail.items():
            inner = _first_message(value)
            if field in ("detail", "non_field_errors"):
                return inner
            return f"{field}: {inner}"
        return "Invalid request"
    if isinstance(detail, (list, tuple)):
        return _first_message(detail[0]) if detail else "Invalid request"
    return str(detail)
