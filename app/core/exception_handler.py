"""
DRF exception handler producing the application's error body.

Every error leaving the REST API has the shape:
    {"error": "<human readable message>", "error_code": "<MACHINE_CODE>"}

Serializer validation failures additionally carry the field errors:
    {"error": "...", "error_code": "VALIDATION_ERROR", "errors": {"content": [...]}}

Mapping:
    core.exceptions.*            -> exception.status_code
    rest_framework APIException  -> its status_code (401, 403, 404, 405, 400)
    django Http404               -> 404
    anything else                -> 500 "Internal server error" (logged)

Configured in settings:
    REST_FRAMEWORK["EXCEPTION_HANDLER"] = "core.exception_handler.api_exception_handler"
"""

from __future__ import annotations

import logging

from rest_framework import exceptions, status
from rest_framework.response import Response
from rest_framework.views import exception_handler

from core.exceptions import BaseApplicationError

logger = logging.getLogger(__name__)

DRF_ERROR_CODES = {
    status.HTTP_400_BAD_REQUEST: "VALIDATION_ERROR",
    status.HTTP_401_UNAUTHORIZED: "UNAUTHENTICATED",
    status.HTTP_403_FORBIDDEN: "PERMISSION_DENIED",
    status.HTTP_404_NOT_FOUND: "NOT_FOUND",
    status.HTTP_405_METHOD_NOT_ALLOWED: "METHOD_NOT_ALLOWED",
    status.HTTP_415_UNSUPPORTED_MEDIA_TYPE: "UNSUPPORTED_MEDIA_TYPE",
    status.HTTP_429_TOO_MANY_REQUESTS: "RATE_LIMIT_EXCEEDED",
}


def _first_message(detail) -> str:
    """Return the first human-readable message from a DRF error detail."""
    if isinstance(detail, dict):
        for value in detail.values():
            return _first_message(value)
        return "Invalid input"
    if isinstance(detail, list):
        return _first_message(detail[0]) if detail else "Invalid input"
    return str(detail)


def api_exception_handler(exc, context):
    """
    Render any exception raised in a view as an error body.

    Args:
        exc: The raised exception
        context: DRF handler context (view, request, args, kwargs)

    Returns:
        Response with {error, error_code[, errors]} and the matching status
    """
    if isinstance(exc, BaseApplicationError):
        return Response(exc.to_dict(), status=exc.status_code)

    response = exception_handler(exc, context)

    if response is None:
        view = context.get("view")
        logger.error(
            f"Unhandled exception in {view.__class__.__name__ if view else 'view'}: {exc}",
            exc_info=exc,
        )
        return Response(
            {"error": "Internal server error", "error_code": "UNEXPECTED_ERROR"},
            status=status.HTTP_500_INTERNAL_SERVER_ERROR,
        )

    body = {
        "error": _first_message(response.data),
        "error_code": DRF_ERROR_CODES.get(response.status_code, "API_ERROR"),
    }
    if isinstance(exc, exceptions.ValidationError) and isinstance(exc.detail, dict):
        body["errors"] = response.data
    elif isinstance(response.data, dict) and "detail" in response.data:
        body["error"] = str(response.data["detail"])

    response.data = body
    return response
