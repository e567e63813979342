"""Error envelope for the API.

Every failure leaves the API as ``{"success": false, "message": ..., "errors": [...]}``.
"""

from __future__ import annotations

from typing import Any

import structlog
from django.conf import settings  # type: ignore
from rest_framework import status  # type: ignore
from rest_framework.exceptions import ValidationError  # type: ignore
from rest_framework.response import Response  # type: ignore
from rest_framework.views import exception_handler  # type: ignore

logger = structlog.get_logger(__name__)

NON_FIELD_KEY = "non_field_errors"


class ServiceError(Exception):
    """Business rule violation raised by domain services."""

    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Request could not be processed"

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)


def flatten_errors(detail: Any, prefix: str = "") -> list[dict[str, str]]:
    """Turn nested DRF error details into ``[{field, message}]`` with dotted field names."""

    if isinstance(detail, dict):
        errors: list[dict[str, str]] = []
        for key, value in detail.items():
            if key == NON_FIELD_KEY:
                field = prefix or NON_FIELD_KEY
            else:
                field = f"{prefix}.{key}" if prefix else str(key)
            errors.extend(flatten_errors(value, field))
        return errors

    if isinstance(detail, (list, tuple)):
        errors = []
        for index, item in enumerate(detail):
            if isinstance(item, (dict, list, tuple)):
                errors.extend(flatten_errors(item, f"{prefix}.{index}" if prefix else str(index)))
            else:
                errors.append({"field": prefix or NON_FIELD_KEY, "message": str(item)})
        return errors

    return [{"field": prefix or NON_FIELD_KEY, "message": str(detail)}]


def error_payload(message: str, errors: list[dict[str, str]] | None = None, **extra: Any) -> dict[str, Any]:
    payload: dict[str, Any] = {"success": False, "message": message}
    if errors:
        payload["errors"] = errors
    payload.update(extra)
    return payload


def server_error_payload(exc: BaseException | None = None) -> dict[str, Any]:
    """Generic 500 body; the underlying message is exposed only in debug mode."""

    detail = str(exc) if (settings.DEBUG and exc is not None) else "Internal server error"
    return error_payload("Something went wrong!", error=detail)


def api_exception_handler(exc: Exception, context: dict[str, Any]) -> Response:
    """DRF exception handler producing the JSON error envelope."""

    if isinstance(exc, ServiceError):
        return Response(error_payload(exc.message), status=exc.status_code)

    response = exception_handler(exc, context)

    if response is None:
        view = context.get("view")
        logger.error(
            "api.unhandled_exception",
            view=view.__class__.__name__ if view is not None else None,
            error=str(exc),
            exc_info=exc,
        )
        return Response(server_error_payload(exc), status=status.HTTP_500_INTERNAL_SERVER_ERROR)

    if isinstance(exc, ValidationError):
        errors = flatten_errors(exc.detail)
        message = "Validation failed"
        if len(errors) == 1 and errors[0]["field"] == NON_FIELD_KEY:
            message = errors[0]["message"]
        response.data = error_payload(message, errors)
        return response

    data = response.data
    detail = data.get("detail") if isinstance(data, dict) else None
    response.data = error_payload(str(detail) if detail else str(exc))
    return response
