from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import TYPE_CHECKING, Any, TypeAlias

if TYPE_CHECKING:
    from rest_framework.response import Response

logger = logging.getLogger(__name__)

JSONValue: TypeAlias = (
    None
    | bool
    | int
    | float
    | str
    | list["JSONValue"]
    | dict[str, "JSONValue"]
)


def _to_json_value(value: object) -> JSONValue:
    if value is None or isinstance(value, str | int | float | bool):
        return value
    if isinstance(value, Mapping):
        return {str(k): _to_json_value(v) for k, v in value.items()}
    if isinstance(value, list | tuple):
        return [_to_json_value(v) for v in value]
    return str(value)


def _describe_validation(detail: dict[str, JSONValue]) -> str:
    fields = sorted(key for key in detail if key != "non_field_errors")
    if fields:
        return "Missing or invalid parameters: " + ", ".join(fields)
    errors = detail.get("non_field_errors")
    if isinstance(errors, list) and errors and isinstance(errors[0], str):
        return errors[0]
    return "Invalid request parameters"


def custom_exception_handler(
    exc: Exception,
    context: dict[str, Any],
) -> Response:
    """Render every API error in the `{code, description, data}` envelope.

    Exceptions may carry an ``envelope_data`` attribute (see
    `climate.exceptions`) which becomes the envelope's ``data``; validation
    errors expose the per-field messages. Anything DRF does not recognise is
    logged and rendered as a bare 500 without detail.
    """
    # Lazy imports: safe even if settings aren't configured at import time.
    from rest_framework import status
    from rest_framework.exceptions import ValidationError
    from rest_framework.response import Response
    from rest_framework.views import exception_handler as drf_exception_handler

    from .responses import envelope

    response = drf_exception_handler(exc, context)

    if response is None:
        view = context.get("view")
        logger.error(
            "api.unhandled view=%s err=%s",
            view.__class__.__name__ if view is not None else "-",
            exc.__class__.__name__,
            exc_info=exc,
        )
        return Response(
            envelope(
                status.HTTP_500_INTERNAL_SERVER_ERROR,
                "Internal server error",
                None,
            ),
            status=status.HTTP_500_INTERNAL_SERVER_ERROR,
        )

    detail = _to_json_value(response.data)
    data: JSONValue = None
    description = "Request failed"

    if isinstance(exc, ValidationError):
        if isinstance(detail, dict):
            description = _describe_validation(detail)
        elif isinstance(detail, list) and detail and isinstance(detail[0], str):
            description = detail[0]
        data = detail
    elif isinstance(detail, dict):
        maybe = detail.get("detail")
        if isinstance(maybe, str):
            description = maybe

    extra = getattr(exc, "envelope_data", None)
    if extra is not None:
        data = _to_json_value(extra)

    response.data = envelope(response.status_code, description, data)
    return response
