"""drf-spectacular helpers for documenting the project's response envelope.

The runtime response helpers in `config.api.responses` and the global DRF
exception handler wrap every API response in the same
`{code, description, data}` JSON envelope. These utilities generate matching
serializers for OpenAPI documentation without changing runtime behavior.
"""

from __future__ import annotations

from drf_spectacular.utils import inline_serializer
from rest_framework import serializers
from rest_framework.serializers import Serializer


def success_envelope_serializer(
    name: str,
    *,
    data: serializers.Field,
) -> Serializer:
    """Build an OpenAPI schema matching `success_response`."""

    return inline_serializer(
        name=name,
        fields={
            "code": serializers.IntegerField(),
            "description": serializers.CharField(),
            "data": data,
        },
    )


def error_envelope_serializer(name: str) -> Serializer:
    """Build an OpenAPI schema matching `custom_exception_handler`."""

    return inline_serializer(
        name=name,
        fields={
            "code": serializers.IntegerField(),
            "description": serializers.CharField(),
            "data": serializers.JSONField(allow_null=True),
        },
    )
