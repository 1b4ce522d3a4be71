from __future__ import annotations

from typing import TypeAlias

from rest_framework import status
from rest_framework.response import Response

JSONScalar: TypeAlias = str | int | float | bool | None
JSONValue: TypeAlias = JSONScalar | list["JSONValue"] | dict[str, "JSONValue"]


def envelope(
    code: int, description: str, data: JSONValue | None
) -> dict[str, JSONValue]:
    return {"code": code, "description": description, "data": data}


def success_response(
    data: JSONValue | None,
    description: str = "OK",
    *,
    status_code: int = status.HTTP_200_OK,
) -> Response:
    return Response(
        envelope(status_code, description, data), status=status_code
    )


def error_response(
    description: str,
    *,
    data: JSONValue | None = None,
    status_code: int = status.HTTP_400_BAD_REQUEST,
) -> Response:
    return Response(
        envelope(status_code, description, data), status=status_code
    )
