"""Error taxonomy for the climate pipeline.

`UpstreamError` is raised by providers and absorbed by the point fetcher;
the remaining classes surface through the DRF exception handler.
"""

from __future__ import annotations

from collections.abc import Sequence

from rest_framework import status
from rest_framework.exceptions import APIException

from .engines.types import PointFailure


class UpstreamError(APIException):
    status_code = status.HTTP_502_BAD_GATEWAY
    default_detail = "Upstream provider request failed."
    default_code = "upstream_error"

    def __init__(
        self, message: str, *, upstream_status: int | None = None
    ) -> None:
        super().__init__(detail=message)
        self.message = message
        self.upstream_status = upstream_status


class TotalFailureError(APIException):
    status_code = status.HTTP_502_BAD_GATEWAY
    default_detail = "All upstream point requests failed."
    default_code = "total_failure"

    def __init__(self, failures: Sequence[PointFailure]) -> None:
        super().__init__()
        self.failures = list(failures)

    @property
    def envelope_data(self) -> list[dict[str, object]]:
        return [
            {
                "lat": failure.coordinate.lat,
                "lon": failure.coordinate.lon,
                "error": failure.error,
                "status_code": failure.status_code,
            }
            for failure in self.failures
        ]


class InternalError(APIException):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_detail = "Internal server error"
    default_code = "internal_error"
