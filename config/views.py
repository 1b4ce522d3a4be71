"""Project-level non-DRF views.

This module contains the root landing endpoint used for quick service checks
and links to the interactive API documentation endpoints.
"""

from __future__ import annotations

from django.http import HttpRequest, JsonResponse


def home(request: HttpRequest) -> JsonResponse:
    """Return basic service metadata and documentation links."""
    return JsonResponse(
        {
            "ok": True,
            "service": "enviro-apis",
            "endpoints": {
                "climate_aggregate": "/api/v1/climate/aggregate/",
                "climate_latest": "/api/v1/climate/latest/",
                "climate_series": "/api/v1/climate/series/",
                "air_quality": "/api/v1/air-quality/",
            },
            "docs": "/api/docs/",
            "redoc": "/api/redoc/",
        }
    )
