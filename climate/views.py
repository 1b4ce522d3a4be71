"""Climate API endpoints.

Authentication: none; every endpoint is public.
Responses: wrapped by `config.api.responses.success_response`
(code/description/data). Errors go through
`config.api.exceptions.custom_exception_handler`.
"""

from __future__ import annotations

from asgiref.sync import async_to_sync
from drf_spectacular.utils import (
    OpenApiParameter,
    OpenApiTypes,
    extend_schema,
)
from rest_framework.permissions import AllowAny
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.views import APIView

from config.api.openapi import (
    error_envelope_serializer,
    success_envelope_serializer,
)
from config.api.responses import success_response

from .engines.types import AggregateResult, DateRange
from .serializers import (
    AggregateParamsSerializer,
    AggregateResultSerializer,
    BaseClimateParamsSerializer,
    LatestResultSerializer,
    SeriesResultSerializer,
    serialize_aggregate,
    serialize_latest,
    serialize_series,
)
from .services import (
    AggregateOptions,
    get_aggregate_for_center,
    get_point_series,
)

aggregate_success_schema = success_envelope_serializer(
    "ClimateAggregateSuccess", data=AggregateResultSerializer()
)
latest_success_schema = success_envelope_serializer(
    "ClimateLatestSuccess", data=LatestResultSerializer()
)
series_success_schema = success_envelope_serializer(
    "ClimateSeriesSuccess", data=SeriesResultSerializer()
)
climate_error_schema = error_envelope_serializer("ClimateErrorResponse")

_COMMON_PARAMETERS = [
    OpenApiParameter(
        name="lat",
        type=OpenApiTypes.FLOAT,
        location=OpenApiParameter.QUERY,
        required=True,
    ),
    OpenApiParameter(
        name="lon",
        type=OpenApiTypes.FLOAT,
        location=OpenApiParameter.QUERY,
        required=True,
    ),
    OpenApiParameter(
        name="start",
        type=OpenApiTypes.STR,
        location=OpenApiParameter.QUERY,
        required=False,
        description="YYYYMMDD (default: 7 days before end)",
    ),
    OpenApiParameter(
        name="end",
        type=OpenApiTypes.STR,
        location=OpenApiParameter.QUERY,
        required=False,
        description="YYYYMMDD (default: today, UTC)",
    ),
]

_AGGREGATE_PARAMETERS = [
    *_COMMON_PARAMETERS,
    OpenApiParameter(
        name="mode",
        type=OpenApiTypes.STR,
        location=OpenApiParameter.QUERY,
        required=False,
        enum=["grid", "point"],
        description="grid averages the lattice, point uses the center only",
    ),
    OpenApiParameter(
        name="stats",
        type=OpenApiTypes.STR,
        location=OpenApiParameter.QUERY,
        required=False,
        enum=["full", "mean-only"],
    ),
]

_ERROR_RESPONSES = {
    400: climate_error_schema,
    500: climate_error_schema,
    502: climate_error_schema,
}


def _aggregate_from_request(request: Request) -> AggregateResult:
    serializer = AggregateParamsSerializer(data=request.query_params)
    serializer.is_valid(raise_exception=True)
    params = serializer.validated_data
    return async_to_sync(get_aggregate_for_center)(
        lat=float(params["lat"]),
        lon=float(params["lon"]),
        start=str(params["start"]),
        end=str(params["end"]),
        options=AggregateOptions(
            mode=params["mode"],
            statistics_mode=params["stats"],
        ),
    )


class ClimateAggregateView(APIView):
    """Grid-sampled climate statistics around a coordinate.

    Response: success envelope with per-variable, per-date statistics and
    the latest aggregated value per variable.
    """

    permission_classes = [AllowAny]

    @extend_schema(
        parameters=_AGGREGATE_PARAMETERS,
        responses={200: aggregate_success_schema, **_ERROR_RESPONSES},
    )
    def get(self, request: Request) -> Response:
        result = _aggregate_from_request(request)
        return success_response(
            serialize_aggregate(result),
            "Aggregated statistics per variable and date",
        )


class ClimateLatestView(APIView):
    """Most recent aggregated value per variable.

    Same engine as `ClimateAggregateView`, reduced to the latest date.
    """

    permission_classes = [AllowAny]

    @extend_schema(
        parameters=_AGGREGATE_PARAMETERS,
        responses={200: latest_success_schema, **_ERROR_RESPONSES},
    )
    def get(self, request: Request) -> Response:
        result = _aggregate_from_request(request)
        return success_response(
            serialize_latest(result), "Latest value per variable"
        )


class ClimateSeriesView(APIView):
    """Raw daily series for the exact coordinate requested."""

    permission_classes = [AllowAny]

    @extend_schema(
        parameters=_COMMON_PARAMETERS,
        responses={200: series_success_schema, **_ERROR_RESPONSES},
    )
    def get(self, request: Request) -> Response:
        serializer = BaseClimateParamsSerializer(data=request.query_params)
        serializer.is_valid(raise_exception=True)
        params = serializer.validated_data
        date_range = DateRange(
            start=str(params["start"]), end=str(params["end"])
        )
        point = async_to_sync(get_point_series)(
            lat=float(params["lat"]),
            lon=float(params["lon"]),
            start=date_range.start,
            end=date_range.end,
        )
        return success_response(
            serialize_series(point, date_range), "Daily series per variable"
        )
