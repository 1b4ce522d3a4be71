"""Air quality API endpoint.

Authentication: none.
Responses: wrapped by `config.api.responses.success_response`
(code/description/data).
"""

from __future__ import annotations

from asgiref.sync import async_to_sync
from drf_spectacular.utils import OpenApiParameter, OpenApiTypes, extend_schema
from rest_framework.permissions import AllowAny
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.views import APIView

from config.api.openapi import (
    error_envelope_serializer,
    success_envelope_serializer,
)
from config.api.responses import success_response

from .serializers import (
    AirQualityParamsSerializer,
    AirQualityReportSerializer,
    serialize_report,
)
from .services import get_air_quality

air_quality_success_schema = success_envelope_serializer(
    "AirQualitySuccess", data=AirQualityReportSerializer()
)
air_quality_error_schema = error_envelope_serializer("AirQualityError")


class AirQualityView(APIView):
    """Current air quality at the station nearest to a coordinate."""

    permission_classes = [AllowAny]

    @extend_schema(
        parameters=[
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
        ],
        responses={
            200: air_quality_success_schema,
            400: air_quality_error_schema,
            502: air_quality_error_schema,
        },
    )
    def get(self, request: Request) -> Response:
        serializer = AirQualityParamsSerializer(data=request.query_params)
        serializer.is_valid(raise_exception=True)
        params = serializer.validated_data
        report = async_to_sync(get_air_quality)(
            lat=float(params["lat"]), lon=float(params["lon"])
        )
        return success_response(serialize_report(report), "Air quality data")
