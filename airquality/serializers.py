from __future__ import annotations

from typing import ClassVar

from rest_framework import serializers

from climate.serializers import CoordinateSerializer
from config.api.responses import JSONValue

from .types import AirQualityReport


class AirQualityParamsSerializer(serializers.Serializer):
    lat: ClassVar[serializers.FloatField] = serializers.FloatField(
        min_value=-90.0, max_value=90.0
    )
    lon: ClassVar[serializers.FloatField] = serializers.FloatField(
        min_value=-180.0, max_value=180.0
    )


class AqiReadingSerializer(serializers.Serializer):
    value: ClassVar[serializers.FloatField] = serializers.FloatField(
        allow_null=True
    )
    level: ClassVar[serializers.CharField] = serializers.CharField()
    color: ClassVar[serializers.CharField] = serializers.CharField()


class EnvironmentSerializer(serializers.Serializer):
    temp: ClassVar[serializers.FloatField] = serializers.FloatField(
        source="temperature_c", allow_null=True
    )
    humidity: ClassVar[serializers.FloatField] = serializers.FloatField(
        source="humidity_pct", allow_null=True
    )
    pressure: ClassVar[serializers.FloatField] = serializers.FloatField(
        source="pressure_hpa", allow_null=True
    )


class AirQualityReportSerializer(serializers.Serializer):
    coordinates: ClassVar[CoordinateSerializer] = CoordinateSerializer(
        allow_null=True
    )
    location: ClassVar[serializers.CharField] = serializers.CharField(
        allow_null=True
    )
    aqi: ClassVar[AqiReadingSerializer] = AqiReadingSerializer()
    dominant: ClassVar[serializers.CharField] = serializers.CharField(
        allow_null=True
    )
    mainPollutants: ClassVar[serializers.DictField] = serializers.DictField(  # noqa: N815
        source="pollutants", child=AqiReadingSerializer()
    )
    environment: ClassVar[EnvironmentSerializer] = EnvironmentSerializer(
        source="*"
    )
    time: ClassVar[serializers.CharField] = serializers.CharField(
        allow_null=True
    )
    source: ClassVar[serializers.CharField] = serializers.CharField()  # type: ignore[misc,assignment]


def serialize_report(report: AirQualityReport) -> dict[str, JSONValue]:
    return dict(AirQualityReportSerializer(report).data)
