from __future__ import annotations

from datetime import date
from typing import ClassVar

from django.conf import settings
from rest_framework import serializers

from config.api.responses import JSONValue

from .engines.types import AggregateResult, DateRange, PointSuccess
from .timeutils import default_range, parse_yyyymmdd

DEFAULT_LOOKBACK_DAYS = int(
    getattr(settings, "CLIMATE_DEFAULT_LOOKBACK_DAYS", 7)
)
MAX_RANGE_DAYS = int(getattr(settings, "CLIMATE_MAX_RANGE_DAYS", 366))


class BaseClimateParamsSerializer(serializers.Serializer):
    lat: ClassVar[serializers.FloatField] = serializers.FloatField(
        min_value=-90.0, max_value=90.0
    )
    lon: ClassVar[serializers.FloatField] = serializers.FloatField(
        min_value=-180.0, max_value=180.0
    )
    start: ClassVar[serializers.CharField] = serializers.CharField(
        required=False, allow_blank=True
    )
    end: ClassVar[serializers.CharField] = serializers.CharField(
        required=False, allow_blank=True
    )

    def _validate_day(self, value: str) -> str:
        if value == "":
            return value
        try:
            parse_yyyymmdd(value)
        except ValueError as exc:
            raise serializers.ValidationError(
                "Expected a YYYYMMDD date."
            ) from exc
        return value

    def validate_start(self, value: str) -> str:
        return self._validate_day(value)

    def validate_end(self, value: str) -> str:
        return self._validate_day(value)

    def validate(self, attrs: dict[str, object]) -> dict[str, object]:
        attrs = super().validate(attrs)
        defaults = default_range(DEFAULT_LOOKBACK_DAYS)
        start = str(attrs.get("start") or defaults.start)
        end = str(attrs.get("end") or defaults.end)
        start_day: date = parse_yyyymmdd(start)
        end_day: date = parse_yyyymmdd(end)
        if start_day > end_day:
            raise serializers.ValidationError("start must be on or before end.")
        if (end_day - start_day).days > MAX_RANGE_DAYS:
            raise serializers.ValidationError(
                "Requested range exceeds CLIMATE_MAX_RANGE_DAYS."
            )
        attrs["start"] = start
        attrs["end"] = end
        return attrs


class AggregateParamsSerializer(BaseClimateParamsSerializer):
    mode: ClassVar[serializers.ChoiceField] = serializers.ChoiceField(
        choices=("grid", "point"), required=False
    )
    grid: ClassVar[serializers.CharField] = serializers.CharField(
        required=False,
        allow_blank=True,
        help_text="Legacy switch: grid=1 selects single point mode.",
    )
    stats: ClassVar[serializers.ChoiceField] = serializers.ChoiceField(
        choices=("full", "mean-only"), required=False, default="full"
    )

    def validate(self, attrs: dict[str, object]) -> dict[str, object]:
        attrs = super().validate(attrs)
        if not attrs.get("mode"):
            attrs["mode"] = "point" if attrs.get("grid") == "1" else "grid"
        attrs.pop("grid", None)
        return attrs


class CoordinateSerializer(serializers.Serializer):
    lat: ClassVar[serializers.FloatField] = serializers.FloatField()
    lon: ClassVar[serializers.FloatField] = serializers.FloatField()


class DateRangeSerializer(serializers.Serializer):
    start: ClassVar[serializers.CharField] = serializers.CharField()
    end: ClassVar[serializers.CharField] = serializers.CharField()


class VariableStatSerializer(serializers.Serializer):
    mean: ClassVar[serializers.FloatField] = serializers.FloatField()
    stddev: ClassVar[serializers.FloatField] = serializers.FloatField(
        allow_null=True
    )
    min: ClassVar[serializers.FloatField] = serializers.FloatField(
        allow_null=True
    )
    max: ClassVar[serializers.FloatField] = serializers.FloatField(
        allow_null=True
    )
    count: ClassVar[serializers.IntegerField] = serializers.IntegerField()


class PointFailureSerializer(serializers.Serializer):
    coordinate: ClassVar[CoordinateSerializer] = CoordinateSerializer()
    error: ClassVar[serializers.CharField] = serializers.CharField()
    status_code: ClassVar[serializers.IntegerField] = (
        serializers.IntegerField(allow_null=True)
    )


class AggregateResultSerializer(serializers.Serializer):
    center: ClassVar[CoordinateSerializer] = CoordinateSerializer()
    sampled_points: ClassVar[CoordinateSerializer] = CoordinateSerializer(
        many=True
    )
    range: ClassVar[DateRangeSerializer] = DateRangeSerializer()
    mode: ClassVar[serializers.CharField] = serializers.CharField()
    statistics_mode: ClassVar[serializers.CharField] = (
        serializers.CharField()
    )
    per_variable_stats: ClassVar[serializers.DictField] = (
        serializers.DictField(
            child=serializers.DictField(child=VariableStatSerializer())
        )
    )
    latest_date: ClassVar[serializers.CharField] = serializers.CharField(
        allow_null=True
    )
    latest_by_variable: ClassVar[serializers.DictField] = (
        serializers.DictField(child=serializers.FloatField(allow_null=True))
    )
    failed_points: ClassVar[PointFailureSerializer] = PointFailureSerializer(
        many=True
    )


class LatestParameterSerializer(serializers.Serializer):
    variable: ClassVar[serializers.CharField] = serializers.CharField()
    value: ClassVar[serializers.FloatField] = serializers.FloatField(
        allow_null=True
    )


class LatestResultSerializer(serializers.Serializer):
    coordinates: ClassVar[CoordinateSerializer] = CoordinateSerializer()
    date: ClassVar[serializers.CharField] = serializers.CharField(
        allow_null=True
    )
    parameters: ClassVar[LatestParameterSerializer] = (
        LatestParameterSerializer(many=True)
    )


class SeriesParameterSerializer(serializers.Serializer):
    variable: ClassVar[serializers.CharField] = serializers.CharField()
    values: ClassVar[serializers.DictField] = serializers.DictField(
        child=serializers.FloatField()
    )


class SeriesResultSerializer(serializers.Serializer):
    coordinates: ClassVar[CoordinateSerializer] = CoordinateSerializer()
    range: ClassVar[DateRangeSerializer] = DateRangeSerializer()
    parameters: ClassVar[SeriesParameterSerializer] = (
        SeriesParameterSerializer(many=True)
    )


def serialize_aggregate(result: AggregateResult) -> dict[str, JSONValue]:
    return dict(AggregateResultSerializer(result).data)


def serialize_latest(result: AggregateResult) -> dict[str, JSONValue]:
    payload = {
        "coordinates": result.center,
        "date": result.latest_date,
        "parameters": [
            {"variable": variable, "value": value}
            for variable, value in result.latest_by_variable.items()
        ],
    }
    return dict(LatestResultSerializer(payload).data)


def serialize_series(
    point: PointSuccess, date_range: DateRange
) -> dict[str, JSONValue]:
    payload = {
        "coordinates": point.coordinate,
        "range": date_range,
        "parameters": [
            {"variable": variable, "values": values}
            for variable, values in sorted(point.series.items())
        ],
    }
    return dict(SeriesResultSerializer(payload).data)
