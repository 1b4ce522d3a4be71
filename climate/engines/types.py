from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from typing import Literal, TypeAlias

ProviderName = Literal["nasa_power"]
AggregationMode = Literal["grid", "point"]
StatisticsMode = Literal["full", "mean-only"]

COORD_PRECISION = 6
STAT_PRECISION = 2
FILL_VALUE = -999.0

# variable -> YYYYMMDD -> value
TimeSeriesByVariable: TypeAlias = dict[str, dict[str, float]]


@dataclass(frozen=True)
class Coordinate:
    lat: float
    lon: float

    @classmethod
    def rounded(cls, lat: float, lon: float) -> Coordinate:
        return cls(
            lat=round(float(lat), COORD_PRECISION),
            lon=round(float(lon), COORD_PRECISION),
        )

    def as_key(self) -> str:
        return f"{self.lat:.{COORD_PRECISION}f}:{self.lon:.{COORD_PRECISION}f}"


@dataclass(frozen=True)
class DateRange:
    """Inclusive range of `YYYYMMDD` day strings."""

    start: str
    end: str


@dataclass(frozen=True)
class PointSuccess:
    coordinate: Coordinate
    series: TimeSeriesByVariable
    ok: Literal[True] = True


@dataclass(frozen=True)
class PointFailure:
    coordinate: Coordinate
    error: str
    status_code: int | None = None
    ok: Literal[False] = False


PointResult: TypeAlias = PointSuccess | PointFailure


@dataclass(frozen=True)
class VariableStat:
    mean: float
    count: int
    stddev: float | None = None
    min: float | None = None
    max: float | None = None


@dataclass(frozen=True)
class AggregateResult:
    center: Coordinate
    sampled_points: Sequence[Coordinate]
    range: DateRange
    per_variable_stats: Mapping[str, Mapping[str, VariableStat]]
    latest_date: str | None
    latest_by_variable: Mapping[str, float | None]
    mode: AggregationMode = "grid"
    statistics_mode: StatisticsMode = "full"
    failed_points: Sequence[PointFailure] = field(default_factory=tuple)
