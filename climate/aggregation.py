from __future__ import annotations

import math
import statistics
from collections.abc import Iterable, Mapping, Sequence

from .engines.types import (
    FILL_VALUE,
    STAT_PRECISION,
    AggregateResult,
    Coordinate,
    DateRange,
    PointFailure,
    PointResult,
    PointSuccess,
    StatisticsMode,
    VariableStat,
)


def _usable(value: object) -> float | None:
    if value is None or isinstance(value, bool):
        return None
    try:
        number = float(value)  # type: ignore[arg-type]
    except (TypeError, ValueError, OverflowError):
        return None
    if number == FILL_VALUE or not math.isfinite(number):
        return None
    return number


def _round(value: float) -> float:
    return round(value, STAT_PRECISION)


def _describe(
    values: Sequence[float], statistics_mode: StatisticsMode
) -> VariableStat:
    mean = statistics.fmean(values)
    if statistics_mode == "mean-only":
        return VariableStat(mean=_round(mean), count=len(values))
    return VariableStat(
        mean=_round(mean),
        count=len(values),
        stddev=_round(statistics.pstdev(values, mu=mean)),
        min=_round(min(values)),
        max=_round(max(values)),
    )


def collect_cells(
    successes: Iterable[PointSuccess],
) -> dict[str, dict[str, list[float]]]:
    """Group values per ``(variable, date)`` across points.

    Only points that carry a usable value for that exact date contribute;
    nothing is imputed.
    """
    cells: dict[str, dict[str, list[float]]] = {}
    for point in successes:
        for variable, days in point.series.items():
            per_day = cells.setdefault(variable, {})
            for day, raw in days.items():
                value = _usable(raw)
                if value is None:
                    continue
                per_day.setdefault(day, []).append(value)
    return cells


def latest_values(
    stats: Mapping[str, Mapping[str, VariableStat]],
) -> tuple[str | None, dict[str, float | None]]:
    # Dates are fixed-width YYYYMMDD, so string order is date order.
    latest_date = max(
        (day for days in stats.values() for day in days), default=None
    )
    latest: dict[str, float | None] = {}
    for variable, days in stats.items():
        cell = days.get(latest_date) if latest_date is not None else None
        latest[variable] = cell.mean if cell is not None else None
    return latest_date, latest


def aggregate(
    results: Sequence[PointResult],
    *,
    center: Coordinate,
    date_range: DateRange,
    statistics_mode: StatisticsMode = "full",
) -> AggregateResult:
    """Reduce per-point series to per-variable, per-date statistics."""
    successes = [r for r in results if isinstance(r, PointSuccess)]
    failures = [r for r in results if isinstance(r, PointFailure)]

    stats: dict[str, dict[str, VariableStat]] = {}
    for variable, days in sorted(collect_cells(successes).items()):
        stats[variable] = {
            day: _describe(values, statistics_mode)
            for day, values in sorted(days.items())
        }

    latest_date, latest = latest_values(stats)
    return AggregateResult(
        center=center,
        sampled_points=tuple(r.coordinate for r in successes),
        range=date_range,
        per_variable_stats=stats,
        latest_date=latest_date,
        latest_by_variable=latest,
        mode="grid",
        statistics_mode=statistics_mode,
        failed_points=tuple(failures),
    )


def single_point(
    result: PointSuccess,
    *,
    center: Coordinate,
    date_range: DateRange,
    statistics_mode: StatisticsMode = "full",
) -> AggregateResult:
    """Reshape one raw series into the aggregate contract with ``count=1``."""
    stats: dict[str, dict[str, VariableStat]] = {}
    for variable, days in sorted(result.series.items()):
        cells: dict[str, VariableStat] = {}
        for day, raw in sorted(days.items()):
            value = _usable(raw)
            if value is None:
                continue
            cells[day] = _describe([value], statistics_mode)
        stats[variable] = cells

    latest_date, latest = latest_values(stats)
    return AggregateResult(
        center=center,
        sampled_points=(result.coordinate,),
        range=date_range,
        per_variable_stats=stats,
        latest_date=latest_date,
        latest_by_variable=latest,
        mode="point",
        statistics_mode=statistics_mode,
    )
