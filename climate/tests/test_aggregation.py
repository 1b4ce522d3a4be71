from __future__ import annotations

# ruff: noqa: S101
import pytest

from climate.aggregation import aggregate, single_point
from climate.engines.types import (
    Coordinate,
    DateRange,
    PointFailure,
    PointResult,
    PointSuccess,
)

CENTER = Coordinate(lat=0.0, lon=0.0)
RANGE = DateRange(start="20250101", end="20250103")


def _point(lat: float, series: dict[str, dict[str, float]]) -> PointSuccess:
    return PointSuccess(coordinate=Coordinate(lat=lat, lon=0.0), series=series)


def _failure(lat: float) -> PointFailure:
    return PointFailure(
        coordinate=Coordinate(lat=lat, lon=0.0), error="boom", status_code=500
    )


def test_statistics_for_known_values() -> None:
    results: list[PointResult] = [
        _point(0.0, {"V": {"20250101": 10.0}}),
        _point(0.1, {"V": {"20250101": 20.0}}),
        _point(0.2, {"V": {"20250101": 30.0}}),
    ]
    result = aggregate(results, center=CENTER, date_range=RANGE)

    stat = result.per_variable_stats["V"]["20250101"]
    assert stat.mean == pytest.approx(20.0)
    assert stat.stddev == pytest.approx(8.165, abs=0.01)
    assert stat.min == pytest.approx(10.0)
    assert stat.max == pytest.approx(30.0)
    assert stat.count == 3


def test_failed_points_are_excluded() -> None:
    results: list[PointResult] = [
        _point(0.0, {"V": {"20250101": 10.0}}),
        _failure(0.1),
        _point(0.2, {"V": {"20250101": 30.0}}),
        _failure(0.3),
    ]
    result = aggregate(results, center=CENTER, date_range=RANGE)

    stat = result.per_variable_stats["V"]["20250101"]
    assert stat.count == 2
    assert stat.mean == pytest.approx(20.0)
    assert [p.lat for p in result.sampled_points] == [0.0, 0.2]
    assert [f.coordinate.lat for f in result.failed_points] == [0.1, 0.3]


def test_cells_only_count_points_with_that_date() -> None:
    results: list[PointResult] = [
        _point(0.0, {"V": {"20250101": 10.0, "20250102": 12.0}}),
        _point(0.1, {"V": {"20250101": 14.0}}),
    ]
    result = aggregate(results, center=CENTER, date_range=RANGE)

    cells = result.per_variable_stats["V"]
    assert cells["20250101"].count == 2
    assert cells["20250102"].count == 1
    assert cells["20250102"].mean == pytest.approx(12.0)
    assert cells["20250102"].stddev == pytest.approx(0.0)


def test_fill_values_are_not_treated_as_zero() -> None:
    results: list[PointResult] = [
        _point(0.0, {"V": {"20250101": 10.0, "20250102": -999.0}}),
        _point(0.1, {"V": {"20250101": -999.0, "20250102": float("nan")}}),
    ]
    result = aggregate(results, center=CENTER, date_range=RANGE)

    cells = result.per_variable_stats["V"]
    assert cells["20250101"].count == 1
    assert cells["20250101"].mean == pytest.approx(10.0)
    assert "20250102" not in cells


def test_latest_value_uses_latest_date_present() -> None:
    results: list[PointResult] = [
        _point(
            0.0,
            {
                "V": {"20250101": 1.0, "20250103": 3.0},
                "W": {"20250102": 7.0},
            },
        ),
        _point(0.1, {"V": {"20250101": 2.0, "20250103": 5.0}}),
    ]
    result = aggregate(results, center=CENTER, date_range=RANGE)

    assert result.latest_date == "20250103"
    assert result.latest_by_variable["V"] == pytest.approx(4.0)
    assert result.latest_by_variable["W"] is None


def test_statistics_are_rounded_to_two_places() -> None:
    results: list[PointResult] = [
        _point(0.0, {"V": {"20250101": 1.0}}),
        _point(0.1, {"V": {"20250101": 2.0}}),
        _point(0.2, {"V": {"20250101": 2.0}}),
    ]
    result = aggregate(results, center=CENTER, date_range=RANGE)

    stat = result.per_variable_stats["V"]["20250101"]
    assert stat.mean == 1.67
    assert stat.stddev == 0.47


def test_mean_only_mode_skips_spread() -> None:
    results: list[PointResult] = [
        _point(0.0, {"V": {"20250101": 10.0}}),
        _point(0.1, {"V": {"20250101": 30.0}}),
    ]
    result = aggregate(
        results,
        center=CENTER,
        date_range=RANGE,
        statistics_mode="mean-only",
    )

    stat = result.per_variable_stats["V"]["20250101"]
    assert stat.mean == pytest.approx(20.0)
    assert stat.count == 2
    assert stat.stddev is None
    assert stat.min is None
    assert stat.max is None
    assert result.statistics_mode == "mean-only"


def test_result_is_independent_of_completion_order() -> None:
    points: list[PointResult] = [
        _point(0.0, {"V": {"20250101": 3.0, "20250102": 1.0}}),
        _point(0.1, {"V": {"20250101": 5.0}}),
        _point(0.2, {"V": {"20250102": 9.0}, "W": {"20250101": 2.0}}),
    ]
    forward = aggregate(points, center=CENTER, date_range=RANGE)
    backward = aggregate(points[::-1], center=CENTER, date_range=RANGE)

    assert forward.per_variable_stats == backward.per_variable_stats
    assert forward.latest_by_variable == backward.latest_by_variable


def test_empty_input_yields_no_latest_date() -> None:
    result = aggregate([_failure(0.0)], center=CENTER, date_range=RANGE)
    assert result.per_variable_stats == {}
    assert result.latest_date is None
    assert result.latest_by_variable == {}


def test_single_point_reshapes_raw_series() -> None:
    point = _point(0.0, {"V": {"20250101": 4.257, "20250102": -999.0}})
    result = single_point(point, center=CENTER, date_range=RANGE)

    stat = result.per_variable_stats["V"]["20250101"]
    assert result.mode == "point"
    assert stat.count == 1
    assert stat.mean == 4.26
    assert stat.min == 4.26
    assert stat.max == 4.26
    assert stat.stddev == 0.0
    assert "20250102" not in result.per_variable_stats["V"]
    assert result.latest_date == "20250101"
    assert result.latest_by_variable == {"V": 4.26}
    assert result.sampled_points == (point.coordinate,)


def test_oversized_integers_are_skipped() -> None:
    results: list[PointResult] = [
        _point(0.0, {"V": {"20250101": 10**400}}),  # type: ignore[dict-item]
        _point(0.1, {"V": {"20250101": 6.0}}),
    ]
    result = aggregate(results, center=CENTER, date_range=RANGE)

    stat = result.per_variable_stats["V"]["20250101"]
    assert stat.count == 1
    assert stat.mean == 6.0
