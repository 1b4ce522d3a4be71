from __future__ import annotations

# ruff: noqa: S101
import asyncio
import random

import pytest

from climate.engines.types import (
    Coordinate,
    DateRange,
    PointFailure,
    PointSuccess,
)
from climate.fetcher import PointFetcher, perturb_series
from climate.grid import build_grid

from .fakes import FakeProvider, fresh_cache

RANGE = DateRange(start="20250101", end="20250103")
CENTER = Coordinate(lat=-12.05, lon=-77.03)
SERIES = {
    "T2M": {"20250101": 20.0, "20250102": 21.0, "20250103": 22.0},
    "RH2M": {"20250101": 80.0, "20250102": 82.5},
}


def test_fetch_point_caches_success() -> None:
    provider = FakeProvider(SERIES)
    fetcher = PointFetcher(provider, fresh_cache(), ttl=60, noise_percent=0)

    first = asyncio.run(fetcher.fetch_point(CENTER, RANGE))
    second = asyncio.run(fetcher.fetch_point(CENTER, RANGE))

    assert isinstance(first, PointSuccess)
    assert isinstance(second, PointSuccess)
    assert first.series == SERIES
    assert second.series == first.series
    assert len(provider.calls) == 1


def test_cache_key_covers_coordinate_and_range() -> None:
    provider = FakeProvider(SERIES)
    fetcher = PointFetcher(provider, fresh_cache(), ttl=60, noise_percent=0)

    asyncio.run(fetcher.fetch_point(CENTER, RANGE))
    asyncio.run(
        fetcher.fetch_point(CENTER, DateRange(start="20250101", end="20250104"))
    )
    asyncio.run(
        fetcher.fetch_point(Coordinate(lat=-12.08, lon=-77.03), RANGE)
    )

    assert len(provider.calls) == 3


def test_failure_is_returned_not_raised_and_not_cached() -> None:
    provider = FakeProvider(SERIES, fail_all=True)
    cache = fresh_cache()
    fetcher = PointFetcher(provider, cache, ttl=60, noise_percent=0)

    result = asyncio.run(fetcher.fetch_point(CENTER, RANGE))

    assert isinstance(result, PointFailure)
    assert result.ok is False
    assert result.coordinate == CENTER
    assert result.status_code == 503
    assert "503" in result.error
    assert cache.get(fetcher.cache_key(CENTER, RANGE)) is None

    provider.fail_all = False
    retried = asyncio.run(fetcher.fetch_point(CENTER, RANGE))
    assert isinstance(retried, PointSuccess)
    assert len(provider.calls) == 2


def test_noise_is_applied_once_per_cache_window() -> None:
    provider = FakeProvider(SERIES)
    fetcher = PointFetcher(
        provider,
        fresh_cache(),
        ttl=60,
        noise_percent=10,
        rng=random.Random(7),
    )

    first = asyncio.run(fetcher.fetch_point(CENTER, RANGE))
    second = asyncio.run(fetcher.fetch_point(CENTER, RANGE))

    assert isinstance(first, PointSuccess)
    assert isinstance(second, PointSuccess)
    assert first.series == second.series
    assert first.series != SERIES
    assert len(provider.calls) == 1


def test_perturbation_stays_within_bounds() -> None:
    series = {"T2M": {f"202501{day:02d}": 100.0 for day in range(1, 29)}}
    noisy = perturb_series(series, 4, random.Random(3))

    assert set(noisy["T2M"]) == set(series["T2M"])
    for value in noisy["T2M"].values():
        assert 98.0 <= value <= 102.0


def test_noise_and_plain_series_use_separate_keys() -> None:
    provider = FakeProvider(SERIES)
    cache = fresh_cache()
    noisy = PointFetcher(provider, cache, ttl=60, noise_percent=1)
    plain = PointFetcher(provider, cache, ttl=60, noise_percent=0)

    assert noisy.cache_key(CENTER, RANGE) != plain.cache_key(CENTER, RANGE)


def test_fetch_all_joins_every_point_in_order() -> None:
    grid = build_grid(CENTER, 3, 0.03)
    failing = {grid[0], grid[4]}
    provider = FakeProvider(SERIES, failing=failing)
    fetcher = PointFetcher(provider, fresh_cache(), ttl=60, noise_percent=0)

    results = asyncio.run(fetcher.fetch_all(grid, RANGE))

    assert [r.coordinate for r in results] == grid
    assert sum(1 for r in results if isinstance(r, PointFailure)) == 2
    assert sum(1 for r in results if isinstance(r, PointSuccess)) == 7
    assert len(provider.calls) == 9


def test_fetch_all_runs_points_concurrently() -> None:
    in_flight = 0
    peak = 0

    class SlowProvider(FakeProvider):
        async def fetch_series(self, coord, date_range):  # type: ignore[override]
            nonlocal in_flight, peak
            in_flight += 1
            peak = max(peak, in_flight)
            await asyncio.sleep(0.01)
            in_flight -= 1
            return await super().fetch_series(coord, date_range)

    grid = build_grid(CENTER, 3, 0.03)
    fetcher = PointFetcher(
        SlowProvider(SERIES), fresh_cache(), ttl=60, noise_percent=0
    )

    asyncio.run(fetcher.fetch_all(grid, RANGE))

    assert peak == len(grid)


@pytest.mark.parametrize("noise", [0, 2.5])
def test_cache_key_is_stable_for_equal_coordinates(noise: float) -> None:
    fetcher = PointFetcher(FakeProvider(), fresh_cache(), noise_percent=noise)
    a = fetcher.cache_key(Coordinate.rounded(1.0000001, 2.0), RANGE)
    b = fetcher.cache_key(Coordinate.rounded(1.0000004, 2.0), RANGE)
    assert a == b


def test_unexpected_provider_error_becomes_failure() -> None:
    grid = build_grid(CENTER, 3, 0.03)
    broken = grid[2]

    class ShapeSurpriseProvider(FakeProvider):
        async def fetch_series(self, coord, date_range):  # type: ignore[override]
            if coord == broken:
                self.calls.append((coord, date_range))
                raise KeyError("properties")
            return await super().fetch_series(coord, date_range)

    provider = ShapeSurpriseProvider(SERIES)
    cache = fresh_cache()
    fetcher = PointFetcher(provider, cache, ttl=60, noise_percent=0)

    results = asyncio.run(fetcher.fetch_all(grid, RANGE))

    failure = results[2]
    assert isinstance(failure, PointFailure)
    assert failure.error == "Unexpected provider error"
    assert failure.status_code is None
    assert cache.get(fetcher.cache_key(broken, RANGE)) is None
    assert sum(1 for r in results if isinstance(r, PointSuccess)) == 8
