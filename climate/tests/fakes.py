from __future__ import annotations

import copy
import uuid
from collections.abc import Callable, Iterable

from django.core.cache.backends.locmem import LocMemCache

from climate.cache import TTLCache
from climate.engines.base import PointSeriesProvider
from climate.engines.types import (
    Coordinate,
    DateRange,
    ProviderName,
    TimeSeriesByVariable,
)
from climate.exceptions import UpstreamError


def fresh_cache() -> TTLCache:
    """TTL cache over a private LocMem store, isolated from other tests."""
    return TTLCache(LocMemCache(f"test-{uuid.uuid4().hex}", {}))


class FakeProvider(PointSeriesProvider):
    """In-memory provider recording every call it receives."""

    name: ProviderName = "nasa_power"

    def __init__(
        self,
        series: TimeSeriesByVariable
        | Callable[[Coordinate], TimeSeriesByVariable]
        | None = None,
        *,
        failing: Iterable[Coordinate] = (),
        fail_all: bool = False,
    ) -> None:
        self.series = series if series is not None else {}
        self.failing = set(failing)
        self.fail_all = fail_all
        self.calls: list[tuple[Coordinate, DateRange]] = []

    async def fetch_series(
        self, coord: Coordinate, date_range: DateRange
    ) -> TimeSeriesByVariable:
        self.calls.append((coord, date_range))
        if self.fail_all or coord in self.failing:
            raise UpstreamError(
                "NASA POWER 503 Service Unavailable", upstream_status=503
            )
        if callable(self.series):
            return self.series(coord)
        return copy.deepcopy(self.series)
