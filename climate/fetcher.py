from __future__ import annotations

import asyncio
import logging
import random
import time
from collections.abc import Sequence

from django.conf import settings

from .cache import TTLCache
from .engines.base import PointSeriesProvider
from .engines.types import (
    STAT_PRECISION,
    Coordinate,
    DateRange,
    PointFailure,
    PointResult,
    PointSuccess,
    TimeSeriesByVariable,
)
from .exceptions import UpstreamError
from .metrics import (
    climate_cache_hits_total,
    climate_cache_misses_total,
    climate_provider_errors_total,
    climate_provider_latency_seconds,
    climate_provider_requests_total,
)

logger = logging.getLogger(__name__)

POINT_CACHE_TTL = float(getattr(settings, "CLIMATE_POINT_CACHE_TTL_S", 600))
NOISE_PERCENT = float(getattr(settings, "CLIMATE_NOISE_PERCENT", 0.0))


def perturb_series(
    series: TimeSeriesByVariable, percent: float, rng: random.Random
) -> TimeSeriesByVariable:
    """Scale every value by ``1 + U(-0.5, 0.5) * percent / 100``."""
    return {
        variable: {
            day: round(
                value * (1 + (rng.random() - 0.5) * (percent / 100)),
                STAT_PRECISION,
            )
            for day, value in days.items()
        }
        for variable, days in series.items()
    }


class PointFetcher:
    """Cached, failure-absorbing access to a `PointSeriesProvider`.

    `fetch_point` never raises for upstream problems: they come back as
    `PointFailure` values so a fan-out can collect every outcome. Only
    successes are cached, and noise (when enabled) is applied once before
    the series is stored.
    """

    def __init__(
        self,
        provider: PointSeriesProvider,
        cache: TTLCache,
        *,
        ttl: float | None = None,
        noise_percent: float | None = None,
        rng: random.Random | None = None,
    ) -> None:
        self.provider = provider
        self.cache = cache
        self.ttl = POINT_CACHE_TTL if ttl is None else ttl
        self.noise_percent = (
            NOISE_PERCENT if noise_percent is None else noise_percent
        )
        self.rng = rng or random.Random()

    def cache_key(self, coord: Coordinate, date_range: DateRange) -> str:
        key = (
            f"climate:point:{self.provider.name}:{coord.as_key()}:"
            f"{date_range.start}:{date_range.end}"
        )
        if self.noise_percent:
            key += f":noise{self.noise_percent:g}"
        return key

    async def fetch_point(
        self, coord: Coordinate, date_range: DateRange
    ) -> PointResult:
        key = self.cache_key(coord, date_range)
        cached = self.cache.get(key)
        if cached is not None:
            climate_cache_hits_total.labels(layer="point").inc()
            logger.debug("climate.point.cache_hit key=%s", key)
            return PointSuccess(coordinate=coord, series=cached)

        climate_cache_misses_total.labels(layer="point").inc()
        provider_name = self.provider.name
        climate_provider_requests_total.labels(provider=provider_name).inc()
        start_time = time.perf_counter()
        try:
            series = await self.provider.fetch_series(coord, date_range)
        except UpstreamError as exc:
            climate_provider_errors_total.labels(
                provider=provider_name, error_type=exc.__class__.__name__
            ).inc()
            logger.warning(
                "climate.point.failed lat=%s lon=%s status=%s err=%s",
                coord.lat,
                coord.lon,
                exc.upstream_status,
                exc.message,
            )
            return PointFailure(
                coordinate=coord,
                error=exc.message,
                status_code=exc.upstream_status,
            )
        except Exception as exc:
            climate_provider_errors_total.labels(
                provider=provider_name, error_type=exc.__class__.__name__
            ).inc()
            logger.exception(
                "climate.point.failed lat=%s lon=%s err=unexpected",
                coord.lat,
                coord.lon,
            )
            return PointFailure(
                coordinate=coord,
                error="Unexpected provider error",
                status_code=None,
            )
        finally:
            climate_provider_latency_seconds.labels(
                provider=provider_name
            ).observe(time.perf_counter() - start_time)

        if self.noise_percent:
            series = perturb_series(series, self.noise_percent, self.rng)
        self.cache.put(key, series, self.ttl)
        return PointSuccess(coordinate=coord, series=series)

    async def fetch_all(
        self, coords: Sequence[Coordinate], date_range: DateRange
    ) -> list[PointResult]:
        """Fetch every coordinate concurrently and wait for all of them.

        Results keep the order of ``coords``.
        """
        results = await asyncio.gather(
            *(self.fetch_point(coord, date_range) for coord in coords)
        )
        return list(results)
