from __future__ import annotations

import logging
from dataclasses import dataclass

from django.conf import settings
from rest_framework.exceptions import ValidationError

from .aggregation import aggregate, single_point
from .cache import TTLCache
from .engines.registry import build_registry, validate_provider
from .engines.types import (
    AggregateResult,
    AggregationMode,
    Coordinate,
    DateRange,
    PointFailure,
    PointSuccess,
    ProviderName,
    StatisticsMode,
)
from .exceptions import InternalError, TotalFailureError
from .fetcher import PointFetcher
from .grid import build_grid, center_index
from .metrics import (
    climate_cache_hits_total,
    climate_cache_misses_total,
    climate_total_failures_total,
)

logger = logging.getLogger(__name__)

GRID_SIZE = int(getattr(settings, "CLIMATE_GRID_SIZE", 5))
GRID_STEP_DEG = float(getattr(settings, "CLIMATE_GRID_STEP_DEG", 0.03))
REQUEST_CACHE_TTL = float(
    getattr(settings, "CLIMATE_REQUEST_CACHE_TTL_S", 600)
)

PROVIDER_REGISTRY = build_registry()
SHARED_CACHE = TTLCache()


@dataclass(frozen=True)
class AggregateOptions:
    mode: AggregationMode = "grid"
    statistics_mode: StatisticsMode = "full"
    grid_size: int = GRID_SIZE
    step: float = GRID_STEP_DEG
    provider: str | None = None


@dataclass(frozen=True)
class CacheKey:
    endpoint: str
    provider: ProviderName
    center: Coordinate
    date_range: DateRange
    mode: AggregationMode
    statistics_mode: StatisticsMode
    grid_size: int
    step: float

    def as_string(self) -> str:
        return (
            f"climate:{self.endpoint}:{self.provider}:"
            f"{self.center.as_key()}:"
            f"{self.date_range.start}:{self.date_range.end}:"
            f"{self.mode}:{self.statistics_mode}:"
            f"{self.grid_size}x{self.step:g}"
        )


def _select_provider(name: str | None) -> ProviderName:
    try:
        return validate_provider(name, PROVIDER_REGISTRY)
    except ValueError as exc:
        raise ValidationError(str(exc)) from exc


def _build_coords(
    center: Coordinate, options: AggregateOptions
) -> list[Coordinate]:
    try:
        grid = build_grid(center, options.grid_size, options.step)
    except ValueError as exc:
        raise ValidationError(str(exc)) from exc
    if options.mode == "point":
        return [grid[center_index(options.grid_size)]]
    return grid


async def get_aggregate_for_center(
    lat: float,
    lon: float,
    start: str,
    end: str,
    options: AggregateOptions | None = None,
    *,
    cache: TTLCache | None = None,
    fetcher: PointFetcher | None = None,
) -> AggregateResult:
    """Sample the grid around ``(lat, lon)`` and reduce it to one estimate.

    Repeat requests inside the TTL window are answered from the
    request-level cache without touching the grid. Raises
    `TotalFailureError` when no grid point could be fetched.
    """
    options = options or AggregateOptions()
    cache = cache or SHARED_CACHE
    provider_name = _select_provider(options.provider)
    center = Coordinate.rounded(lat, lon)
    date_range = DateRange(start=start, end=end)
    key = CacheKey(
        endpoint="aggregate",
        provider=provider_name,
        center=center,
        date_range=date_range,
        mode=options.mode,
        statistics_mode=options.statistics_mode,
        grid_size=options.grid_size,
        step=options.step,
    ).as_string()

    cached = cache.get(key)
    if cached is not None:
        climate_cache_hits_total.labels(layer="request").inc()
        return cached
    climate_cache_misses_total.labels(layer="request").inc()

    coords = _build_coords(center, options)
    fetcher = fetcher or PointFetcher(PROVIDER_REGISTRY[provider_name], cache)
    results = await fetcher.fetch_all(coords, date_range)

    successes = [r for r in results if isinstance(r, PointSuccess)]
    if not successes:
        failures = [r for r in results if isinstance(r, PointFailure)]
        climate_total_failures_total.labels(
            provider=provider_name, mode=options.mode
        ).inc()
        logger.error(
            "climate.aggregate.total_failure lat=%s lon=%s points=%s",
            center.lat,
            center.lon,
            len(failures),
        )
        raise TotalFailureError(failures)

    try:
        if options.mode == "point":
            result = single_point(
                successes[0],
                center=center,
                date_range=date_range,
                statistics_mode=options.statistics_mode,
            )
        else:
            result = aggregate(
                results,
                center=center,
                date_range=date_range,
                statistics_mode=options.statistics_mode,
            )
    except Exception as exc:
        logger.exception(
            "climate.aggregate.failed lat=%s lon=%s", center.lat, center.lon
        )
        raise InternalError() from exc

    if len(successes) < len(results):
        logger.info(
            "climate.aggregate.partial lat=%s lon=%s ok=%s failed=%s",
            center.lat,
            center.lon,
            len(successes),
            len(results) - len(successes),
        )
    cache.put(key, result, REQUEST_CACHE_TTL)
    return result


async def get_point_series(
    lat: float,
    lon: float,
    start: str,
    end: str,
    provider: str | None = None,
    *,
    cache: TTLCache | None = None,
) -> PointSuccess:
    """Return the raw, unperturbed series for a single coordinate."""
    provider_name = _select_provider(provider)
    fetcher = PointFetcher(
        PROVIDER_REGISTRY[provider_name],
        cache or SHARED_CACHE,
        noise_percent=0.0,
    )
    result = await fetcher.fetch_point(
        Coordinate.rounded(lat, lon), DateRange(start=start, end=end)
    )
    if isinstance(result, PointFailure):
        raise TotalFailureError([result])
    return result
