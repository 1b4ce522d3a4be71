from __future__ import annotations

import logging
import time

from django.conf import settings

from climate.cache import TTLCache
from climate.engines.types import Coordinate
from climate.exceptions import UpstreamError

from .metrics import (
    air_quality_cache_hits_total,
    air_quality_latency_seconds,
    air_quality_requests_total,
)
from .types import AirQualityReport
from .waqi import WaqiProvider

logger = logging.getLogger(__name__)

CACHE_TTL = float(getattr(settings, "AIR_QUALITY_CACHE_TTL_S", 600))

PROVIDER = WaqiProvider()
SHARED_CACHE = TTLCache()


def cache_key(coord: Coordinate) -> str:
    return f"airquality:{PROVIDER.name}:{coord.as_key()}"


async def get_air_quality(
    lat: float,
    lon: float,
    *,
    cache: TTLCache | None = None,
    provider: WaqiProvider | None = None,
) -> AirQualityReport:
    cache = cache or SHARED_CACHE
    provider = provider or PROVIDER
    coord = Coordinate.rounded(lat, lon)
    key = cache_key(coord)

    cached = cache.get(key)
    if cached is not None:
        air_quality_cache_hits_total.inc()
        return cached

    start_time = time.perf_counter()
    try:
        report = await provider.feed(coord)
    except UpstreamError as exc:
        air_quality_requests_total.labels(
            provider=provider.name, outcome="error"
        ).inc()
        logger.warning(
            "airquality.fetch.failed lat=%s lon=%s err=%s",
            coord.lat,
            coord.lon,
            exc.message,
        )
        raise
    finally:
        air_quality_latency_seconds.labels(provider=provider.name).observe(
            time.perf_counter() - start_time
        )

    air_quality_requests_total.labels(
        provider=provider.name, outcome="ok"
    ).inc()
    cache.put(key, report, CACHE_TTL)
    return report
