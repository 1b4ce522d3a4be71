from __future__ import annotations

from prometheus_client import Counter, Histogram

climate_provider_requests_total = Counter(
    "climate_provider_requests_total",
    "Total climate provider point requests",
    labelnames=["provider"],
)

climate_provider_errors_total = Counter(
    "climate_provider_errors_total",
    "Total climate provider point request errors",
    labelnames=["provider", "error_type"],
)

climate_provider_latency_seconds = Histogram(
    "climate_provider_latency_seconds",
    "Latency of climate provider point requests",
    labelnames=["provider"],
    buckets=(0.1, 0.3, 0.5, 1, 2, 5, 10, 20, 30),
)

climate_cache_hits_total = Counter(
    "climate_cache_hits_total",
    "Cache hits by climate layer",
    labelnames=["layer"],
)

climate_cache_misses_total = Counter(
    "climate_cache_misses_total",
    "Cache misses by climate layer",
    labelnames=["layer"],
)

climate_total_failures_total = Counter(
    "climate_total_failures_total",
    "Aggregate requests where every grid point failed",
    labelnames=["provider", "mode"],
)
