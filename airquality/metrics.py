from __future__ import annotations

from prometheus_client import Counter, Histogram

air_quality_requests_total = Counter(
    "air_quality_requests_total",
    "Count of upstream air quality requests",
    labelnames=["provider", "outcome"],
)

air_quality_latency_seconds = Histogram(
    "air_quality_latency_seconds",
    "Latency of upstream air quality requests",
    labelnames=["provider"],
    buckets=(0.1, 0.3, 0.5, 1, 2, 5, 10, 20, 30),
)

air_quality_cache_hits_total = Counter(
    "air_quality_cache_hits_total",
    "Cache hits for air quality lookups",
)
