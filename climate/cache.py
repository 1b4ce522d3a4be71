"""Process-lifetime TTL cache used by the point fetcher and the services.

A thin component over a Django cache backend so it can be injected into the
pipeline and replaced per test. Entries only age out; `put` always replaces
whatever was stored under the key.
"""

from __future__ import annotations

from typing import Any

from django.conf import settings
from django.core.cache import caches
from django.core.cache.backends.base import BaseCache

_MISSING = object()


class TTLCache:
    def __init__(self, backend: BaseCache | None = None) -> None:
        self._backend = backend

    @property
    def backend(self) -> BaseCache:
        # Resolved lazily so the configured alias is read after settings load.
        if self._backend is None:
            alias = getattr(settings, "CLIMATE_CACHE_ALIAS", "default")
            self._backend = caches[alias]
        return self._backend

    def get(self, key: str) -> Any | None:
        """Return the stored value, or ``None`` when absent or expired."""
        value = self.backend.get(key, _MISSING)
        if value is _MISSING:
            return None
        return value

    def put(self, key: str, value: Any, ttl: float) -> None:
        if ttl <= 0:
            self.backend.delete(key)
            return
        self.backend.set(key, value, timeout=ttl)

    def clear(self) -> None:
        self.backend.clear()
