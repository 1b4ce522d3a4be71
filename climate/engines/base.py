from __future__ import annotations

from abc import ABC, abstractmethod

from .types import Coordinate, DateRange, ProviderName, TimeSeriesByVariable


class PointSeriesProvider(ABC):
    """Abstract base for daily time-series-by-coordinate providers."""

    name: ProviderName

    @abstractmethod
    async def fetch_series(
        self, coord: Coordinate, date_range: DateRange
    ) -> TimeSeriesByVariable:
        """Return the daily series per variable for one coordinate.

        Fill values are already removed. Raises `UpstreamError` when the
        provider cannot produce a usable payload.
        """
