from __future__ import annotations

import math
from typing import Any, cast

import httpx
from django.conf import settings

from ..exceptions import UpstreamError
from .base import PointSeriesProvider
from .types import (
    FILL_VALUE,
    Coordinate,
    DateRange,
    ProviderName,
    TimeSeriesByVariable,
)

VARIABLES: tuple[str, ...] = (
    "T2M",
    "T2M_MAX",
    "T2M_MIN",
    "PRECTOTCORR",
    "ALLSKY_SFC_SW_DWN",
    "WS2M",
    "WD2M",
    "RH2M",
    "PS",
)


class NasaPowerProvider(PointSeriesProvider):
    """NASA POWER daily point provider.

    The API answers with a GeoJSON feature whose
    ``properties.parameter`` maps each variable to ``{YYYYMMDD: value}``;
    missing days carry ``properties.fill_value`` (``-999``).
    """

    name: ProviderName = "nasa_power"
    _PARAMS = ",".join(VARIABLES)

    def __init__(
        self,
        *,
        base_url: str | None = None,
        timeout: float | None = None,
        community: str = "AG",
    ) -> None:
        self.base_url: str = base_url or cast(
            str,
            getattr(
                settings,
                "NASA_POWER_BASE_URL",
                "https://power.larc.nasa.gov/api/temporal/daily/point",
            ),
        )
        self.timeout = (
            timeout
            if timeout is not None
            else float(getattr(settings, "CLIMATE_UPSTREAM_TIMEOUT_S", 8.0))
        )
        self.community = community

    async def fetch_series(
        self, coord: Coordinate, date_range: DateRange
    ) -> TimeSeriesByVariable:
        params = {
            "parameters": self._PARAMS,
            "community": self.community,
            "latitude": coord.lat,
            "longitude": coord.lon,
            "start": date_range.start,
            "end": date_range.end,
            "format": "JSON",
        }
        response = await self._request(params)
        properties = response.get("properties")
        if not isinstance(properties, dict):
            raise UpstreamError("NASA POWER payload has no properties")
        parameters = properties.get("parameter")
        if not isinstance(parameters, dict):
            raise UpstreamError("NASA POWER payload has no parameter block")
        fill_value = properties.get("fill_value", FILL_VALUE)

        series: TimeSeriesByVariable = {}
        for variable, days in parameters.items():
            if not isinstance(days, dict):
                continue
            values: dict[str, float] = {}
            for day, raw in days.items():
                value = self._extract_value(raw, fill_value)
                if value is not None:
                    values[str(day)] = value
            series[str(variable)] = values
        return series

    async def _request(self, params: dict[str, Any]) -> dict[str, Any]:
        try:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                response = await client.get(self.base_url, params=params)
        except httpx.TimeoutException as exc:
            raise UpstreamError(
                f"NASA POWER timeout after {self.timeout:g}s"
            ) from exc
        except httpx.HTTPError as exc:
            raise UpstreamError(f"NASA POWER transport error: {exc}") from exc

        if response.is_error:
            raise UpstreamError(
                f"NASA POWER {response.status_code} {response.reason_phrase}",
                upstream_status=response.status_code,
            )
        try:
            data = response.json()
        except ValueError as exc:
            raise UpstreamError(
                "NASA POWER returned invalid JSON",
                upstream_status=response.status_code,
            ) from exc
        if not isinstance(data, dict):
            raise UpstreamError("Unexpected NASA POWER response shape")
        return data

    def _extract_value(self, raw: Any, fill_value: Any) -> float | None:
        if raw is None or isinstance(raw, bool):
            return None
        try:
            value = float(raw)
        except (TypeError, ValueError, OverflowError):
            return None
        try:
            if value == float(fill_value):
                return None
        except (TypeError, ValueError, OverflowError):
            pass
        if value == FILL_VALUE or not math.isfinite(value):
            return None
        return value
