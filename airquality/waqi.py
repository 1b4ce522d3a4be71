from __future__ import annotations

from typing import Any, cast

import httpx
from django.conf import settings

from climate.engines.types import Coordinate
from climate.exceptions import UpstreamError

from .types import POLLUTANTS, AirQualityReport, classify_aqi


class WaqiProvider:
    """World Air Quality Index geo feed.

    ``GET /feed/geo:{lat};{lon}/`` returns the station nearest to the
    coordinate; the payload is usable only when ``status == "ok"``.
    """

    name = "waqi"

    def __init__(
        self,
        *,
        base_url: str | None = None,
        token: str | None = None,
        timeout: float | None = None,
    ) -> None:
        self.base_url: str = (
            base_url
            or cast(
                str,
                getattr(settings, "WAQI_BASE_URL", "https://api.waqi.info"),
            )
        ).rstrip("/")
        self.token: str = token or cast(
            str, getattr(settings, "WAQI_TOKEN", "demo")
        )
        self.timeout = (
            timeout
            if timeout is not None
            else float(getattr(settings, "AIR_QUALITY_TIMEOUT_S", 8.0))
        )

    async def feed(self, coord: Coordinate) -> AirQualityReport:
        url = f"{self.base_url}/feed/geo:{coord.lat};{coord.lon}/"
        payload = await self._request(url, {"token": self.token})
        if payload.get("status") != "ok":
            reason = payload.get("data")
            raise UpstreamError(
                f"WAQI returned no data: {reason}"
                if isinstance(reason, str)
                else "WAQI returned no data"
            )
        data = payload.get("data")
        if not isinstance(data, dict):
            raise UpstreamError("Unexpected WAQI response shape")
        return self._to_report(data)

    async def _request(
        self, url: str, params: dict[str, Any]
    ) -> dict[str, Any]:
        try:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                response = await client.get(url, params=params)
        except httpx.HTTPError as exc:
            raise UpstreamError(f"WAQI transport error: {exc}") from exc
        if response.is_error:
            raise UpstreamError(
                f"WAQI {response.status_code} {response.reason_phrase}",
                upstream_status=response.status_code,
            )
        try:
            data = response.json()
        except ValueError as exc:
            raise UpstreamError("WAQI returned invalid JSON") from exc
        if not isinstance(data, dict):
            raise UpstreamError("Unexpected WAQI response shape")
        return data

    def _to_report(self, data: dict[str, Any]) -> AirQualityReport:
        iaqi = self._block(data, "iaqi")
        city = self._block(data, "city")
        time_block = self._block(data, "time")

        attributions = data.get("attributions") or []
        names = [
            str(item["name"])
            for item in attributions
            if isinstance(item, dict) and item.get("name")
        ]

        return AirQualityReport(
            coordinates=self._geo(city.get("geo")),
            location=city.get("name"),
            aqi=classify_aqi(self._number(data.get("aqi"))),
            dominant=data.get("dominentpol") or None,
            pollutants={
                key: classify_aqi(self._iaqi_value(iaqi, key))
                for key in POLLUTANTS
            },
            temperature_c=self._iaqi_value(iaqi, "t"),
            humidity_pct=self._iaqi_value(iaqi, "h"),
            pressure_hpa=self._iaqi_value(iaqi, "p"),
            time=time_block.get("iso"),
            source=", ".join(names) or "Unknown",
        )

    def _block(self, data: dict[str, Any], key: str) -> dict[str, Any]:
        value = data.get(key)
        return value if isinstance(value, dict) else {}

    def _iaqi_value(self, iaqi: dict[str, Any], key: str) -> float | None:
        entry = iaqi.get(key)
        if not isinstance(entry, dict):
            return None
        return self._number(entry.get("v"))

    def _number(self, raw: Any) -> float | None:
        # WAQI reports "-" when a station has no current reading.
        if raw is None or isinstance(raw, bool):
            return None
        try:
            return float(raw)
        except (TypeError, ValueError, OverflowError):
            return None

    def _geo(self, raw: Any) -> Coordinate | None:
        if not isinstance(raw, list | tuple) or len(raw) != 2:
            return None
        lat, lon = self._number(raw[0]), self._number(raw[1])
        if lat is None or lon is None:
            return None
        return Coordinate.rounded(lat, lon)
