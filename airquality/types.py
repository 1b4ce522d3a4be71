from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass

from climate.engines.types import Coordinate

# Upper bound (inclusive), label, colour of the US EPA AQI bands.
AQI_BANDS: tuple[tuple[float, str, str], ...] = (
    (50, "Good", "green"),
    (100, "Moderate", "yellow"),
    (150, "Unhealthy for sensitive groups", "orange"),
    (200, "Unhealthy", "red"),
    (300, "Very unhealthy", "purple"),
)
AQI_ABOVE_BANDS = ("Hazardous", "maroon")
AQI_NO_DATA = ("No data", "gray")

POLLUTANTS: tuple[str, ...] = ("pm25", "pm10", "co", "no2", "so2", "o3")


@dataclass(frozen=True)
class AqiReading:
    value: float | None
    level: str
    color: str


@dataclass(frozen=True)
class AirQualityReport:
    coordinates: Coordinate | None
    location: str | None
    aqi: AqiReading
    dominant: str | None
    pollutants: Mapping[str, AqiReading]
    temperature_c: float | None
    humidity_pct: float | None
    pressure_hpa: float | None
    time: str | None
    source: str


def classify_aqi(value: float | None) -> AqiReading:
    if value is None:
        level, color = AQI_NO_DATA
        return AqiReading(value=None, level=level, color=color)
    for upper, level, color in AQI_BANDS:
        if value <= upper:
            return AqiReading(value=value, level=level, color=color)
    level, color = AQI_ABOVE_BANDS
    return AqiReading(value=value, level=level, color=color)
