from __future__ import annotations

from datetime import UTC, date, datetime, timedelta

from .engines.types import DateRange

DAY_FORMAT = "%Y%m%d"


def format_yyyymmdd(value: date) -> str:
    return value.strftime(DAY_FORMAT)


def parse_yyyymmdd(raw: str) -> date:
    """Parse a compact `YYYYMMDD` day or raise ``ValueError``."""

    if len(raw) != 8 or not raw.isdigit():
        raise ValueError(f"Invalid YYYYMMDD date: {raw!r}")
    return datetime.strptime(raw, DAY_FORMAT).date()


def utc_today() -> date:
    return datetime.now(UTC).date()


def default_range(
    lookback_days: int, *, today: date | None = None
) -> DateRange:
    """Return the range ending today and starting ``lookback_days`` earlier."""

    end = today or utc_today()
    start = end - timedelta(days=lookback_days)
    return DateRange(start=format_yyyymmdd(start), end=format_yyyymmdd(end))
