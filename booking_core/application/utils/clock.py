from __future__ import annotations

from datetime import datetime
from zoneinfo import ZoneInfo


def business_now(timezone: str | ZoneInfo | None = None) -> datetime:
    """
    Current wall-clock time in the business timezone, as a naive datetime.
    Bookings are stored as naive business-local times, so comparisons stay naive.
    """
    if timezone is None:
        return datetime.now()
    tz = timezone if isinstance(timezone, ZoneInfo) else _safe_timezone(timezone)
    return datetime.now(tz).replace(tzinfo=None)


def _safe_timezone(name: str) -> ZoneInfo:
    try:
        return ZoneInfo(name)
    except Exception:
        return ZoneInfo("UTC")


def to_business_local(value: datetime | None, timezone: str | ZoneInfo | None = None) -> datetime | None:
    """Convert an offset-aware datetime to naive business-local time; naive values pass through."""
    if value is None or value.tzinfo is None:
        return value
    tz = timezone if isinstance(timezone, ZoneInfo) else _safe_timezone(timezone or "UTC")
    return value.astimezone(tz).replace(tzinfo=None)
