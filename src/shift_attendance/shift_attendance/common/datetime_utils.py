from __future__ import annotations

from datetime import date, datetime, time, timezone, tzinfo
from typing import Any, Optional
from zoneinfo import ZoneInfo

from ..core.constants import DEFAULT_TIMEZONE


def get_timezone(name: Optional[str] = None) -> tzinfo:
    """Resolve an IANA timezone name; empty means the default (UTC)."""
    name = (name or DEFAULT_TIMEZONE).strip()
    if name.upper() == "UTC":
        return timezone.utc
    return ZoneInfo(name)


def parse_iso_date(value: Any) -> date:
    """Parse YYYY-MM-DD (a trailing time part is ignored) into date."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    text = str(value or "").strip()
    return datetime.strptime(text[:10], "%Y-%m-%d").date()


def parse_timestamp(value: Any, *, tz: tzinfo) -> datetime:
    """Parse an ISO-8601 timestamp into an aware datetime in ``tz``.

    Naive values are taken as wall-clock time in ``tz``. Raises ValueError
    (or TypeError) when the value is not a timestamp.
    """
    if isinstance(value, datetime):
        dt = value
    elif isinstance(value, str):
        text = value.strip()
        if not text:
            raise ValueError("Empty timestamp")
        if text.endswith(("Z", "z")):
            text = text[:-1] + "+00:00"
        dt = datetime.fromisoformat(text)
    else:
        raise TypeError(f"Unsupported timestamp type: {type(value)!r}")

    if dt.tzinfo is None:
        return dt.replace(tzinfo=tz)
    return dt.astimezone(tz)


def try_parse_timestamp(value: Any, *, tz: tzinfo) -> Optional[datetime]:
    if value is None:
        return None
    try:
        return parse_timestamp(value, tz=tz)
    except (TypeError, ValueError):
        return None


def combine_day_and_time(day: date, time_of_day: time, *, tz: tzinfo) -> datetime:
    """Attach a wall-clock time-of-day to a calendar day in ``tz``."""
    return datetime.combine(day, time_of_day.replace(tzinfo=None), tzinfo=tz)


def move_to_day(value: Optional[datetime], day: date, *, tz: tzinfo) -> Optional[datetime]:
    """Same wall-clock time-of-day as ``value`` (read in ``tz``), on ``day``."""
    if value is None:
        return None
    return combine_day_and_time(day, value.astimezone(tz).time(), tz=tz)


def seconds_of_day(value: datetime) -> int:
    return value.hour * 3600 + value.minute * 60 + value.second


def to_wall_clock(value: Optional[datetime], *, tz: tzinfo) -> Optional[datetime]:
    """Naive wall-clock datetime in ``tz`` (what a DATETIME column stores)."""
    if value is None:
        return None
    if value.tzinfo is not None:
        value = value.astimezone(tz)
    return value.replace(tzinfo=None)


def format_hhmm(value: Optional[datetime]) -> str:
    return value.strftime("%H:%M") if value else "--:--"
