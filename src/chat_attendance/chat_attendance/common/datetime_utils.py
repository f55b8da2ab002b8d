from __future__ import annotations

from datetime import date, datetime, time, timedelta, timezone
from zoneinfo import ZoneInfo

from ..core.constants import DEFAULT_DISPLAY_TIMEZONE


def now_utc() -> datetime:
    """Current UTC time.

    Note: Wrapped so tests can patch/mocked easier.
    """
    return datetime.now(timezone.utc)


def as_utc(value: datetime) -> datetime:
    """Attach UTC to naive values and convert aware ones."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def to_db(value: datetime | None) -> datetime | None:
    """MySQL DATETIME columns hold naive UTC."""
    if value is None:
        return None
    return as_utc(value).replace(tzinfo=None)


def from_db(value: datetime | None) -> datetime | None:
    if value is None:
        return None
    return as_utc(value)


def week_start(moment: datetime) -> datetime:
    """Most recent Monday 00:00 UTC (moment itself when it is Monday midnight)."""
    day = as_utc(moment).date()
    monday = day - timedelta(days=day.weekday())
    return datetime.combine(monday, time.min, tzinfo=timezone.utc)


def minutes_between(start: datetime, end: datetime) -> int:
    """Whole minutes from start to end, truncated."""
    return int((as_utc(end) - as_utc(start)).total_seconds() // 60)


def format_duration(minutes: int) -> str:
    """145 -> '2h25'."""
    minutes = max(0, int(minutes))
    return f"{minutes // 60}h{minutes % 60:02d}"


def local_time(value: datetime, tz_name: str = DEFAULT_DISPLAY_TIMEZONE) -> datetime:
    return as_utc(value).astimezone(ZoneInfo(tz_name))


def format_clock(value: datetime, tz_name: str = DEFAULT_DISPLAY_TIMEZONE) -> str:
    return local_time(value, tz_name).strftime("%H:%M")


def format_day(value: date | datetime) -> str:
    return value.strftime("%d/%m/%Y")
