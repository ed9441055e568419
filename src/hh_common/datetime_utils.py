"""Datetime utilities.

Timestamps are stored as timezone-aware UTC. Calendar days ("today", a
completion date, month boundaries) are always taken in the one household
timezone from settings.
"""

from datetime import date, datetime, time, timedelta, timezone
from zoneinfo import ZoneInfo

from config.settings import settings


def utc_now() -> datetime:
    """Return timezone-aware UTC now."""
    return datetime.now(timezone.utc)


def household_tz() -> ZoneInfo:
    return ZoneInfo(settings.HOUSEHOLD_TIMEZONE)


def household_today(now: datetime | None = None) -> date:
    """Calendar date of `now` (default: current time) in the household timezone."""
    moment = now if now is not None else utc_now()
    return moment.astimezone(household_tz()).date()


def day_start(day: date) -> datetime:
    """Aware datetime of local midnight at the start of `day`."""
    return datetime.combine(day, time.min, tzinfo=household_tz())


def day_range(start: date, end: date) -> tuple[datetime, datetime]:
    """Half-open [start 00:00, day after end 00:00) in the household timezone."""
    return day_start(start), day_start(end + timedelta(days=1))


def month_range(month: int, year: int) -> tuple[datetime, datetime]:
    """Half-open bounds of a calendar month in the household timezone."""
    first = date(year, month, 1)
    following = date(year + 1, 1, 1) if month == 12 else date(year, month + 1, 1)
    return day_start(first), day_start(following)
