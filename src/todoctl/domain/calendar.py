"""UTC calendar arithmetic.

All instants in the domain are timezone-aware UTC. Naive datetimes are
read as UTC. Day arithmetic is calendar-based and keeps the time of day.
"""

from __future__ import annotations

import calendar
from datetime import UTC, date, datetime, time, timedelta


def as_utc(value: datetime) -> datetime:
    """Return *value* as an aware UTC datetime (naive input is taken as UTC)."""
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value.astimezone(UTC)


def utc_weekday(value: datetime) -> int:
    """Weekday with 0 = Sunday .. 6 = Saturday."""
    return as_utc(value).isoweekday() % 7


def days_in_month(year: int, month: int) -> int:
    return calendar.monthrange(year, month)[1]


def add_days(value: datetime, days: int) -> datetime:
    return as_utc(value) + timedelta(days=days)


def add_months(value: datetime, months: int, *, day: int | None = None) -> datetime:
    """Move *value* forward by *months*, landing on *day* (default: same day).

    The target day is clamped to the last day of the target month, so
    day 31 into February lands on the 28th (or 29th).
    """
    base = as_utc(value)
    month_index = base.month - 1 + months
    year = base.year + month_index // 12
    month = month_index % 12 + 1
    target_day = min(day if day is not None else base.day, days_in_month(year, month))
    return base.replace(year=year, month=month, day=target_day)


def utc_date(value: datetime | date) -> date:
    """The UTC calendar date of *value*."""
    if isinstance(value, datetime):
        return as_utc(value).date()
    return value


def same_utc_day(a: datetime, b: datetime | date) -> bool:
    return utc_date(a) == utc_date(b)


def start_of_utc_day(value: datetime) -> datetime:
    return datetime.combine(utc_date(value), time.min, tzinfo=UTC)


def end_of_utc_day(value: datetime) -> datetime:
    return datetime.combine(utc_date(value), time.max, tzinfo=UTC)
