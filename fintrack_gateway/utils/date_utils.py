"""Date manipulation utilities"""

import calendar
from datetime import date, datetime, timezone
from typing import Union

DateLike = Union[date, datetime]

DAYS_PER_YEAR = 365.25
SECONDS_PER_YEAR = DAYS_PER_YEAR * 24 * 60 * 60


def to_datetime(value: DateLike) -> datetime:
    """Promote a date to a naive datetime at midnight; aware datetimes are normalized to UTC"""
    if isinstance(value, datetime):
        if value.tzinfo is not None:
            return value.astimezone(timezone.utc).replace(tzinfo=None)
        return value
    return datetime(value.year, value.month, value.day)


def year_fraction(start: DateLike, end: DateLike) -> float:
    """Actual/365.25 year fraction from start to end (negative if end precedes start)"""
    delta = to_datetime(end) - to_datetime(start)
    return delta.total_seconds() / SECONDS_PER_YEAR


def month_key(value: DateLike) -> str:
    """Zero-padded YYYY-MM key, lexicographically sortable"""
    return f"{value.year:04d}-{value.month:02d}"


def parse_month_key(key: str) -> tuple[int, int]:
    year, month = key.split("-")
    return int(year), int(month)


def end_of_month(key: str) -> datetime:
    """Last second of the month named by a YYYY-MM key"""
    year, month = parse_month_key(key)
    last_day = calendar.monthrange(year, month)[1]
    return datetime(year, month, last_day, 23, 59, 59)


def months_between(start: DateLike, end: DateLike) -> int:
    """Calendar-month difference, ignoring day of month"""
    return (end.year - start.year) * 12 + (end.month - start.month)


def add_months(from_date: date, months: int) -> date:
    """Shift a date by whole months, clamping the day to the target month's length"""
    total = from_date.year * 12 + (from_date.month - 1) + months
    year, month = divmod(total, 12)
    month += 1
    day = min(from_date.day, calendar.monthrange(year, month)[1])
    return date(year, month, day)
