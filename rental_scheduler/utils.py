"""Shared date utilities used across the rental scheduler."""

import calendar
from datetime import date, datetime, time, timedelta
from typing import Iterator, Union

DateLike = Union[date, datetime]


def month_key(value: DateLike) -> str:
    """Cache key for the month containing ``value``.

    Examples:
        >>> month_key(date(2024, 1, 15))
        '2024-01'
    """
    return f"{value.year:04d}-{value.month:02d}"


def day_key(value: DateLike) -> str:
    """Cache key for the calendar day of ``value``.

    Examples:
        >>> day_key(datetime(2024, 3, 5, 14, 30))
        '2024-03-05'
    """
    return f"{value.year:04d}-{value.month:02d}-{value.day:02d}"


def as_date(value: DateLike) -> date:
    if isinstance(value, datetime):
        return value.date()
    return value


def as_datetime(value: DateLike) -> datetime:
    """Promote a date to midnight; datetimes pass through unchanged."""
    if isinstance(value, datetime):
        return value
    return datetime.combine(value, time.min)


def sunday_weekday(value: DateLike) -> int:
    """Day of week with Sunday = 0 ... Saturday = 6."""
    return (value.weekday() + 1) % 7


def start_of_week(value: DateLike) -> date:
    """The Sunday on or before ``value``."""
    day = as_date(value)
    return day - timedelta(days=sunday_weekday(day))


def first_of_month(value: DateLike) -> date:
    return date(value.year, value.month, 1)


def last_of_month(value: DateLike) -> date:
    return date(value.year, value.month, calendar.monthrange(value.year, value.month)[1])


def iter_days(start: date, end: date) -> Iterator[date]:
    """Yield every date from ``start`` to ``end`` inclusive."""
    current = start
    while current <= end:
        yield current
        current += timedelta(days=1)


def add_months_rollover(value: datetime, months: int) -> datetime:
    """Move ``value`` forward by whole months, letting the day overflow.

    A day that does not exist in the target month rolls into the next
    one, so Jan 31 + 1 month is Mar 2 in a leap year.
    """
    month_index = value.month - 1 + months
    year = value.year + month_index // 12
    month = month_index % 12 + 1
    return with_day_rollover(value.replace(year=year, month=month, day=1), value.day)


def with_day_rollover(value: datetime, day: int) -> datetime:
    """Set the day of month on ``value`` without clamping (31 in April -> May 1)."""
    return value.replace(day=1) + timedelta(days=day - 1)


def format_us_date(value: DateLike) -> str:
    """Format as M/D/YYYY.

    Examples:
        >>> format_us_date(date(2024, 1, 5))
        '1/5/2024'
    """
    return f"{value.month}/{value.day}/{value.year}"


def format_us_time(value: datetime) -> str:
    """Format as h:MM:SS AM/PM.

    Examples:
        >>> format_us_time(datetime(2024, 1, 5, 0, 0))
        '12:00:00 AM'
        >>> format_us_time(datetime(2024, 1, 5, 15, 7, 9))
        '3:07:09 PM'
    """
    hour = value.hour % 12 or 12
    suffix = "AM" if value.hour < 12 else "PM"
    return f"{hour}:{value.minute:02d}:{value.second:02d} {suffix}"
