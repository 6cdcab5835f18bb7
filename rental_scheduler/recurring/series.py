"""
Recurring series generation.

Expands a RecurringPattern between a booking's start and end into the
concrete occurrence datetimes. Pure functions; nothing here keeps state.
"""

import logging
from datetime import datetime, timedelta

from rental_scheduler.schemas.booking_schema import BookingType
from rental_scheduler.schemas.recurring_schema import (
    PatternValidation,
    RecurrenceType,
    RecurringBooking,
    RecurringPattern,
)
from rental_scheduler.utils import add_months_rollover, sunday_weekday, with_day_rollover

logger = logging.getLogger(__name__)

WEEKDAYS = [1, 2, 3, 4, 5]
WEEKENDS = [0, 6]


def _next_occurrence(current: datetime, pattern: RecurringPattern) -> datetime:
    """
    Step from one occurrence to the next.

    Weekly patterns with days_of_week step to the next matching weekday
    and ignore ``interval``. Monthly patterns with day_of_month pin the
    day after advancing without clamping, so 31 in a 30-day month lands
    on the 1st of the following month.
    """
    # Non-positive intervals would stall the series.
    interval = max(pattern.interval, 1)

    if pattern.type == RecurrenceType.WEEKLY:
        days = {d for d in pattern.days_of_week or () if 0 <= d <= 6}
        if not days:
            return current + timedelta(weeks=interval)
        next_date = current + timedelta(days=1)
        while sunday_weekday(next_date) not in days:
            next_date += timedelta(days=1)
        return next_date

    if pattern.type == RecurrenceType.MONTHLY:
        next_date = add_months_rollover(current, interval)
        if pattern.day_of_month is not None and pattern.day_of_month >= 1:
            next_date = with_day_rollover(next_date, pattern.day_of_month)
        return next_date

    # daily and custom both step in days
    return current + timedelta(days=interval)


def generate_recurring_dates(booking: RecurringBooking) -> list[datetime]:
    """
    Expand ``booking`` into occurrence datetimes.

    Starts at booking.start_date (always included when in bounds) and stops
    once past booking.end_date, past pattern.end_date, or after
    pattern.occurrences entries.
    """
    pattern = booking.pattern
    dates: list[datetime] = []
    current = booking.start_date

    while current <= booking.end_date:
        if pattern.occurrences is not None and len(dates) >= pattern.occurrences:
            break
        if pattern.end_date is not None and current > pattern.end_date:
            break
        dates.append(current)
        try:
            current = _next_occurrence(current, pattern)
        except (OverflowError, ValueError) as e:
            # Stepping past datetime.max is necessarily past booking.end_date.
            logger.debug("Stopping %s series at %s: %s", pattern.type.value, current, e)
            break

    logger.debug(
        "Generated %d %s occurrences from %s to %s",
        len(dates), pattern.type.value, booking.start_date.date(), booking.end_date.date(),
    )
    return dates


def validate_recurring_pattern(pattern: RecurringPattern) -> PatternValidation:
    """Report problems with a pattern. Never raises; callers decide whether to proceed."""
    errors: list[str] = []

    if pattern.interval < 1:
        errors.append("Interval must be at least 1")

    if pattern.type == RecurrenceType.WEEKLY and pattern.days_of_week is not None:
        if not pattern.days_of_week:
            errors.append("Weekly pattern must specify at least one day of the week")
        elif any(not 0 <= d <= 6 for d in pattern.days_of_week):
            errors.append("Days of week must be between 0 (Sunday) and 6 (Saturday)")

    if (
        pattern.type == RecurrenceType.MONTHLY
        and pattern.day_of_month is not None
        and not 1 <= pattern.day_of_month <= 31
    ):
        errors.append("Day of month must be between 1 and 31")

    if pattern.occurrences is not None and pattern.occurrences < 1:
        errors.append("Number of occurrences must be at least 1")

    if pattern.end_date is not None and pattern.occurrences is not None:
        errors.append("Cannot specify both end date and number of occurrences")

    return PatternValidation(valid=not errors, errors=errors)


def get_recurring_pattern_suggestions(booking_type: BookingType) -> list[RecurringPattern]:
    """Common patterns to offer for a booking type."""
    booking_type = BookingType(booking_type)

    if booking_type == BookingType.HOURLY:
        return [
            RecurringPattern(type=RecurrenceType.DAILY, interval=1),
            RecurringPattern(type=RecurrenceType.WEEKLY, interval=1, days_of_week=WEEKDAYS),
            RecurringPattern(type=RecurrenceType.WEEKLY, interval=1, days_of_week=WEEKENDS),
        ]
    if booking_type == BookingType.DAILY:
        return [
            RecurringPattern(type=RecurrenceType.DAILY, interval=1),
            RecurringPattern(type=RecurrenceType.WEEKLY, interval=1, days_of_week=WEEKDAYS),
            RecurringPattern(type=RecurrenceType.WEEKLY, interval=1, days_of_week=WEEKENDS),
            RecurringPattern(type=RecurrenceType.MONTHLY, interval=1),
        ]
    if booking_type == BookingType.WEEKLY:
        return [
            RecurringPattern(type=RecurrenceType.WEEKLY, interval=1),
            RecurringPattern(type=RecurrenceType.WEEKLY, interval=2),
            RecurringPattern(type=RecurrenceType.MONTHLY, interval=1),
        ]
    return [
        RecurringPattern(type=RecurrenceType.DAILY, interval=1),
        RecurringPattern(type=RecurrenceType.WEEKLY, interval=1),
        RecurringPattern(type=RecurrenceType.MONTHLY, interval=1),
        RecurringPattern(type=RecurrenceType.CUSTOM, interval=7),
    ]
