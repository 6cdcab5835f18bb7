"""Tiered pricing, summaries and CSV export for recurring bookings."""

import csv
import io
import logging
from datetime import date, timedelta

from rental_scheduler.config import settings
from rental_scheduler.recurring.series import generate_recurring_dates
from rental_scheduler.schemas.recurring_schema import RecurringBooking
from rental_scheduler.utils import format_us_date, format_us_time

logger = logging.getLogger(__name__)

CSV_HEADER = ["Date", "Start Time", "End Time", "Duration (hours)", "Booking Type"]
NO_DATES_MESSAGE = "No recurring dates generated"


def discount_multiplier(occurrence_count: int) -> float:
    """Multiplier of the first tier (highest threshold first) the count reaches."""
    for threshold, multiplier in settings.pricing.tiers:
        if occurrence_count >= threshold:
            return multiplier
    return 1.0


def calculate_recurring_price(base_price: float, booking: RecurringBooking) -> float:
    """base_price x occurrences x tier discount."""
    count = len(generate_recurring_dates(booking))
    multiplier = discount_multiplier(count)
    total = base_price * count * multiplier
    logger.debug(
        "Recurring price: %s x %d occurrences x %.2f = %s", base_price, count, multiplier, total
    )
    return total


def get_recurring_summary(booking: RecurringBooking) -> str:
    dates = generate_recurring_dates(booking)
    if not dates:
        return NO_DATES_MESSAGE
    return (
        f"{len(dates)} occurrences from {format_us_date(dates[0])} "
        f"to {format_us_date(dates[-1])}"
    )


def export_recurring_schedule(booking: RecurringBooking) -> str:
    """
    Render the series as CSV text, one row per occurrence.

    End time is the occurrence's start plus the booking duration.
    """
    buffer = io.StringIO()
    writer = csv.writer(buffer, lineterminator="\n")
    writer.writerow(CSV_HEADER)

    duration = timedelta(hours=booking.duration_hours)
    for occurrence in generate_recurring_dates(booking):
        writer.writerow([
            format_us_date(occurrence),
            format_us_time(occurrence),
            format_us_time(occurrence + duration),
            booking.duration_hours,
            booking.booking_type.value,
        ])

    return buffer.getvalue().rstrip("\n")


def schedule_filename(today: date) -> str:
    """Download name for an exported schedule."""
    return f"booking-schedule-{today.isoformat()}.csv"
