"""Shared test fixtures and helpers."""

from datetime import date, datetime
from typing import Optional

import pytest

from rental_scheduler.scheduling.availability_cache import AvailabilityCache
from rental_scheduler.scheduling.selection import DateSelectionMachine
from rental_scheduler.schemas.availability_schema import SlotReason, UnavailableSlot
from rental_scheduler.schemas.booking_schema import BookingType
from rental_scheduler.schemas.recurring_schema import (
    RecurrenceType,
    RecurringBooking,
    RecurringPattern,
)
from rental_scheduler.tools.availability import InMemoryAvailabilityProvider

TODAY = date(2024, 1, 10)
VEHICLE_ID = 7


@pytest.fixture
def provider():
    return InMemoryAvailabilityProvider()


@pytest.fixture
def cache(provider):
    return AvailabilityCache(provider, VEHICLE_ID, today=lambda: TODAY)


@pytest.fixture
def machine(cache):
    return DateSelectionMachine(cache, BookingType.DAILY)


class RecordingListener:
    """Collects everything a selection machine emits."""

    def __init__(self) -> None:
        self.selections = []
        self.booking_types = []

    def on_selection(self, selection) -> None:
        self.selections.append(selection)

    def on_booking_type(self, booking_type) -> None:
        self.booking_types.append(booking_type)


@pytest.fixture
def listener(machine):
    recorder = RecordingListener()
    machine.on_selection(recorder.on_selection)
    machine.on_booking_type_change(recorder.on_booking_type)
    return recorder


def make_slot(
    start: datetime,
    end: datetime,
    slot_type: BookingType = BookingType.DAILY,
    reason: SlotReason = SlotReason.RESERVED,
) -> UnavailableSlot:
    """Helper to create an UnavailableSlot."""
    return UnavailableSlot(start_date=start, end_date=end, reason=reason, slot_type=slot_type)


def make_booking(
    recurrence: RecurrenceType = RecurrenceType.DAILY,
    start: datetime = datetime(2024, 1, 1),
    end: datetime = datetime(2024, 1, 5),
    interval: int = 1,
    days_of_week: Optional[list[int]] = None,
    day_of_month: Optional[int] = None,
    pattern_end: Optional[datetime] = None,
    occurrences: Optional[int] = None,
    duration_hours: int = 24,
    booking_type: BookingType = BookingType.DAILY,
) -> RecurringBooking:
    """Helper to create a RecurringBooking with sensible defaults."""
    return RecurringBooking(
        pattern=RecurringPattern(
            type=recurrence,
            interval=interval,
            days_of_week=days_of_week,
            day_of_month=day_of_month,
            end_date=pattern_end,
            occurrences=occurrences,
        ),
        start_date=start,
        end_date=end,
        duration_hours=duration_hours,
        booking_type=booking_type,
    )
