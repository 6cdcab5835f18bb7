"""Booking type catalogue and date selection models."""

from dataclasses import dataclass
from datetime import date, datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, model_validator


class BookingType(str, Enum):
    """Granularity of a reservation request."""
    HOURLY = "HOURLY"
    DAILY = "DAILY"
    WEEKLY = "WEEKLY"
    CUSTOM = "CUSTOM"


@dataclass(frozen=True)
class BookingTypeInfo:
    """Static description and duration bounds (in hours) of a booking type."""

    value: BookingType
    label: str
    description: str
    min_duration: int
    max_duration: int
    calendar_view: str

    def allows(self, hours: int) -> bool:
        return self.min_duration <= hours <= self.max_duration


BOOKING_TYPES: dict[BookingType, BookingTypeInfo] = {
    BookingType.HOURLY: BookingTypeInfo(
        value=BookingType.HOURLY,
        label="Hourly",
        description="Perfect for quick trips (1-23 hours)",
        min_duration=1,
        max_duration=23,
        calendar_view="day",
    ),
    BookingType.DAILY: BookingTypeInfo(
        value=BookingType.DAILY,
        label="Daily",
        description="Great for day trips (1-7 days)",
        min_duration=24,
        max_duration=168,
        calendar_view="month",
    ),
    BookingType.WEEKLY: BookingTypeInfo(
        value=BookingType.WEEKLY,
        label="Weekly",
        description="Best for extended trips (1-4 weeks)",
        min_duration=168,
        max_duration=720,
        calendar_view="week",
    ),
    BookingType.CUSTOM: BookingTypeInfo(
        value=BookingType.CUSTOM,
        label="Custom",
        description="Flexible duration (any time range)",
        min_duration=1,
        max_duration=8760,
        calendar_view="month",
    ),
}


def get_booking_type_info(booking_type: BookingType) -> BookingTypeInfo:
    return BOOKING_TYPES[BookingType(booking_type)]


def default_duration(booking_type: BookingType) -> int:
    """Duration a fresh selection starts with: the type's minimum."""
    return get_booking_type_info(booking_type).min_duration


def calendar_view_for(booking_type: BookingType) -> str:
    """Calendar view a booking type is picked in: day, week or month."""
    return get_booking_type_info(booking_type).calendar_view


class DateSelection(BaseModel):
    """Snapshot of the current selection, emitted to the booking consumer."""

    start_date: Optional[date] = None
    end_date: Optional[date] = None
    start_time: Optional[datetime] = None
    end_time: Optional[datetime] = None
    duration_hours: int
    booking_type: BookingType

    @model_validator(mode="after")
    def check_order(self) -> "DateSelection":
        if self.start_date and self.end_date and self.end_date < self.start_date:
            raise ValueError(
                f"end_date {self.end_date} is before start_date {self.start_date}"
            )
        return self

    @property
    def is_complete(self) -> bool:
        return self.start_date is not None and self.end_date is not None

    @property
    def duration_in_bounds(self) -> bool:
        """Whether duration_hours fits the booking type; callers decide what to do if not."""
        return get_booking_type_info(self.booking_type).allows(self.duration_hours)
