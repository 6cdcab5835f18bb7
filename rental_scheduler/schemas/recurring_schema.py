"""Recurring booking pattern models."""

from datetime import date, datetime
from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, Field, field_validator

from rental_scheduler.schemas.booking_schema import BookingType
from rental_scheduler.utils import as_datetime


class RecurrenceType(str, Enum):
    DAILY = "daily"
    WEEKLY = "weekly"
    MONTHLY = "monthly"
    CUSTOM = "custom"


def _promote_date(value: Any) -> Any:
    if isinstance(value, date) and not isinstance(value, datetime):
        return as_datetime(value)
    return value


class RecurringPattern(BaseModel):
    """
    How a booking repeats.

    Values are not range-checked on construction; use
    ``validate_recurring_pattern`` to report problems so callers can
    decide whether to block or warn.
    """

    type: RecurrenceType
    interval: int = 1
    days_of_week: Optional[list[int]] = None  # 0 = Sunday ... 6 = Saturday
    day_of_month: Optional[int] = None
    end_date: Optional[datetime] = None
    occurrences: Optional[int] = None

    @field_validator("end_date", mode="before")
    @classmethod
    def promote_end_date(cls, value: Any) -> Any:
        return _promote_date(value)


class RecurringBooking(BaseModel):
    """Input envelope for the series generator."""

    pattern: RecurringPattern
    start_date: datetime
    end_date: datetime
    duration_hours: int
    booking_type: BookingType

    @field_validator("start_date", "end_date", mode="before")
    @classmethod
    def promote_bounds(cls, value: Any) -> Any:
        return _promote_date(value)


class PatternValidation(BaseModel):
    valid: bool
    errors: list[str] = Field(default_factory=list)
