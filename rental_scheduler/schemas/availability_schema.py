"""Availability data models returned by the availability provider."""

from datetime import datetime
from enum import Enum

from pydantic import BaseModel

from rental_scheduler.schemas.booking_schema import BookingType


class SlotReason(str, Enum):
    RESERVED = "RESERVED"
    MAINTENANCE = "MAINTENANCE"
    UNAVAILABLE = "UNAVAILABLE"


class UnavailableSlot(BaseModel):
    """A committed interval during which the vehicle cannot be booked."""

    model_config = {"frozen": True}

    start_date: datetime
    end_date: datetime
    reason: SlotReason
    slot_type: BookingType


class AvailabilitySummary(BaseModel):
    """Availability counts over a date range."""
    total_days: int = 0
    available_days: int = 0
    unavailable_days: int = 0
    availability_percentage: float = 0.0
