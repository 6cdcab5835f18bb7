"""
Availability provider boundary and an in-memory mock.

In production, the provider wraps the reservations API
(``/reservations/vehicles/{id}/unavailable-slots``) behind the same
coroutine signature. The scheduling engine only ever reads its results.
"""

import logging
import math
from datetime import datetime, timedelta
from typing import Optional, Protocol

from rental_scheduler.schemas.availability_schema import AvailabilitySummary, UnavailableSlot
from rental_scheduler.schemas.booking_schema import BookingType

logger = logging.getLogger(__name__)


class AvailabilityProvider(Protocol):
    """Source of busy slots for a vehicle."""

    async def get_unavailable_slots(
        self,
        vehicle_id: int,
        start_date: datetime,
        end_date: datetime,
        booking_type: BookingType = BookingType.DAILY,
    ) -> list[UnavailableSlot]:
        ...


class InMemoryAvailabilityProvider:
    """
    Mock provider backed by a per-vehicle list of slots.

    Returns every slot overlapping the requested window. The booking type
    argument is recorded but does not filter, matching the reservations
    API which leaves slot-type filtering to the caller.
    """

    def __init__(self, slots: Optional[dict[int, list[UnavailableSlot]]] = None) -> None:
        self._slots: dict[int, list[UnavailableSlot]] = {
            vehicle_id: list(vehicle_slots) for vehicle_id, vehicle_slots in (slots or {}).items()
        }
        self.calls: list[tuple[int, datetime, datetime, BookingType]] = []

    def add_slot(self, vehicle_id: int, slot: UnavailableSlot) -> None:
        self._slots.setdefault(vehicle_id, []).append(slot)

    async def get_unavailable_slots(
        self,
        vehicle_id: int,
        start_date: datetime,
        end_date: datetime,
        booking_type: BookingType = BookingType.DAILY,
    ) -> list[UnavailableSlot]:
        self.calls.append((vehicle_id, start_date, end_date, booking_type))
        matches = [
            slot
            for slot in self._slots.get(vehicle_id, [])
            if slot.start_date <= end_date and slot.end_date >= start_date
        ]
        logger.debug(
            "Vehicle %s: %d unavailable slots between %s and %s",
            vehicle_id, len(matches), start_date.isoformat(), end_date.isoformat(),
        )
        return matches

    def reset(self) -> None:
        """Clear all slots and recorded calls. Used by test fixtures for isolation."""
        self._slots.clear()
        self.calls.clear()


async def is_date_time_available(
    provider: AvailabilityProvider,
    vehicle_id: int,
    at: datetime,
    booking_type: BookingType = BookingType.DAILY,
) -> bool:
    """Check whether a one-hour (HOURLY) or one-day window starting at ``at`` is free."""
    window = timedelta(hours=1) if booking_type == BookingType.HOURLY else timedelta(days=1)
    slots = await provider.get_unavailable_slots(vehicle_id, at, at + window, booking_type)
    return not slots


async def get_availability_summary(
    provider: AvailabilityProvider,
    vehicle_id: int,
    start_date: datetime,
    end_date: datetime,
    booking_type: BookingType = BookingType.DAILY,
) -> AvailabilitySummary:
    """
    Summarize availability over a range.

    Each returned slot counts as one unavailable day, as the reservations
    API reports day-granular slots for DAILY queries.
    """
    slots = await provider.get_unavailable_slots(vehicle_id, start_date, end_date, booking_type)
    total_days = math.ceil((end_date - start_date).total_seconds() / 86400)
    if total_days <= 0:
        return AvailabilitySummary()

    unavailable_days = len(slots)
    available_days = total_days - unavailable_days
    return AvailabilitySummary(
        total_days=total_days,
        available_days=available_days,
        unavailable_days=unavailable_days,
        availability_percentage=available_days / total_days * 100,
    )
