"""
Per-session availability cache for the booking calendar.

Wraps an AvailabilityProvider with two lazily populated maps:

    month key "YYYY-MM"    -> set of disabled "YYYY-MM-DD" days
    day key "YYYY-MM-DD"   -> set of disabled hours (0-23)

Entries are created on first access and kept for the life of the
session. Provider failures are cached as empty sets so the calendar
stays usable ("fail-open"); the renter simply sees those slots as free.

Usage:
    cache = AvailabilityCache(provider, vehicle_id=42)
    await cache.ensure_month_loaded(date(2024, 2, 1))
    cache.is_date_disabled(date(2024, 2, 14))
"""

import asyncio
from datetime import date, datetime, time, timedelta
from typing import Awaitable, Callable, Iterable, Optional

from rental_scheduler.config import settings
from rental_scheduler.logging_context import get_session_logger, set_session_id
from rental_scheduler.schemas.availability_schema import UnavailableSlot
from rental_scheduler.schemas.booking_schema import BookingType
from rental_scheduler.tools.availability import AvailabilityProvider
from rental_scheduler.utils import (
    DateLike,
    as_date,
    day_key,
    first_of_month,
    iter_days,
    last_of_month,
    month_key,
)

logger = get_session_logger(__name__)

DAY_LEVEL_SLOT_TYPES = frozenset({BookingType.DAILY, BookingType.WEEKLY})


def session_id_for(vehicle_id: int) -> str:
    """Log correlation ID for a vehicle-selection session."""
    return f"VEH-{vehicle_id}"


class AvailabilityCache:
    """
    Memoized view over an AvailabilityProvider for one vehicle.

    Only this class mutates the two maps; everything else reads them via
    ``is_date_disabled`` / ``is_hour_disabled``. Concurrent loads for the
    same key share one provider request.
    """

    def __init__(
        self,
        provider: AvailabilityProvider,
        vehicle_id: int,
        today: Callable[[], date] = date.today,
        padding_days: Optional[int] = None,
    ) -> None:
        self._provider = provider
        self._vehicle_id = vehicle_id
        self._today = today
        self._padding = timedelta(
            days=settings.availability.month_padding_days if padding_days is None else padding_days
        )
        self._disabled_days: dict[str, set[str]] = {}
        self._disabled_hours: dict[str, set[int]] = {}
        self._pending: dict[str, asyncio.Future] = {}
        self._generation = 0
        set_session_id(session_id_for(vehicle_id))

    @property
    def vehicle_id(self) -> int:
        return self._vehicle_id

    def today(self) -> date:
        return self._today()

    def is_month_loaded(self, month_ref: DateLike) -> bool:
        return month_key(month_ref) in self._disabled_days

    def is_day_loaded(self, day: DateLike) -> bool:
        return day_key(day) in self._disabled_hours

    # ------------------------------------------------------------------ #
    # Loading
    # ------------------------------------------------------------------ #

    async def ensure_month_loaded(self, month_ref: DateLike, force: bool = False) -> None:
        """Load disabled days for the month of ``month_ref`` unless already cached."""
        key = month_key(month_ref)
        if key in self._disabled_days and not force:
            logger.debug("Month %s already cached", key)
            return
        generation = self._generation
        await self._load_once(
            f"month:{key}", lambda: self._load_month(key, month_ref, generation)
        )

    async def ensure_hours_loaded(self, day: DateLike, force: bool = False) -> None:
        """Load disabled hours for ``day`` unless already cached."""
        key = day_key(day)
        if key in self._disabled_hours and not force:
            logger.debug("Hours for %s already cached", key)
            return
        generation = self._generation
        await self._load_once(f"day:{key}", lambda: self._load_hours(key, day, generation))

    async def _load_once(self, pending_key: str, load: Callable[[], Awaitable[None]]) -> None:
        pending = self._pending.get(pending_key)
        if pending is None or pending.done():
            pending = asyncio.ensure_future(load())
            self._pending[pending_key] = pending
        try:
            await asyncio.shield(pending)
        finally:
            if pending.done() and self._pending.get(pending_key) is pending:
                del self._pending[pending_key]

    async def _load_month(self, key: str, month_ref: DateLike, generation: int) -> None:
        start = datetime.combine(first_of_month(month_ref), time.min) - self._padding
        end = datetime.combine(last_of_month(month_ref), time.max) + self._padding

        try:
            slots = await self._provider.get_unavailable_slots(
                self._vehicle_id, start, end, BookingType.DAILY
            )
        except Exception as e:
            logger.warning(
                "Availability load failed for vehicle %s month %s, treating as available: %s",
                self._vehicle_id, key, e,
            )
            slots = []

        if generation != self._generation:
            logger.debug("Discarding stale month %s result for previous vehicle", key)
            return

        self._disabled_days[key] = _expand_days(slots)
        logger.info(
            "Loaded month %s for vehicle %s: %d disabled days",
            key, self._vehicle_id, len(self._disabled_days[key]),
        )

    async def _load_hours(self, key: str, day: DateLike, generation: int) -> None:
        start = datetime.combine(as_date(day), time.min)
        end = datetime.combine(as_date(day), time.max)

        try:
            slots = await self._provider.get_unavailable_slots(
                self._vehicle_id, start, end, BookingType.HOURLY
            )
        except Exception as e:
            logger.warning(
                "Hourly availability load failed for vehicle %s on %s, treating as available: %s",
                self._vehicle_id, key, e,
            )
            slots = []

        if generation != self._generation:
            logger.debug("Discarding stale hours %s result for previous vehicle", key)
            return

        self._disabled_hours[key] = _expand_hours(slots)
        logger.info(
            "Loaded hours for %s, vehicle %s: %d disabled hours",
            key, self._vehicle_id, len(self._disabled_hours[key]),
        )

    # ------------------------------------------------------------------ #
    # Queries
    # ------------------------------------------------------------------ #

    def is_date_disabled(
        self, day: DateLike, fallback_disabled: Iterable[DateLike] = ()
    ) -> bool:
        """
        Whether ``day`` cannot be selected.

        Past days are always disabled. Otherwise the loaded set for the
        day's month decides; before that month loads, ``fallback_disabled``
        is consulted instead.
        """
        day = as_date(day)
        if day < self.today():
            return True

        disabled = self._disabled_days.get(month_key(day))
        if disabled is not None:
            return day_key(day) in disabled

        return any(as_date(d) == day for d in fallback_disabled)

    def is_hour_disabled(self, day: DateLike, hour: int) -> bool:
        """Whether ``hour`` on ``day`` is taken; False until the day is loaded."""
        return hour in self._disabled_hours.get(day_key(day), ())

    def reset(self, vehicle_id: Optional[int] = None) -> None:
        """
        Drop every cached entry, optionally switching vehicle.

        Loads still in flight finish but their results are discarded.
        """
        if vehicle_id is not None:
            self._vehicle_id = vehicle_id
            set_session_id(session_id_for(vehicle_id))
        self._generation += 1
        self._disabled_days.clear()
        self._disabled_hours.clear()
        self._pending.clear()
        logger.info("Availability cache reset for vehicle %s", self._vehicle_id)


def _expand_days(slots: list[UnavailableSlot]) -> set[str]:
    """Every day touched by a DAILY/WEEKLY slot, both endpoints inclusive."""
    disabled: set[str] = set()
    for slot in slots:
        if slot.slot_type not in DAY_LEVEL_SLOT_TYPES:
            continue
        for day in iter_days(slot.start_date.date(), slot.end_date.date()):
            disabled.add(day_key(day))
    return disabled


def _expand_hours(slots: list[UnavailableSlot]) -> set[int]:
    """Hours in [start.hour, end.hour) of every HOURLY slot."""
    disabled: set[int] = set()
    for slot in slots:
        if slot.slot_type != BookingType.HOURLY:
            continue
        disabled.update(range(slot.start_date.hour, slot.end_date.hour))
    return disabled
