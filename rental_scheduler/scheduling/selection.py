"""
Selection state machine for the booking calendar.

Tracks what the renter has picked across the four booking types.
WEEKLY selection is single-click (the clicked week is toggled); the
other types use a two-click range protocol:

    Idle --click--> AnchorSet(day) --click--> Complete(start, end)
    Complete --click--> AnchorSet(day)

Clicks on disabled cells never change state. Every state-changing
action emits a DateSelection snapshot to registered listeners.

Usage:
    machine = DateSelectionMachine(cache, BookingType.DAILY)
    machine.on_selection(consumer.submit)
    machine.click(date(2024, 3, 4))
    machine.click(date(2024, 3, 1))
    assert machine.phase == SelectionPhase.RANGE_COMPLETE
"""

import math
from dataclasses import dataclass
from datetime import date, datetime, time, timedelta
from enum import Enum
from typing import Callable, Iterable, Optional, Union

from rental_scheduler.config import settings
from rental_scheduler.logging_context import get_session_logger
from rental_scheduler.schemas.booking_schema import (
    BookingType,
    DateSelection,
    default_duration,
    get_booking_type_info,
)
from rental_scheduler.schemas.recurring_schema import (
    RecurrenceType,
    RecurringBooking,
    RecurringPattern,
)
from rental_scheduler.scheduling.availability_cache import AvailabilityCache
from rental_scheduler.scheduling.timezones import business_hours
from rental_scheduler.utils import DateLike, as_date, day_key, iter_days, start_of_week

logger = get_session_logger(__name__)

HOURS_PER_DAY = 24
HOURS_PER_WEEK = 168

QUICK_DURATIONS: dict[BookingType, list[int]] = {
    BookingType.HOURLY: [1, 2, 4, 8, 12, 24],
    BookingType.DAILY: [24, 48, 72, 120, 168],
    BookingType.WEEKLY: [168, 336, 504, 672],
    BookingType.CUSTOM: [24, 48, 72, 168, 336, 504],
}


class SelectionPhase(str, Enum):
    IDLE = "idle"
    RANGE_START = "range_start"
    RANGE_COMPLETE = "range_complete"


@dataclass(frozen=True)
class Idle:
    phase = SelectionPhase.IDLE


@dataclass(frozen=True)
class AnchorSet:
    """First endpoint chosen; waiting for the second click."""

    anchor: date
    phase = SelectionPhase.RANGE_START


@dataclass(frozen=True)
class Complete:
    start: date
    end: date
    phase = SelectionPhase.RANGE_COMPLETE


SelectionState = Union[Idle, AnchorSet, Complete]

SelectionListener = Callable[[DateSelection], None]
BookingTypeListener = Callable[[BookingType], None]


def calculate_duration(start_time: datetime, end_time: datetime) -> int:
    """Whole hours between two time picks, rounded up and never below 1."""
    diff_hours = (end_time - start_time).total_seconds() / 3600
    return max(1, math.ceil(diff_hours))


def duration_label(hours: int) -> str:
    """Human label for a duration: hours below a day, days below a week, else weeks."""
    if hours < HOURS_PER_DAY:
        return f"{hours} hours"
    if hours < HOURS_PER_WEEK:
        return f"{round(hours / HOURS_PER_DAY)} days"
    return f"{round(hours / HOURS_PER_WEEK)} weeks"


def quick_duration_options(booking_type: BookingType) -> list[int]:
    """Preset durations offered for a booking type, limited to its bounds."""
    info = get_booking_type_info(booking_type)
    return [hours for hours in QUICK_DURATIONS[info.value] if info.allows(hours)]


def is_duration_valid(hours: int, booking_type: BookingType) -> bool:
    return get_booking_type_info(booking_type).allows(hours)


def available_hours() -> list[int]:
    return list(range(HOURS_PER_DAY))


def available_end_hours(start_hour: Optional[int]) -> list[int]:
    """End hours that may follow ``start_hour``; empty until a start is picked."""
    if start_hour is None:
        return []
    return list(range(start_hour + 1, HOURS_PER_DAY))


class DateSelectionMachine:
    """
    Owns the current selection for one vehicle-selection session.

    Reads availability from the shared AvailabilityCache but never
    writes to it. Duration is tracked independently of the date range:
    from explicit time picks when both are set, otherwise from a preset.
    """

    def __init__(
        self,
        cache: AvailabilityCache,
        booking_type: BookingType = BookingType.DAILY,
        fallback_disabled: Iterable[DateLike] = (),
        time_zone: Optional[str] = None,
    ) -> None:
        self._cache = cache
        self._booking_type = BookingType(booking_type)
        self._fallback_disabled = [as_date(d) for d in fallback_disabled]
        self.time_zone = time_zone or settings.calendar.default_time_zone

        self._state: SelectionState = Idle()
        self._selected_weeks: set[str] = set()
        self._selected_days: set[str] = set()
        self._start_time: Optional[datetime] = None
        self._end_time: Optional[datetime] = None
        self._duration_hours = default_duration(self._booking_type)

        self._recurring_enabled = False
        self._recurring_pattern: Optional[RecurringPattern] = None

        self._selection_listeners: list[SelectionListener] = []
        self._booking_type_listeners: list[BookingTypeListener] = []

    # ------------------------------------------------------------------ #
    # Read-only state
    # ------------------------------------------------------------------ #

    @property
    def state(self) -> SelectionState:
        return self._state

    @property
    def phase(self) -> SelectionPhase:
        return self._state.phase

    @property
    def booking_type(self) -> BookingType:
        return self._booking_type

    @property
    def duration_hours(self) -> int:
        return self._duration_hours

    @property
    def start_date(self) -> Optional[date]:
        if isinstance(self._state, AnchorSet):
            return self._state.anchor
        if isinstance(self._state, Complete):
            return self._state.start
        return None

    @property
    def end_date(self) -> Optional[date]:
        if isinstance(self._state, AnchorSet):
            return self._state.anchor
        if isinstance(self._state, Complete):
            return self._state.end
        return None

    @property
    def selected_weeks(self) -> frozenset[str]:
        return frozenset(self._selected_weeks)

    @property
    def selected_days(self) -> frozenset[str]:
        return frozenset(self._selected_days)

    @property
    def recurring_enabled(self) -> bool:
        return self._recurring_enabled

    @property
    def recurring_pattern(self) -> Optional[RecurringPattern]:
        return self._recurring_pattern

    def snapshot(self) -> DateSelection:
        return DateSelection(
            start_date=self.start_date,
            end_date=self.end_date,
            start_time=self._start_time,
            end_time=self._end_time,
            duration_hours=self._duration_hours,
            booking_type=self._booking_type,
        )

    # ------------------------------------------------------------------ #
    # Listeners
    # ------------------------------------------------------------------ #

    def on_selection(self, listener: SelectionListener) -> Callable[[], None]:
        """Register a selection listener; returns a function that unregisters it."""
        self._selection_listeners.append(listener)
        return lambda: self._selection_listeners.remove(listener)

    def on_booking_type_change(self, listener: BookingTypeListener) -> Callable[[], None]:
        self._booking_type_listeners.append(listener)
        return lambda: self._booking_type_listeners.remove(listener)

    def _emit(self) -> None:
        selection = self.snapshot()
        for listener in list(self._selection_listeners):
            try:
                listener(selection)
            except Exception:
                logger.exception("Selection listener %r failed", listener)

    def _emit_booking_type(self) -> None:
        for listener in list(self._booking_type_listeners):
            try:
                listener(self._booking_type)
            except Exception:
                logger.exception("Booking type listener %r failed", listener)

    # ------------------------------------------------------------------ #
    # Availability
    # ------------------------------------------------------------------ #

    def is_date_disabled(self, day: DateLike) -> bool:
        """Past, beyond the booking horizon, or taken per the availability cache."""
        day = as_date(day)
        horizon = self._cache.today() + timedelta(days=settings.calendar.booking_horizon_days)
        if day > horizon:
            return True
        return self._cache.is_date_disabled(day, self._fallback_disabled)

    def is_hour_disabled(self, hour: int) -> bool:
        """
        For HOURLY bookings with a chosen day, hours that are taken or
        outside business hours cannot be picked.
        """
        start = self.start_date
        if start is None or self._booking_type != BookingType.HOURLY:
            return False
        if self._cache.is_hour_disabled(start, hour):
            return True
        open_hour, close_hour = business_hours(self.time_zone)
        return hour < open_hour or hour >= close_hour

    def set_fallback_disabled(self, days: Iterable[DateLike]) -> None:
        self._fallback_disabled = [as_date(d) for d in days]

    # ------------------------------------------------------------------ #
    # Transitions
    # ------------------------------------------------------------------ #

    def click(self, day: DateLike) -> bool:
        """
        Handle a click on a calendar cell.

        Returns:
            True if the selection changed, False for ignored clicks.
        """
        day = as_date(day)
        if self.is_date_disabled(day):
            logger.debug("Ignoring click on disabled day %s", day_key(day))
            return False

        old_phase = self.phase
        if self._booking_type == BookingType.WEEKLY:
            self._toggle_week(day)
        elif isinstance(self._state, AnchorSet):
            self._complete_range(self._state.anchor, day)
        else:
            self._state = AnchorSet(anchor=day)
            self._selected_days.clear()

        logger.debug(
            "Selection transition: %s -> %s (%s click on %s)",
            old_phase.value, self.phase.value, self._booking_type.value, day_key(day),
        )
        self._emit()
        return True

    def _toggle_week(self, day: date) -> None:
        week_start = start_of_week(day)
        key = day_key(week_start)
        if key in self._selected_weeks:
            self._selected_weeks.remove(key)
        else:
            self._selected_weeks.add(key)
        self._state = Complete(start=week_start, end=week_start + timedelta(days=6))

    def _complete_range(self, anchor: date, day: date) -> None:
        start, end = (anchor, day) if day >= anchor else (day, anchor)
        self._state = Complete(start=start, end=end)
        self._selected_days = {day_key(d) for d in iter_days(start, end)}

    def set_booking_type(self, booking_type: BookingType) -> None:
        """Switch booking type, clearing the selection and notifying listeners."""
        booking_type = BookingType(booking_type)
        if booking_type == self._booking_type:
            return
        logger.info(
            "Booking type changed: %s -> %s", self._booking_type.value, booking_type.value
        )
        self._booking_type = booking_type
        self.reset()
        self._emit_booking_type()

    def reset(self) -> None:
        """Return to Idle and restore the booking type's default duration."""
        self._state = Idle()
        self._selected_weeks.clear()
        self._selected_days.clear()
        self._start_time = None
        self._end_time = None
        self._duration_hours = default_duration(self._booking_type)

    # ------------------------------------------------------------------ #
    # Times and duration
    # ------------------------------------------------------------------ #

    def set_times(self, start_time: Optional[datetime], end_time: Optional[datetime]) -> None:
        """Record explicit time picks; duration follows when both are set."""
        self._start_time = start_time
        self._end_time = end_time
        if start_time is not None and end_time is not None:
            self._duration_hours = calculate_duration(start_time, end_time)
        self._emit()

    def set_start_hour(self, hour: int) -> None:
        self.set_times(self._at_hour(hour), self._end_time)

    def set_end_hour(self, hour: int) -> None:
        self.set_times(self._start_time, self._at_hour(hour))

    def _at_hour(self, hour: int) -> datetime:
        base = self.start_date or self._cache.today()
        return datetime.combine(base, time(hour=hour))

    def select_duration(self, hours: int) -> None:
        """
        Choose a duration preset.

        Not clamped to the booking type's bounds; check ``is_duration_valid``.
        """
        self._duration_hours = hours
        self._emit()

    def is_duration_valid(self) -> bool:
        return is_duration_valid(self._duration_hours, self._booking_type)

    def available_end_hours(self) -> list[int]:
        return available_end_hours(self._start_time.hour if self._start_time else None)

    def quick_duration_options(self) -> list[int]:
        return quick_duration_options(self._booking_type)

    def duration_label(self) -> str:
        return duration_label(self._duration_hours)

    # ------------------------------------------------------------------ #
    # Recurring mode
    # ------------------------------------------------------------------ #

    def enable_recurring(self, pattern: Optional[RecurringPattern] = None) -> None:
        """Turn on recurring mode; defaults to every weekday when no pattern is set."""
        self._recurring_enabled = True
        if pattern is not None:
            self._recurring_pattern = pattern
        elif self._recurring_pattern is None:
            self._recurring_pattern = RecurringPattern(
                type=RecurrenceType.WEEKLY, interval=1, days_of_week=[1, 2, 3, 4, 5]
            )
        self._emit()

    def disable_recurring(self) -> None:
        self._recurring_enabled = False
        self._emit()

    def recurring_booking(self) -> Optional[RecurringBooking]:
        """Generator input for the completed range, or None if not applicable."""
        if not self._recurring_enabled or self._recurring_pattern is None:
            return None
        if not isinstance(self._state, Complete):
            return None
        return RecurringBooking(
            pattern=self._recurring_pattern,
            start_date=datetime.combine(self._state.start, time.min),
            end_date=datetime.combine(self._state.end, time.min),
            duration_hours=self._duration_hours,
            booking_type=self._booking_type,
        )
