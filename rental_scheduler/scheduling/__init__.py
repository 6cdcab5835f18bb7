from rental_scheduler.scheduling.availability_cache import AvailabilityCache
from rental_scheduler.scheduling.grid import CalendarDay, build_calendar_grid
from rental_scheduler.scheduling.selection import (
    DateSelectionMachine,
    SelectionPhase,
    calculate_duration,
)

__all__ = [
    "AvailabilityCache",
    "CalendarDay",
    "build_calendar_grid",
    "DateSelectionMachine",
    "SelectionPhase",
    "calculate_duration",
]
