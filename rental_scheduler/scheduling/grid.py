"""
Month grid construction for the booking calendar.

A month is always rendered as six full Sunday-first weeks so the grid
never changes height while the renter navigates between months.
"""

from dataclasses import dataclass
from datetime import date, timedelta

from rental_scheduler.utils import DateLike, day_key, first_of_month, start_of_week

GRID_MIN_CELLS = 42
DAYS_PER_WEEK = 7


@dataclass(frozen=True)
class CalendarDay:
    """One cell of the month grid."""

    date: date
    in_month: bool

    @property
    def key(self) -> str:
        return day_key(self.date)


def build_calendar_grid(month_ref: DateLike) -> list[CalendarDay]:
    """
    Build the grid for the month containing ``month_ref``.

    Starts on the Sunday on or before the 1st and keeps adding days until
    the count is a multiple of 7 and at least 42.
    """
    first = first_of_month(month_ref)
    current = start_of_week(first)
    cells: list[CalendarDay] = []

    while len(cells) < GRID_MIN_CELLS or len(cells) % DAYS_PER_WEEK:
        cells.append(CalendarDay(date=current, in_month=current.month == first.month))
        current += timedelta(days=1)

    return cells


def grid_weeks(cells: list[CalendarDay]) -> list[list[CalendarDay]]:
    """Split a grid into Sunday-first rows of seven."""
    return [cells[i:i + DAYS_PER_WEEK] for i in range(0, len(cells), DAYS_PER_WEEK)]
