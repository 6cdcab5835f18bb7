"""
Fixed time zone table and business-hour helpers.

Offsets are static; no DST or tz-database lookups are performed.
"""

import logging
from dataclasses import dataclass
from datetime import date, datetime, timedelta, timezone
from typing import Optional

from rental_scheduler.config import settings
from rental_scheduler.utils import DateLike, as_date

logger = logging.getLogger(__name__)

WEEKEND = (5, 6)  # date.weekday(): Saturday, Sunday


@dataclass(frozen=True)
class TimeZoneInfo:
    """A selectable time zone with its fixed UTC offset."""

    name: str
    offset: str
    display_name: str
    city: str

    @property
    def utc_offset(self) -> timedelta:
        sign = -1 if self.offset.startswith("-") else 1
        hours, minutes = self.offset.lstrip("+-").split(":")
        return sign * timedelta(hours=int(hours), minutes=int(minutes))


TIME_ZONES: list[TimeZoneInfo] = [
    TimeZoneInfo("Africa/Casablanca", "+01:00", "WAT", "Casablanca"),
    TimeZoneInfo("Africa/Rabat", "+01:00", "WAT", "Rabat"),
    TimeZoneInfo("Africa/Marrakech", "+01:00", "WAT", "Marrakech"),
    TimeZoneInfo("Africa/Agadir", "+01:00", "WAT", "Agadir"),
    TimeZoneInfo("Africa/Tangier", "+01:00", "WAT", "Tangier"),
    TimeZoneInfo("Europe/London", "+00:00", "GMT", "London"),
    TimeZoneInfo("Europe/Paris", "+01:00", "CET", "Paris"),
    TimeZoneInfo("Europe/Madrid", "+01:00", "CET", "Madrid"),
    TimeZoneInfo("UTC", "+00:00", "UTC", "UTC"),
    TimeZoneInfo("America/New_York", "-05:00", "EST", "New York"),
]


def get_time_zone_info(name: str) -> Optional[TimeZoneInfo]:
    for tz in TIME_ZONES:
        if tz.name == name:
            return tz
    return None


def business_hours(zone_name: Optional[str] = None) -> tuple[int, int]:
    """
    (start, end) business hours from settings.

    ``zone_name`` is accepted but ignored: every zone shares the configured
    hours. Use ``is_business_hour`` to check a moment against a zone's offset.
    """
    return settings.calendar.business_hour_start, settings.calendar.business_hour_end


def convert_to_zone(moment: datetime, zone_name: str) -> datetime:
    """
    Express ``moment`` in the zone's fixed offset.

    Naive datetimes are taken as UTC. Unknown zones fall back to UTC.
    """
    info = get_time_zone_info(zone_name)
    if info is None:
        logger.debug("Unknown time zone %r, using UTC", zone_name)
        offset = timedelta(0)
    else:
        offset = info.utc_offset
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    return moment.astimezone(timezone(offset))


def is_business_hour(moment: datetime, zone_name: str) -> bool:
    start, end = business_hours(zone_name)
    return start <= convert_to_zone(moment, zone_name).hour < end


def next_business_day(day: DateLike) -> date:
    """The first Monday-Friday strictly after ``day``."""
    current = as_date(day) + timedelta(days=1)
    while current.weekday() in WEEKEND:
        current += timedelta(days=1)
    return current


def working_days_between(start: DateLike, end: DateLike) -> int:
    """Count Monday-Friday days from ``start`` to ``end`` inclusive."""
    count = 0
    current = as_date(start)
    last = as_date(end)
    while current <= last:
        if current.weekday() not in WEEKEND:
            count += 1
        current += timedelta(days=1)
    return count
