"""Integration tests: availability cache + selection machine + recurring pricing together."""

from datetime import date, datetime

import pytest

from rental_scheduler.recurring.pricing import (
    calculate_recurring_price,
    export_recurring_schedule,
    get_recurring_summary,
)
from rental_scheduler.recurring.series import generate_recurring_dates
from rental_scheduler.scheduling.availability_cache import AvailabilityCache
from rental_scheduler.scheduling.grid import build_calendar_grid
from rental_scheduler.scheduling.selection import DateSelectionMachine, SelectionPhase
from rental_scheduler.schemas.booking_schema import BookingType, DateSelection
from rental_scheduler.schemas.recurring_schema import RecurrenceType, RecurringPattern
from rental_scheduler.tools.availability import InMemoryAvailabilityProvider
from tests.conftest import TODAY, VEHICLE_ID, make_slot


class TestFullBookingFlow:
    """Simulate a renter picking dates for a vehicle and booking a recurring series."""

    @pytest.mark.asyncio
    async def test_happy_path_integration(self):
        provider = InMemoryAvailabilityProvider()
        provider.add_slot(VEHICLE_ID, make_slot(datetime(2024, 2, 7), datetime(2024, 2, 8)))
        cache = AvailabilityCache(provider, VEHICLE_ID, today=lambda: TODAY)
        machine = DateSelectionMachine(cache, BookingType.DAILY)

        submitted: list[DateSelection] = []
        machine.on_selection(submitted.append)

        # Navigate to February and render its grid
        await cache.ensure_month_loaded(date(2024, 2, 1))
        grid = build_calendar_grid(date(2024, 2, 1))
        disabled = [cell.key for cell in grid if cell.in_month and machine.is_date_disabled(cell.date)]
        assert disabled == ["2024-02-07", "2024-02-08"]

        # Reserved cell is ignored, free cells select a range
        assert not machine.click(date(2024, 2, 7))
        machine.click(date(2024, 2, 29))
        machine.click(date(2024, 2, 1))
        assert machine.phase == SelectionPhase.RANGE_COMPLETE
        assert submitted[-1].start_date == date(2024, 2, 1)
        assert submitted[-1].end_date == date(2024, 2, 29)

        # Recurring every Mon/Wed/Fri within the range
        machine.enable_recurring(
            RecurringPattern(type=RecurrenceType.WEEKLY, interval=1, days_of_week=[1, 3, 5])
        )
        booking = machine.recurring_booking()
        dates = generate_recurring_dates(booking)

        # Feb 1 2024 is a Thursday: it is included, then the Mon/Wed/Fri run
        assert dates[0] == datetime(2024, 2, 1)
        assert len(dates) == 13
        assert calculate_recurring_price(40, booking) == pytest.approx(40 * 13 * 0.95)
        assert get_recurring_summary(booking) == "13 occurrences from 2/1/2024 to 2/28/2024"
        assert len(export_recurring_schedule(booking).split("\n")) == 14

    @pytest.mark.asyncio
    async def test_vehicle_change_resets_session(self):
        provider = InMemoryAvailabilityProvider()
        provider.add_slot(VEHICLE_ID, make_slot(datetime(2024, 2, 7), datetime(2024, 2, 8)))
        cache = AvailabilityCache(provider, VEHICLE_ID, today=lambda: TODAY)
        machine = DateSelectionMachine(cache, BookingType.DAILY)

        await cache.ensure_month_loaded(date(2024, 2, 1))
        assert machine.is_date_disabled(date(2024, 2, 7))

        cache.reset(vehicle_id=8)
        machine.reset()
        await cache.ensure_month_loaded(date(2024, 2, 1))

        assert not machine.is_date_disabled(date(2024, 2, 7))
        assert machine.phase == SelectionPhase.IDLE

    @pytest.mark.asyncio
    async def test_provider_outage_keeps_calendar_usable(self):
        class DownProvider:
            async def get_unavailable_slots(self, vehicle_id, start_date, end_date, booking_type):
                raise TimeoutError("gateway timeout")

        cache = AvailabilityCache(DownProvider(), VEHICLE_ID, today=lambda: TODAY)
        machine = DateSelectionMachine(cache, BookingType.CUSTOM)

        await cache.ensure_month_loaded(date(2024, 2, 1))
        assert machine.click(date(2024, 2, 7))
        assert machine.click(date(2024, 2, 9))
        assert machine.phase == SelectionPhase.RANGE_COMPLETE

    def test_weekly_selection_feeds_recurring(self, cache):
        machine = DateSelectionMachine(cache, BookingType.WEEKLY)
        machine.click(date(2024, 1, 17))
        machine.enable_recurring(RecurringPattern(type=RecurrenceType.DAILY, interval=1))
        booking = machine.recurring_booking()

        assert booking.duration_hours == 168
        assert len(generate_recurring_dates(booking)) == 7
        assert calculate_recurring_price(10, booking) == pytest.approx(66.5)
