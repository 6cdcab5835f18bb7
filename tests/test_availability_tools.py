"""Tests for the in-memory availability provider and availability queries."""

from datetime import datetime

import pytest

from rental_scheduler.schemas.booking_schema import BookingType
from rental_scheduler.tools.availability import (
    InMemoryAvailabilityProvider,
    get_availability_summary,
    is_date_time_available,
)
from tests.conftest import VEHICLE_ID, make_slot


@pytest.fixture
def busy_provider():
    provider = InMemoryAvailabilityProvider()
    provider.add_slot(VEHICLE_ID, make_slot(datetime(2024, 2, 10), datetime(2024, 2, 11)))
    provider.add_slot(
        VEHICLE_ID,
        make_slot(datetime(2024, 2, 20, 14), datetime(2024, 2, 20, 16), BookingType.HOURLY),
    )
    return provider


class TestInMemoryProvider:
    @pytest.mark.asyncio
    async def test_returns_overlapping_slots_only(self, busy_provider):
        slots = await busy_provider.get_unavailable_slots(
            VEHICLE_ID, datetime(2024, 2, 11), datetime(2024, 2, 15)
        )
        assert len(slots) == 1
        assert slots[0].start_date == datetime(2024, 2, 10)

    @pytest.mark.asyncio
    async def test_other_vehicle_has_no_slots(self, busy_provider):
        assert await busy_provider.get_unavailable_slots(
            999, datetime(2024, 2, 1), datetime(2024, 2, 28)
        ) == []

    @pytest.mark.asyncio
    async def test_records_calls(self, busy_provider):
        await busy_provider.get_unavailable_slots(
            VEHICLE_ID, datetime(2024, 2, 1), datetime(2024, 2, 2), BookingType.HOURLY
        )
        assert busy_provider.calls[-1][3] == BookingType.HOURLY

    def test_reset_clears_everything(self, busy_provider):
        busy_provider.reset()
        assert busy_provider.calls == []


class TestIsDateTimeAvailable:
    @pytest.mark.asyncio
    async def test_free_day(self, busy_provider):
        assert await is_date_time_available(busy_provider, VEHICLE_ID, datetime(2024, 2, 5))

    @pytest.mark.asyncio
    async def test_reserved_day(self, busy_provider):
        assert not await is_date_time_available(busy_provider, VEHICLE_ID, datetime(2024, 2, 10, 9))

    @pytest.mark.asyncio
    async def test_hourly_window_is_one_hour(self, busy_provider):
        assert not await is_date_time_available(
            busy_provider, VEHICLE_ID, datetime(2024, 2, 20, 15), BookingType.HOURLY
        )
        assert await is_date_time_available(
            busy_provider, VEHICLE_ID, datetime(2024, 2, 20, 10), BookingType.HOURLY
        )
        _, start, end, _ = busy_provider.calls[-1]
        assert (end - start).total_seconds() == 3600


class TestAvailabilitySummary:
    @pytest.mark.asyncio
    async def test_counts_slots_as_unavailable_days(self, busy_provider):
        summary = await get_availability_summary(
            busy_provider, VEHICLE_ID, datetime(2024, 2, 1), datetime(2024, 2, 15)
        )
        assert summary.total_days == 14
        assert summary.unavailable_days == 1
        assert summary.available_days == 13
        assert summary.availability_percentage == pytest.approx(13 / 14 * 100)

    @pytest.mark.asyncio
    async def test_partial_day_rounds_up(self, busy_provider):
        summary = await get_availability_summary(
            busy_provider, VEHICLE_ID, datetime(2024, 3, 1), datetime(2024, 3, 2, 6)
        )
        assert summary.total_days == 2
        assert summary.availability_percentage == 100

    @pytest.mark.asyncio
    async def test_empty_range_is_all_zero(self, busy_provider):
        summary = await get_availability_summary(
            busy_provider, VEHICLE_ID, datetime(2024, 3, 1), datetime(2024, 3, 1)
        )
        assert summary.total_days == 0
        assert summary.availability_percentage == 0
