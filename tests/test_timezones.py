"""Tests for the fixed time zone table and business-day helpers."""

from datetime import date, datetime, timedelta, timezone

from rental_scheduler.scheduling.timezones import (
    TIME_ZONES,
    business_hours,
    convert_to_zone,
    get_time_zone_info,
    is_business_hour,
    next_business_day,
    working_days_between,
)


class TestTimeZoneTable:
    def test_ten_zones(self):
        assert len(TIME_ZONES) == 10

    def test_lookup(self):
        info = get_time_zone_info("America/New_York")
        assert info.city == "New York"
        assert info.utc_offset == timedelta(hours=-5)

    def test_unknown_zone(self):
        assert get_time_zone_info("Mars/Olympus") is None


class TestBusinessHours:
    def test_default_hours(self):
        assert business_hours("UTC") == (9, 17)

    def test_hours_ignore_zone(self):
        assert business_hours("Asia/Tokyo") == business_hours("America/New_York") == business_hours()

    def test_naive_datetime_treated_as_utc(self):
        converted = convert_to_zone(datetime(2024, 1, 1, 8), "Africa/Casablanca")
        assert converted.hour == 9

    def test_is_business_hour_uses_offset(self):
        assert is_business_hour(datetime(2024, 1, 1, 8), "Africa/Casablanca")
        assert not is_business_hour(datetime(2024, 1, 1, 8), "UTC")
        assert not is_business_hour(datetime(2024, 1, 1, 13), "America/New_York")
        assert is_business_hour(datetime(2024, 1, 1, 14), "America/New_York")

    def test_aware_datetime(self):
        moment = datetime(2024, 1, 1, 10, tzinfo=timezone(timedelta(hours=1)))
        assert convert_to_zone(moment, "UTC").hour == 9

    def test_unknown_zone_falls_back_to_utc(self):
        assert convert_to_zone(datetime(2024, 1, 1, 8), "Nowhere").hour == 8


class TestBusinessDays:
    def test_next_business_day_skips_weekend(self):
        assert next_business_day(date(2024, 1, 5)) == date(2024, 1, 8)
        assert next_business_day(date(2024, 1, 6)) == date(2024, 1, 8)

    def test_next_business_day_midweek(self):
        assert next_business_day(date(2024, 1, 2)) == date(2024, 1, 3)

    def test_working_days_inclusive(self):
        assert working_days_between(date(2024, 1, 1), date(2024, 1, 14)) == 10
        assert working_days_between(date(2024, 1, 6), date(2024, 1, 7)) == 0
