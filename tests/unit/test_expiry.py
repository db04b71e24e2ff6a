"""Tests for the DST-aware cache expiry calculation (07:35 Central)."""
from datetime import date, datetime, timedelta, timezone
from zoneinfo import ZoneInfo

import pytest

from conftest import utc
from sleeptrack.analysis.expiry import seconds_until_expiry, target_instant, utc_offset_hours

CHICAGO = ZoneInfo("America/Chicago")


class TestUtcOffsetHours:
    @pytest.mark.parametrize("day,expected", [
        (date(2025, 1, 15), -6),
        (date(2025, 7, 4), -5),
        (date(2025, 3, 8), -6),   # last day of CST
        (date(2025, 3, 9), -5),   # CDT begins 02:00 local
        (date(2025, 11, 1), -5),  # last day of CDT
        (date(2025, 11, 2), -6),  # CST resumes 02:00 local
    ])
    def test_chicago(self, day, expected):
        assert utc_offset_hours(day, CHICAGO) == expected

    def test_utc(self):
        assert utc_offset_hours(date(2025, 1, 15), ZoneInfo("UTC")) == 0

    def test_east_of_utc(self):
        assert utc_offset_hours(date(2025, 1, 15), ZoneInfo("Asia/Tokyo")) == 9

    def test_probe_rolling_onto_next_local_day(self):
        assert utc_offset_hours(date(2025, 1, 15), ZoneInfo("Pacific/Kiritimati")) == 14


class TestTargetInstant:
    def test_standard_time(self):
        assert target_instant(date(2025, 1, 15), CHICAGO) == utc(2025, 1, 15, 13, 35)

    def test_daylight_time(self):
        assert target_instant(date(2025, 7, 4), CHICAGO) == utc(2025, 7, 4, 12, 35)

    def test_shifts_by_an_hour_across_fall_back(self):
        before = target_instant(date(2025, 11, 1), CHICAGO)
        after = target_instant(date(2025, 11, 2), CHICAGO)
        assert after - before == timedelta(hours=25)

    def test_is_local_wall_clock(self):
        local = target_instant(date(2025, 11, 2), CHICAGO).astimezone(CHICAGO)
        assert (local.hour, local.minute) == (7, 35)


class TestSecondsUntilExpiry:
    def test_later_today_in_winter(self):
        assert seconds_until_expiry(utc(2025, 1, 15, 12, 0)) == 95 * 60

    def test_later_today_in_summer(self):
        assert seconds_until_expiry(utc(2025, 7, 4, 12, 0)) == 35 * 60

    def test_rolls_to_tomorrow_after_threshold(self):
        assert seconds_until_expiry(utc(2025, 1, 15, 14, 0)) == (23 * 60 + 35) * 60

    def test_exactly_at_threshold_waits_a_full_day(self):
        assert seconds_until_expiry(utc(2025, 1, 15, 13, 35)) == 24 * 3600

    def test_fall_back_day_uses_new_offset(self):
        """An hour before 07:35 CST on the day standard time resumes."""
        assert seconds_until_expiry(utc(2025, 11, 2, 12, 35)) == 3600

    def test_day_before_fall_back_targets_tomorrow_in_standard_time(self):
        # 08:00 CDT on Nov 1; next threshold is 07:35 CST Nov 2 = 13:35Z
        assert seconds_until_expiry(utc(2025, 11, 1, 13, 0)) == (24 * 60 + 35) * 60

    def test_spring_forward_day_uses_new_offset(self):
        assert seconds_until_expiry(utc(2025, 3, 9, 11, 35)) == 3600

    def test_day_before_spring_forward_targets_tomorrow_in_daylight_time(self):
        # 08:00 CST on Mar 8; next threshold is 07:35 CDT Mar 9 = 12:35Z
        assert seconds_until_expiry(utc(2025, 3, 8, 14, 0)) == (22 * 60 + 35) * 60

    def test_local_evening_on_previous_calendar_day(self):
        # 21:00 CST Jan 15 is 03:00Z Jan 16; next threshold 13:35Z Jan 16
        assert seconds_until_expiry(utc(2025, 1, 16, 3, 0)) == (10 * 60 + 35) * 60

    def test_accepts_non_utc_now(self):
        now = datetime(2025, 1, 15, 6, 0, tzinfo=timezone(timedelta(hours=-6)))
        assert seconds_until_expiry(now) == 95 * 60

    def test_floors_fractional_seconds(self):
        now = datetime(2025, 1, 15, 13, 34, 58, 700000, tzinfo=timezone.utc)
        assert seconds_until_expiry(now) == 1

    def test_custom_threshold_and_zone(self):
        # 06:00 in Tokyo is 21:00Z the previous day
        assert seconds_until_expiry(utc(2025, 1, 15, 20, 0), tz_name="Asia/Tokyo", hour=6, minute=0) == 3600

    def test_never_negative_across_a_year(self):
        now = utc(2025, 1, 1)
        while now < utc(2026, 1, 1):
            ttl = seconds_until_expiry(now)
            assert 0 <= ttl <= 25 * 3600
            now += timedelta(hours=5, minutes=17)
