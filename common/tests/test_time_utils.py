"""
Tests for common.time_utils module
"""
import pytest
import pytz
from datetime import datetime

from common.time_utils import minutes_to_clock, now_minute_of_day, format_duration, KYIV_TZ


@pytest.mark.unit
class TestMinutesToClock:

    def test_midnight(self):
        assert minutes_to_clock(0) == "0:00"

    def test_hours_without_leading_zero(self):
        assert minutes_to_clock(90) == "1:30"
        assert minutes_to_clock(125) == "2:05"

    def test_last_minute(self):
        assert minutes_to_clock(1439) == "23:59"

    def test_end_of_day(self):
        assert minutes_to_clock(1440) == "24:00"

    def test_round_trip_all_minutes(self):
        for m in range(1439):
            h, mm = minutes_to_clock(m).split(":")
            assert int(h) * 60 + int(mm) == m
            assert len(mm) == 2


@pytest.mark.unit
class TestFormatDuration:

    def test_zero(self):
        assert format_duration(0) == "0 мин"

    def test_minutes_only(self):
        assert format_duration(59) == "59 мин"
        assert format_duration(40) == "40 мин"

    def test_whole_hours(self):
        assert format_duration(60) == "1 ч"
        assert format_duration(180) == "3 ч"

    def test_hours_and_minutes(self):
        assert format_duration(90) == "1 ч 30 мин"
        assert format_duration(125) == "2 ч 5 мин"


@pytest.mark.unit
class TestNowMinuteOfDay:

    def test_explicit_kyiv_time(self):
        now = KYIV_TZ.localize(datetime(2025, 10, 19, 14, 25))
        assert now_minute_of_day(now) == 14 * 60 + 25

    def test_utc_is_converted_to_kyiv(self):
        # Summer time: Kyiv is UTC+3
        now = pytz.utc.localize(datetime(2025, 7, 1, 21, 30))
        assert now_minute_of_day(now) == 30

    def test_naive_is_treated_as_utc(self):
        # Winter time: Kyiv is UTC+2
        assert now_minute_of_day(datetime(2025, 1, 15, 10, 0)) == 12 * 60

    def test_system_clock_in_range(self):
        assert 0 <= now_minute_of_day() < 1440
