"""Tests for hh_common.datetime_utils: household calendar boundaries."""

from datetime import UTC, date, datetime
from unittest.mock import patch

from src.hh_common import datetime_utils
from src.hh_common.datetime_utils import day_range, household_today, month_range, utc_now


class TestUtcNow:
    def test_is_aware_utc(self) -> None:
        now = utc_now()
        assert now.tzinfo is not None
        assert now.utcoffset().total_seconds() == 0


class TestHouseholdToday:
    def test_late_evening_local_is_previous_utc_day(self) -> None:
        with patch.object(datetime_utils.settings, "HOUSEHOLD_TIMEZONE", "America/New_York"):
            # 02:30 UTC on Mar 2 is 21:30 on Mar 1 in New York
            moment = datetime(2026, 3, 2, 2, 30, tzinfo=UTC)
            assert household_today(moment) == date(2026, 3, 1)

    def test_utc_household(self) -> None:
        with patch.object(datetime_utils.settings, "HOUSEHOLD_TIMEZONE", "UTC"):
            moment = datetime(2026, 3, 2, 2, 30, tzinfo=UTC)
            assert household_today(moment) == date(2026, 3, 2)


class TestRanges:
    def test_day_range_is_half_open(self) -> None:
        with patch.object(datetime_utils.settings, "HOUSEHOLD_TIMEZONE", "UTC"):
            start, end = day_range(date(2026, 3, 1), date(2026, 3, 3))
        assert start == datetime(2026, 3, 1, tzinfo=UTC)
        assert end == datetime(2026, 3, 4, tzinfo=UTC)

    def test_month_range_december_rolls_year(self) -> None:
        with patch.object(datetime_utils.settings, "HOUSEHOLD_TIMEZONE", "UTC"):
            start, end = month_range(12, 2025)
        assert start == datetime(2025, 12, 1, tzinfo=UTC)
        assert end == datetime(2026, 1, 1, tzinfo=UTC)

    def test_month_range_uses_local_midnight(self) -> None:
        with patch.object(datetime_utils.settings, "HOUSEHOLD_TIMEZONE", "America/New_York"):
            start, _ = month_range(1, 2026)
        # EST is UTC-5 in January
        assert start.astimezone(UTC) == datetime(2026, 1, 1, 5, 0, tzinfo=UTC)
