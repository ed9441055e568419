"""Tests for the pure streak arithmetic."""

from datetime import date, timedelta

from src.hh_streak.domain.calculator import advance_streak, count_current_streak

D = date(2026, 3, 1)


def _days(*offsets: int) -> list[date]:
    return [D + timedelta(days=o) for o in offsets]


class TestAdvanceStreak:
    def test_first_completion(self) -> None:
        assert advance_streak(0, None, D) == 1

    def test_consecutive_day_increments(self) -> None:
        assert advance_streak(4, D, D + timedelta(days=1)) == 5

    def test_same_day_keeps(self) -> None:
        assert advance_streak(4, D, D) == 4

    def test_gap_restarts(self) -> None:
        assert advance_streak(4, D, D + timedelta(days=2)) == 1

    def test_three_consecutive_days(self) -> None:
        count, last = 0, None
        for day in _days(0, 1, 2):
            count, last = advance_streak(count, last, day), day
        assert count == 3

    def test_gap_then_later_day(self) -> None:
        count, last = 0, None
        for day in _days(0, 1, 2, 5):
            count, last = advance_streak(count, last, day), day
        assert count == 1


class TestCountCurrentStreak:
    def test_no_history(self) -> None:
        assert count_current_streak([], D) == 0

    def test_ending_today(self) -> None:
        assert count_current_streak(_days(0, 1, 2), D + timedelta(days=2)) == 3

    def test_ending_yesterday_still_counts(self) -> None:
        assert count_current_streak(_days(0, 1, 2), D + timedelta(days=3)) == 3

    def test_two_day_gap_zeroes(self) -> None:
        assert count_current_streak(_days(0, 1, 2), D + timedelta(days=4)) == 0

    def test_stops_at_gap(self) -> None:
        assert count_current_streak(_days(0, 1, 3, 4), D + timedelta(days=4)) == 2

    def test_unordered_and_duplicate_dates(self) -> None:
        dates = _days(2, 0, 1, 2, 1)
        assert count_current_streak(dates, D + timedelta(days=2)) == 3
