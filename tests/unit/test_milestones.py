"""Tests for the milestone table."""

import pytest

from config.settings import MilestoneSetting
from src.hh_streak.domain.milestones import MilestoneTable
from src.hh_streak.domain.models import Milestone


@pytest.fixture
def table() -> MilestoneTable:
    return MilestoneTable.from_settings()


class TestDefaults:
    def test_thresholds(self, table: MilestoneTable) -> None:
        assert [m.days for m in table.crossed(0, 365)] == [7, 14, 30, 60, 90]

    def test_week_bonus(self, table: MilestoneTable) -> None:
        [week] = table.crossed(6, 7)
        assert week == Milestone(days=7, bonus_cents=100, label="1 Week")

    def test_two_weeks_bonus(self, table: MilestoneTable) -> None:
        assert table.next_after(7).bonus_cents == 250


class TestLookups:
    def test_next_after(self, table: MilestoneTable) -> None:
        assert table.next_after(0).days == 7
        assert table.next_after(7).days == 14
        assert table.next_after(90) is None

    def test_crossed(self, table: MilestoneTable) -> None:
        assert [m.days for m in table.crossed(6, 7)] == [7]
        assert [m.days for m in table.crossed(7, 7)] == []
        assert [m.days for m in table.crossed(6, 15)] == [7, 14]
        assert table.crossed(8, 3) == []

    def test_jump_past_threshold_counts(self, table: MilestoneTable) -> None:
        assert [m.days for m in table.crossed(5, 8)] == [7]


class TestConfiguration:
    def test_custom_settings_sorted(self) -> None:
        table = MilestoneTable.from_settings(
            [
                MilestoneSetting(days=10, bonus_cents=300, label="Ten"),
                MilestoneSetting(days=3, bonus_cents=50, label="Three"),
            ]
        )
        assert [m.days for m in table.crossed(0, 10)] == [3, 10]

    def test_duplicate_threshold_rejected(self) -> None:
        with pytest.raises(ValueError):
            MilestoneTable([Milestone(7, 100, "a"), Milestone(7, 200, "b")])

    def test_non_positive_bonus_rejected(self) -> None:
        with pytest.raises(ValueError):
            MilestoneTable([Milestone(7, 0, "a")])
