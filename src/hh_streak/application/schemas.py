"""Pydantic schemas for hh_streak API."""

from pydantic import BaseModel

from src.hh_common.cents import cents_to_display
from src.hh_streak.domain.models import Milestone, Streak


class NextMilestoneItem(BaseModel):
    days: int
    label: str
    bonus_cents: int
    bonus_display: str
    days_remaining: int

    @classmethod
    def build(cls, milestone: Milestone, current_count: int) -> "NextMilestoneItem":
        return cls(
            days=milestone.days,
            label=milestone.label,
            bonus_cents=milestone.bonus_cents,
            bonus_display=cents_to_display(milestone.bonus_cents),
            days_remaining=milestone.days - current_count,
        )


class StreakResponse(BaseModel):
    user_id: str
    routine_id: str
    routine_name: str | None
    current_count: int
    best_count: int
    last_completion_date: str | None  # ISO date
    next_milestone: NextMilestoneItem | None

    @classmethod
    def from_domain(cls, streak: Streak, next_milestone: Milestone | None) -> "StreakResponse":
        return cls(
            user_id=streak.user_id,
            routine_id=streak.routine_id,
            routine_name=streak.routine_name,
            current_count=streak.current_count,
            best_count=streak.best_count,
            last_completion_date=(
                streak.last_completion_date.isoformat() if streak.last_completion_date else None
            ),
            next_milestone=(
                NextMilestoneItem.build(next_milestone, streak.current_count)
                if next_milestone
                else None
            ),
        )


class StreakListResponse(BaseModel):
    user_id: str
    total_streak: int
    streaks: list[StreakResponse]
