"""Domain models for hh_streak: pure dataclasses, no SQLAlchemy dependency."""

from dataclasses import dataclass
from datetime import date, datetime


@dataclass
class Streak:
    user_id: str
    routine_id: str
    current_count: int = 0
    best_count: int = 0
    last_completion_date: date | None = None
    # current_count as of the last recalculation run; the live path never writes it
    verified_count: int = 0
    routine_name: str | None = None
    updated_at: datetime | None = None


@dataclass(frozen=True)
class Milestone:
    days: int
    bonus_cents: int
    label: str
