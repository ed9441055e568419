"""StreakEngine — per (user, routine) consecutive-day counters.

Live path only: advise_routine_completed() moves the counter forward when a
routine is fully done for a day. It never awards milestones; the nightly
RecalculationJob recomputes every counter from history and is the only
component that pays milestone bonuses.

Nothing here commits; the calling service owns the transaction.
"""

import logging
from datetime import date

from sqlalchemy.ext.asyncio import AsyncSession

from src.hh_streak.domain.calculator import advance_streak
from src.hh_streak.domain.milestones import MilestoneTable
from src.hh_streak.domain.models import Milestone, Streak
from src.hh_streak.domain.repository import StreakRepositoryProtocol

logger = logging.getLogger(__name__)


class StreakEngine:
    def __init__(
        self,
        repo: StreakRepositoryProtocol,
        milestones: MilestoneTable | None = None,
    ) -> None:
        self._repo = repo
        self._milestones = milestones or MilestoneTable.from_settings()

    @property
    def milestones(self) -> MilestoneTable:
        return self._milestones

    async def get_streak(self, db: AsyncSession, user_id: str, routine_id: str) -> Streak:
        return await self._repo.get_or_create(db, user_id, routine_id)

    async def advise_routine_completed(
        self, db: AsyncSession, user_id: str, routine_id: str, day: date
    ) -> Streak:
        prev = await self._repo.get_or_create(db, user_id, routine_id, for_update=True)
        if prev.last_completion_date is not None and day < prev.last_completion_date:
            # Late advice for an earlier day; the nightly recompute will account for it.
            logger.debug(
                "Ignoring streak advice for %s/%s on %s (last %s)",
                user_id, routine_id, day, prev.last_completion_date,
            )
            return prev

        new_count = advance_streak(prev.current_count, prev.last_completion_date, day)
        prev.current_count = new_count
        prev.best_count = max(new_count, prev.best_count)
        prev.last_completion_date = day
        await self._repo.save(db, prev)
        logger.info(
            "Streak advanced: user=%s routine=%s day=%s count=%d best=%d",
            user_id, routine_id, day, prev.current_count, prev.best_count,
        )
        return prev

    async def total_streak_across_routines(self, db: AsyncSession, user_id: str) -> int:
        return await self._repo.total_current(db, user_id)

    async def list_streaks(self, db: AsyncSession, user_id: str) -> list[Streak]:
        streaks = await self._repo.list_for_user(db, user_id)
        return sorted(streaks, key=lambda s: (-s.current_count, -s.best_count, s.routine_id))

    def next_milestone(self, current_count: int) -> Milestone | None:
        return self._milestones.next_after(current_count)
