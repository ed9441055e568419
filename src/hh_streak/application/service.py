"""StreakApplicationService — read views over the streak counters.

get_streak commits because it may lazily create the counter row.
"""

from sqlalchemy.ext.asyncio import AsyncSession

from src.hh_streak.application.schemas import StreakListResponse, StreakResponse
from src.hh_streak.domain.engine import StreakEngine
from src.hh_streak.infrastructure.persistence import StreakRepository


class StreakApplicationService:
    def __init__(self, engine: StreakEngine | None = None) -> None:
        self._engine = engine or StreakEngine(StreakRepository())

    @property
    def engine(self) -> StreakEngine:
        return self._engine

    async def get_streak(
        self, db: AsyncSession, user_id: str, routine_id: str
    ) -> StreakResponse:
        try:
            streak = await self._engine.get_streak(db, user_id, routine_id)
            await db.commit()
        except Exception:
            await db.rollback()
            raise
        return StreakResponse.from_domain(
            streak, self._engine.next_milestone(streak.current_count)
        )

    async def list_streaks(self, db: AsyncSession, user_id: str) -> StreakListResponse:
        streaks = await self._engine.list_streaks(db, user_id)
        total = await self._engine.total_streak_across_routines(db, user_id)
        return StreakListResponse(
            user_id=user_id,
            total_streak=total,
            streaks=[
                StreakResponse.from_domain(s, self._engine.next_milestone(s.current_count))
                for s in streaks
            ],
        )
