"""StreakRepository — concrete implementation of StreakRepositoryProtocol.

Transaction ownership: the CALLER commits or rolls back.
"""

from datetime import date

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from src.hh_common.errors import InternalError
from src.hh_streak.domain.models import Streak

_ENSURE_SQL = text("""
    INSERT INTO streaks (user_id, routine_id, current_count, best_count, verified_count)
    VALUES (:user_id, :routine_id, 0, 0, 0)
    ON CONFLICT (user_id, routine_id) DO NOTHING
""")

_SELECT_COLUMNS = """
    SELECT user_id, routine_id, current_count, best_count,
           last_completion_date, verified_count, updated_at
    FROM streaks
    WHERE user_id = :user_id AND routine_id = :routine_id
"""

_GET_SQL = text(_SELECT_COLUMNS)
_GET_FOR_UPDATE_SQL = text(_SELECT_COLUMNS + " FOR UPDATE")

_SAVE_SQL = text("""
    UPDATE streaks
    SET current_count = :current_count,
        best_count = :best_count,
        last_completion_date = :last_completion_date,
        verified_count = :verified_count,
        updated_at = NOW()
    WHERE user_id = :user_id AND routine_id = :routine_id
""")

_LIST_FOR_USER_SQL = text("""
    SELECT s.user_id, s.routine_id, s.current_count, s.best_count,
           s.last_completion_date, s.verified_count, s.updated_at,
           r.name AS routine_name
    FROM streaks s
    LEFT JOIN routines r ON r.id = s.routine_id
    WHERE s.user_id = :user_id
""")

_TOTAL_CURRENT_SQL = text("""
    SELECT COALESCE(SUM(current_count), 0)
    FROM streaks
    WHERE user_id = :user_id
""")

# Existing counters plus any (user, routine) with history but no counter yet
_TRACKED_PAIRS_SQL = text("""
    SELECT user_id, routine_id FROM streaks
    UNION
    SELECT c.user_id, rt.routine_id
    FROM completions c
    JOIN routine_tasks rt ON rt.task_id = c.task_id
    ORDER BY user_id, routine_id
""")

_COMPLETION_DATES_SQL = text("""
    SELECT DISTINCT c.completion_date
    FROM completions c
    JOIN routine_tasks rt ON rt.task_id = c.task_id
    WHERE c.user_id = :user_id AND rt.routine_id = :routine_id
    ORDER BY c.completion_date DESC
""")


def _row_to_streak(row: object, routine_name: str | None = None) -> Streak:
    return Streak(
        user_id=row.user_id,  # type: ignore[attr-defined]
        routine_id=row.routine_id,  # type: ignore[attr-defined]
        current_count=row.current_count,  # type: ignore[attr-defined]
        best_count=row.best_count,  # type: ignore[attr-defined]
        last_completion_date=row.last_completion_date,  # type: ignore[attr-defined]
        verified_count=row.verified_count,  # type: ignore[attr-defined]
        routine_name=routine_name,
        updated_at=row.updated_at,  # type: ignore[attr-defined]
    )


class StreakRepository:
    async def get_or_create(
        self, db: AsyncSession, user_id: str, routine_id: str, for_update: bool = False
    ) -> Streak:
        params = {"user_id": user_id, "routine_id": routine_id}
        await db.execute(_ENSURE_SQL, params)
        result = await db.execute(_GET_FOR_UPDATE_SQL if for_update else _GET_SQL, params)
        row = result.fetchone()
        if row is None:
            raise InternalError(f"Streak row missing after upsert for {user_id}/{routine_id}")
        return _row_to_streak(row)

    async def save(self, db: AsyncSession, streak: Streak) -> None:
        await db.execute(
            _SAVE_SQL,
            {
                "user_id": streak.user_id,
                "routine_id": streak.routine_id,
                "current_count": streak.current_count,
                "best_count": streak.best_count,
                "last_completion_date": streak.last_completion_date,
                "verified_count": streak.verified_count,
            },
        )

    async def list_for_user(self, db: AsyncSession, user_id: str) -> list[Streak]:
        result = await db.execute(_LIST_FOR_USER_SQL, {"user_id": user_id})
        return [_row_to_streak(row, row.routine_name) for row in result.fetchall()]

    async def total_current(self, db: AsyncSession, user_id: str) -> int:
        result = await db.execute(_TOTAL_CURRENT_SQL, {"user_id": user_id})
        return int(result.scalar_one())

    async def list_tracked_pairs(self, db: AsyncSession) -> list[tuple[str, str]]:
        result = await db.execute(_TRACKED_PAIRS_SQL)
        return [(row.user_id, row.routine_id) for row in result.fetchall()]

    async def completion_dates(
        self, db: AsyncSession, user_id: str, routine_id: str
    ) -> list[date]:
        result = await db.execute(
            _COMPLETION_DATES_SQL, {"user_id": user_id, "routine_id": routine_id}
        )
        return [row.completion_date for row in result.fetchall()]
