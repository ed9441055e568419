"""CompletionRepository — concrete implementation of CompletionRepositoryProtocol.

One completion per (task_id, user_id, completion_date) is enforced by the
uq_completions_task_user_date index: the insert uses ON CONFLICT DO NOTHING,
so the existence check and the insert are a single atomic statement.

Transaction ownership: the CALLER commits or rolls back.
"""

from datetime import date, datetime

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from src.hh_completion.domain.models import Completion

_INSERT_SQL = text("""
    INSERT INTO completions (id, task_id, user_id, completed_at, completion_date)
    VALUES (:id, :task_id, :user_id, :completed_at, :completion_date)
    ON CONFLICT (task_id, user_id, completion_date) DO NOTHING
    RETURNING id, task_id, user_id, completed_at, completion_date
""")

_GET_SQL = text("""
    SELECT id, task_id, user_id, completed_at, completion_date
    FROM completions
    WHERE id = :id
""")

_GET_FOR_UPDATE_SQL = text("""
    SELECT id, task_id, user_id, completed_at, completion_date
    FROM completions
    WHERE id = :id
    FOR UPDATE
""")

_DELETE_SQL = text("DELETE FROM completions WHERE id = :id")

_LIST_FOR_DAY_SQL = text("""
    SELECT id, task_id, user_id, completed_at, completion_date
    FROM completions
    WHERE user_id = :user_id AND completion_date = :day
    ORDER BY completed_at DESC
""")

_TASK_IDS_FOR_DAY_SQL = text("""
    SELECT DISTINCT task_id
    FROM completions
    WHERE user_id = :user_id AND completion_date = :day
""")


def _row_to_completion(row: object) -> Completion:
    return Completion(
        id=str(row.id),  # type: ignore[attr-defined]
        task_id=row.task_id,  # type: ignore[attr-defined]
        user_id=row.user_id,  # type: ignore[attr-defined]
        completed_at=row.completed_at,  # type: ignore[attr-defined]
        completion_date=row.completion_date,  # type: ignore[attr-defined]
    )


class CompletionRepository:
    async def insert_if_absent(
        self,
        db: AsyncSession,
        completion_id: str,
        task_id: str,
        user_id: str,
        completed_at: datetime,
        completion_date: date,
    ) -> Completion | None:
        result = await db.execute(
            _INSERT_SQL,
            {
                "id": completion_id,
                "task_id": task_id,
                "user_id": user_id,
                "completed_at": completed_at,
                "completion_date": completion_date,
            },
        )
        row = result.fetchone()
        return _row_to_completion(row) if row else None

    async def get_by_id(self, db: AsyncSession, completion_id: str) -> Completion | None:
        result = await db.execute(_GET_SQL, {"id": completion_id})
        row = result.fetchone()
        return _row_to_completion(row) if row else None

    async def get_for_update(
        self, db: AsyncSession, completion_id: str
    ) -> Completion | None:
        result = await db.execute(_GET_FOR_UPDATE_SQL, {"id": completion_id})
        row = result.fetchone()
        return _row_to_completion(row) if row else None

    async def delete(self, db: AsyncSession, completion_id: str) -> None:
        await db.execute(_DELETE_SQL, {"id": completion_id})

    async def list_for_user_on(
        self, db: AsyncSession, user_id: str, day: date
    ) -> list[Completion]:
        result = await db.execute(_LIST_FOR_DAY_SQL, {"user_id": user_id, "day": day})
        return [_row_to_completion(row) for row in result.fetchall()]

    async def completed_task_ids(
        self, db: AsyncSession, user_id: str, day: date
    ) -> set[str]:
        result = await db.execute(_TASK_IDS_FOR_DAY_SQL, {"user_id": user_id, "day": day})
        return {row.task_id for row in result.fetchall()}
