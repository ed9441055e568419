"""SqlTaskCatalog — read-only adapter over the shared tasks/routines tables.

Those tables are written by the task/routine service; nothing here mutates them.
"""

from datetime import date

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from src.hh_completion.domain.models import (
    RoutinePlan,
    RoutineTask,
    TaskValue,
    is_scheduled_for,
)

_TASK_VALUE_SQL = text("""
    SELECT id, name, value_cents
    FROM tasks
    WHERE id = :task_id
""")

_ROUTINES_FOR_USER_SQL = text("""
    SELECT r.id AS routine_id, r.name AS routine_name,
           t.id AS task_id, t.name AS task_name,
           rt.position, t.schedule_days
    FROM routines r
    JOIN routine_tasks rt ON rt.routine_id = r.id
    JOIN tasks t ON t.id = rt.task_id
    WHERE r.assigned_user_id = :user_id
    ORDER BY r.created_at, r.id, rt.position
""")

_ROUTINE_NAME_SQL = text("SELECT name FROM routines WHERE id = :routine_id")


class SqlTaskCatalog:
    async def task_value(self, db: AsyncSession, task_id: str) -> TaskValue | None:
        result = await db.execute(_TASK_VALUE_SQL, {"task_id": task_id})
        row = result.fetchone()
        if row is None:
            return None
        return TaskValue(task_id=row.id, name=row.name, value_cents=int(row.value_cents or 0))

    async def routines_for(
        self, db: AsyncSession, user_id: str, on_date: date
    ) -> list[RoutinePlan]:
        result = await db.execute(_ROUTINES_FOR_USER_SQL, {"user_id": user_id})
        plans: dict[str, RoutinePlan] = {}
        for row in result.fetchall():
            plan = plans.get(row.routine_id)
            if plan is None:
                plan = plans[row.routine_id] = RoutinePlan(
                    routine_id=row.routine_id, name=row.routine_name
                )
            plan.tasks.append(
                RoutineTask(
                    task_id=row.task_id,
                    name=row.task_name,
                    position=row.position,
                    is_scheduled=is_scheduled_for(row.schedule_days, on_date),
                )
            )
        return list(plans.values())

    async def routine_name(self, db: AsyncSession, routine_id: str) -> str | None:
        result = await db.execute(_ROUTINE_NAME_SQL, {"routine_id": routine_id})
        row = result.fetchone()
        return row.name if row else None
