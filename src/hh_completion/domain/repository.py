"""Repository and read-model Protocols for hh_completion.

CompletionRepositoryProtocol is implemented in infrastructure/persistence.py.
TaskCatalogProtocol is the read-only view of tasks and routines, which are
owned by another service; infrastructure/catalog.py reads the shared tables.
"""

from datetime import date, datetime
from typing import Protocol

from sqlalchemy.ext.asyncio import AsyncSession

from src.hh_completion.domain.models import Completion, RoutinePlan, TaskValue


class CompletionRepositoryProtocol(Protocol):
    async def insert_if_absent(
        self,
        db: AsyncSession,
        completion_id: str,
        task_id: str,
        user_id: str,
        completed_at: datetime,
        completion_date: date,
    ) -> Completion | None:
        """Insert unless (task_id, user_id, completion_date) exists; None on conflict."""
        ...

    async def get_by_id(self, db: AsyncSession, completion_id: str) -> Completion | None: ...

    async def get_for_update(
        self, db: AsyncSession, completion_id: str
    ) -> Completion | None: ...

    async def delete(self, db: AsyncSession, completion_id: str) -> None: ...

    async def list_for_user_on(
        self, db: AsyncSession, user_id: str, day: date
    ) -> list[Completion]: ...

    async def completed_task_ids(
        self, db: AsyncSession, user_id: str, day: date
    ) -> set[str]: ...


class TaskCatalogProtocol(Protocol):
    async def task_value(self, db: AsyncSession, task_id: str) -> TaskValue | None: ...

    async def routines_for(
        self, db: AsyncSession, user_id: str, on_date: date
    ) -> list[RoutinePlan]: ...

    async def routine_name(self, db: AsyncSession, routine_id: str) -> str | None: ...
