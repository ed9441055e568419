"""Repository Protocol for hh_streak."""

from datetime import date
from typing import Protocol

from sqlalchemy.ext.asyncio import AsyncSession

from src.hh_streak.domain.models import Streak


class StreakRepositoryProtocol(Protocol):
    async def get_or_create(
        self, db: AsyncSession, user_id: str, routine_id: str, for_update: bool = False
    ) -> Streak:
        """Zero row is inserted on first access. for_update locks it until commit."""
        ...

    async def save(self, db: AsyncSession, streak: Streak) -> None: ...

    async def list_for_user(self, db: AsyncSession, user_id: str) -> list[Streak]: ...

    async def total_current(self, db: AsyncSession, user_id: str) -> int: ...

    async def list_tracked_pairs(self, db: AsyncSession) -> list[tuple[str, str]]: ...

    async def completion_dates(
        self, db: AsyncSession, user_id: str, routine_id: str
    ) -> list[date]:
        """Distinct completion dates of the routine's tasks, newest first."""
        ...
