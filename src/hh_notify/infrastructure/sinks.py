"""Concrete notification sinks and the notifications read repository."""

import logging
import uuid

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from src.hh_notify.domain.models import Notification
from src.hh_notify.infrastructure.db_models import NotificationORM

logger = logging.getLogger(__name__)

_MAX_MESSAGE_LEN = 500


class LoggingNotificationSink:
    """Writes events to the application log only."""

    async def emit(self, user_id: str, kind: str, message: str) -> None:
        logger.info("notify user=%s kind=%s: %s", user_id, kind, message)


class DbNotificationSink:
    """Persists events to the notifications table.

    Uses its own session so a failed insert can never touch the
    transaction of the operation that triggered it.
    """

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session_factory = session_factory

    async def emit(self, user_id: str, kind: str, message: str) -> None:
        async with self._session_factory() as session:
            session.add(
                NotificationORM(
                    id=uuid.uuid4(),
                    user_id=user_id,
                    kind=kind,
                    message=message[:_MAX_MESSAGE_LEN],
                    is_read=False,
                )
            )
            await session.commit()


def _orm_to_notification(row: NotificationORM) -> Notification:
    return Notification(
        id=str(row.id),
        user_id=row.user_id,
        kind=row.kind,
        message=row.message,
        is_read=row.is_read,
        created_at=row.created_at,
    )


class NotificationRepository:
    async def list_for_user(
        self,
        db: AsyncSession,
        user_id: str,
        unread_only: bool,
        limit: int,
        offset: int,
    ) -> list[Notification]:
        stmt = select(NotificationORM).where(NotificationORM.user_id == user_id)
        if unread_only:
            stmt = stmt.where(NotificationORM.is_read.is_(False))
        stmt = (
            stmt.order_by(NotificationORM.created_at.desc())
            .limit(limit)
            .offset(offset)
        )
        result = await db.execute(stmt)
        return [_orm_to_notification(row) for row in result.scalars().all()]
