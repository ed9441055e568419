"""CompletionApplicationService — records and undoes task completions.

complete() and undo() each run as one DB transaction: the completion row
and its ledger entry commit or roll back together. Side effects that must
never fail the operation (notification, live streak advice) run only after
that commit, and their failures are logged, not raised.
"""

import logging
import uuid
from datetime import date, timedelta

from sqlalchemy.ext.asyncio import AsyncSession

from config.settings import settings
from src.hh_common.cents import cents_to_display
from src.hh_common.datetime_utils import household_today, utc_now
from src.hh_common.enums import NotificationKind, ReferenceType, TransactionKind
from src.hh_common.errors import (
    AlreadyCompletedError,
    CompletionNotFoundError,
    ForbiddenError,
    TaskNotFoundError,
    UndoWindowExpiredError,
)
from src.hh_completion.application.schemas import (
    CanUndoResponse,
    CompleteResponse,
    CompletionItem,
    DayCompletionsResponse,
    UndoResponse,
)
from src.hh_completion.domain.models import can_undo
from src.hh_completion.domain.repository import (
    CompletionRepositoryProtocol,
    TaskCatalogProtocol,
)
from src.hh_completion.infrastructure.catalog import SqlTaskCatalog
from src.hh_completion.infrastructure.persistence import CompletionRepository
from src.hh_ledger.application.schemas import BalanceResponse
from src.hh_ledger.domain.ledger import Ledger
from src.hh_ledger.infrastructure.persistence import LedgerRepository
from src.hh_notify.domain.sink import NotificationSinkProtocol, emit_safely
from src.hh_notify.infrastructure.sinks import LoggingNotificationSink
from src.hh_streak.domain.engine import StreakEngine
from src.hh_streak.infrastructure.persistence import StreakRepository

logger = logging.getLogger(__name__)


class CompletionApplicationService:
    def __init__(
        self,
        repo: CompletionRepositoryProtocol | None = None,
        catalog: TaskCatalogProtocol | None = None,
        ledger: Ledger | None = None,
        streaks: StreakEngine | None = None,
        notifier: NotificationSinkProtocol | None = None,
        undo_window_minutes: int | None = None,
    ) -> None:
        self._repo: CompletionRepositoryProtocol = repo or CompletionRepository()
        self._catalog: TaskCatalogProtocol = catalog or SqlTaskCatalog()
        self._ledger = ledger or Ledger(LedgerRepository())
        self._streaks = streaks or StreakEngine(StreakRepository())
        self._notifier: NotificationSinkProtocol = notifier or LoggingNotificationSink()
        minutes = (
            settings.UNDO_WINDOW_MINUTES if undo_window_minutes is None else undo_window_minutes
        )
        self._undo_minutes = minutes
        self._undo_window = timedelta(minutes=minutes)

    # ------------------------------------------------------------------
    # Complete
    # ------------------------------------------------------------------

    async def complete(
        self,
        db: AsyncSession,
        task_id: str,
        user_id: str,
        on_date: date | None = None,
    ) -> CompleteResponse:
        now = utc_now()
        day = on_date or household_today(now)

        try:
            task = await self._catalog.task_value(db, task_id)
            if task is None:
                raise TaskNotFoundError(task_id)

            completion = await self._repo.insert_if_absent(
                db, str(uuid.uuid4()), task_id, user_id, now, day
            )
            if completion is None:
                raise AlreadyCompletedError(task_id, day.isoformat())

            if task.value_cents > 0:
                tx = await self._ledger.credit(
                    db,
                    user_id,
                    task.value_cents,
                    TransactionKind.EARNED.value,
                    f"Completed: {task.name}",
                    reference_type=ReferenceType.COMPLETION.value,
                    reference_id=completion.id,
                )
                balance = tx.balance_after
            else:
                balance = (await self._ledger.get_balance(db, user_id)).current_balance
            await db.commit()
        except Exception:
            await db.rollback()
            raise

        logger.info(
            "Completion recorded: id=%s task=%s user=%s date=%s earned=%d",
            completion.id, task_id, user_id, day, task.value_cents,
        )

        message = f"Completed {task.name}"
        if task.value_cents > 0:
            message += f" (+{cents_to_display(task.value_cents)})"
        await emit_safely(self._notifier, user_id, NotificationKind.TASK_COMPLETE.value, message)
        await self._advise_streaks(db, task_id, user_id, day)

        return CompleteResponse(
            completion=CompletionItem.from_domain(completion, can_undo=True),
            balance=BalanceResponse.from_cents(user_id, balance),
            earned_cents=task.value_cents,
            can_undo=True,
        )

    async def _advise_streaks(
        self, db: AsyncSession, task_id: str, user_id: str, day: date
    ) -> None:
        """Advance live streaks of routines this completion finished for `day`.

        Best effort: the nightly recalculation repairs anything missed here.
        """
        try:
            plans = await self._catalog.routines_for(db, user_id, day)
            done = await self._repo.completed_task_ids(db, user_id, day)
            for plan in plans:
                scheduled = plan.scheduled_task_ids()
                if task_id not in scheduled or not scheduled <= done:
                    continue
                await self._streaks.advise_routine_completed(db, user_id, plan.routine_id, day)
            await db.commit()
        except Exception:
            await db.rollback()
            logger.warning(
                "Live streak update failed: user=%s task=%s date=%s",
                user_id, task_id, day, exc_info=True,
            )

    # ------------------------------------------------------------------
    # Undo
    # ------------------------------------------------------------------

    async def undo(
        self, db: AsyncSession, completion_id: str, requesting_user_id: str
    ) -> UndoResponse:
        try:
            completion = await self._repo.get_for_update(db, completion_id)
            if completion is None:
                raise CompletionNotFoundError(completion_id)
            if completion.user_id != requesting_user_id:
                raise ForbiddenError("Only the user who completed a task can undo it")
            if not can_undo(completion.completed_at, utc_now(), self._undo_window):
                raise UndoWindowExpiredError(self._undo_minutes)

            earned = await self._ledger.credited_for(
                db, completion.user_id, ReferenceType.COMPLETION.value, completion.id
            )
            if earned > 0:
                task = await self._catalog.task_value(db, completion.task_id)
                name = task.name if task else completion.task_id
                tx = await self._ledger.reverse(
                    db,
                    completion.user_id,
                    earned,
                    f"Undone: {name}",
                    reference_type=ReferenceType.UNDO.value,
                    reference_id=completion.id,
                )
                balance = tx.balance_after
            else:
                balance = (
                    await self._ledger.get_balance(db, completion.user_id)
                ).current_balance

            await self._repo.delete(db, completion.id)
            await db.commit()
        except Exception:
            await db.rollback()
            raise

        logger.info(
            "Completion undone: id=%s task=%s user=%s reversed=%d",
            completion.id, completion.task_id, completion.user_id, earned,
        )
        return UndoResponse(
            success=True,
            reversed_cents=max(earned, 0),
            balance=BalanceResponse.from_cents(completion.user_id, balance),
        )

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    async def can_undo(self, db: AsyncSession, completion_id: str) -> CanUndoResponse:
        completion = await self._repo.get_by_id(db, completion_id)
        allowed = completion is not None and can_undo(
            completion.completed_at, utc_now(), self._undo_window
        )
        return CanUndoResponse(completion_id=completion_id, can_undo=allowed)

    async def list_for_day(
        self, db: AsyncSession, user_id: str, on_date: date | None = None
    ) -> DayCompletionsResponse:
        now = utc_now()
        day = on_date or household_today(now)
        completions = await self._repo.list_for_user_on(db, user_id, day)
        return DayCompletionsResponse(
            user_id=user_id,
            date=day.isoformat(),
            items=[
                CompletionItem.from_domain(c, can_undo(c.completed_at, now, self._undo_window))
                for c in completions
            ],
        )
