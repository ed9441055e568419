"""RecalculationJob — nightly authoritative streak recompute and milestone awards.

For every tracked (user, routine) pair, in that pair's own DB transaction:
  1. recompute current_count from the distinct completion dates
  2. flag a break when the count went down
  3. pay each milestone threshold crossed since the previous run (bonus credit)
  4. persist the counter, keeping best_count >= current_count

One pair failing is rolled back, logged and recorded in the summary; the
remaining pairs still run. Runs never overlap: a trigger that arrives while a
run is active returns a skipped summary.
"""

import asyncio
import logging
import time
from dataclasses import asdict, dataclass, field
from datetime import date

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from src.hh_common.cents import cents_to_display
from src.hh_common.datetime_utils import household_today
from src.hh_common.enums import NotificationKind, ReferenceType, TransactionKind
from src.hh_common.errors import StoreUnavailableError
from src.hh_completion.domain.repository import TaskCatalogProtocol
from src.hh_completion.infrastructure.catalog import SqlTaskCatalog
from src.hh_ledger.domain.ledger import Ledger
from src.hh_ledger.infrastructure.persistence import LedgerRepository
from src.hh_notify.domain.sink import NotificationSinkProtocol, emit_safely
from src.hh_streak.domain.calculator import count_current_streak
from src.hh_streak.domain.milestones import MilestoneTable
from src.hh_streak.domain.models import Milestone
from src.hh_streak.domain.repository import StreakRepositoryProtocol
from src.hh_streak.infrastructure.persistence import StreakRepository

logger = logging.getLogger(__name__)


@dataclass
class PairResult:
    user_id: str
    routine_id: str
    previous_count: int
    current_count: int
    best_count: int
    last_completion_date: date | None
    streak_broken: bool = False
    milestones: list[Milestone] = field(default_factory=list)


@dataclass
class RunSummary:
    processed: int = 0
    streaks_broken: int = 0
    milestones_awarded: int = 0
    errors: list[dict[str, str]] = field(default_factory=list)
    details: list[PairResult] = field(default_factory=list)
    duration_ms: int = 0
    skipped: bool = False

    def to_dict(self) -> dict:
        data = asdict(self)
        for item in data["details"]:
            last = item["last_completion_date"]
            item["last_completion_date"] = last.isoformat() if last else None
        return data


class RecalculationJob:
    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        streak_repo: StreakRepositoryProtocol | None = None,
        ledger: Ledger | None = None,
        catalog: TaskCatalogProtocol | None = None,
        notifier: NotificationSinkProtocol | None = None,
        milestones: MilestoneTable | None = None,
    ) -> None:
        self._session_factory = session_factory
        self._repo: StreakRepositoryProtocol = streak_repo or StreakRepository()
        self._ledger = ledger or Ledger(LedgerRepository())
        self._catalog: TaskCatalogProtocol = catalog or SqlTaskCatalog()
        self._notifier = notifier
        self._milestones = milestones or MilestoneTable.from_settings()
        self._lock = asyncio.Lock()

    @property
    def is_running(self) -> bool:
        return self._lock.locked()

    async def run(self, today: date | None = None) -> RunSummary:
        if self._lock.locked():
            logger.warning("Streak recalculation already running; trigger skipped")
            return RunSummary(skipped=True)
        async with self._lock:
            return await self._run(today or household_today())

    async def _run(self, today: date) -> RunSummary:
        started = time.perf_counter()
        summary = RunSummary()

        async with self._session_factory() as db:
            try:
                pairs = await self._repo.list_tracked_pairs(db)
            except Exception as e:
                logger.exception("Streak recalculation could not list pairs")
                raise StoreUnavailableError(str(e)) from e
            logger.info("Recalculating %d streaks for %s", len(pairs), today)

            for user_id, routine_id in pairs:
                try:
                    result, routine_name = await self._process_pair(
                        db, user_id, routine_id, today
                    )
                    await db.commit()
                except Exception as e:
                    await db.rollback()
                    logger.error(
                        "Streak recalculation failed: user=%s routine=%s",
                        user_id, routine_id, exc_info=True,
                    )
                    summary.errors.append(
                        {"user_id": user_id, "routine_id": routine_id, "error": str(e)}
                    )
                    continue

                summary.processed += 1
                summary.details.append(result)
                if result.streak_broken:
                    summary.streaks_broken += 1
                summary.milestones_awarded += len(result.milestones)
                await self._notify(result, routine_name)

        summary.duration_ms = int((time.perf_counter() - started) * 1000)
        logger.info(
            "Streak recalculation done in %dms: processed=%d broken=%d milestones=%d errors=%d",
            summary.duration_ms,
            summary.processed,
            summary.streaks_broken,
            summary.milestones_awarded,
            len(summary.errors),
        )
        return summary

    async def _process_pair(
        self, db: AsyncSession, user_id: str, routine_id: str, today: date
    ) -> tuple[PairResult, str]:
        prev = await self._repo.get_or_create(db, user_id, routine_id, for_update=True)
        dates = await self._repo.completion_dates(db, user_id, routine_id)
        new_count = count_current_streak(dates, today)
        routine_name = await self._catalog.routine_name(db, routine_id) or routine_id

        result = PairResult(
            user_id=user_id,
            routine_id=routine_id,
            previous_count=prev.current_count,
            current_count=new_count,
            best_count=max(new_count, prev.best_count),
            last_completion_date=max(dates) if dates else None,
            streak_broken=new_count < prev.current_count,
        )

        # Measured against the last recalculated count so live-path increments
        # cannot hide a crossing, and a re-run on unchanged data pays nothing.
        for milestone in self._milestones.crossed(prev.verified_count, new_count):
            await self._ledger.credit(
                db,
                user_id,
                milestone.bonus_cents,
                TransactionKind.BONUS.value,
                f"Streak milestone: {milestone.label} ({milestone.days} days) - {routine_name}",
                reference_type=ReferenceType.MILESTONE.value,
                reference_id=f"{routine_id}:{milestone.days}",
            )
            result.milestones.append(milestone)
            logger.info(
                "Milestone awarded: user=%s routine=%s %s (%s)",
                user_id, routine_id, milestone.label, cents_to_display(milestone.bonus_cents),
            )

        prev.current_count = new_count
        prev.best_count = result.best_count
        prev.last_completion_date = result.last_completion_date
        prev.verified_count = new_count
        await self._repo.save(db, prev)
        return result, routine_name

    async def _notify(self, result: PairResult, routine_name: str) -> None:
        if result.streak_broken:
            await emit_safely(
                self._notifier,
                result.user_id,
                NotificationKind.STREAK_BROKEN.value,
                f"Your {routine_name} streak of {result.previous_count} days has ended",
            )
        for milestone in result.milestones:
            await emit_safely(
                self._notifier,
                result.user_id,
                NotificationKind.STREAK_MILESTONE.value,
                f"{milestone.label} streak on {routine_name}! "
                f"Bonus {cents_to_display(milestone.bonus_cents)}",
            )
