# src/hh_admin/application/service.py
"""Admin application service."""
import logging
from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession

from src.hh_ledger.application.service import LedgerApplicationService
from src.hh_streak.jobs.recalculation import RecalculationJob

logger = logging.getLogger(__name__)


class AdminService:
    def __init__(
        self,
        job: RecalculationJob,
        ledger_service: LedgerApplicationService | None = None,
    ) -> None:
        self._job = job
        self._ledger_service = ledger_service or LedgerApplicationService()

    async def run_streak_recalculation(self, requested_by: str) -> dict[str, Any]:
        logger.info("Manual streak recalculation requested by %s", requested_by)
        summary = await self._job.run()
        return summary.to_dict()

    async def verify_ledger(self, db: AsyncSession) -> dict[str, Any]:
        violations = await self._ledger_service.verify_balance_invariant(db)
        if violations:
            logger.error("Ledger invariant violated for %d account(s)", len(violations))
        return {
            "ok": not violations,
            "violations": [
                {
                    "user_id": v.user_id,
                    "current_balance_cents": v.current_balance,
                    "ledger_sum_cents": v.ledger_sum,
                    "difference_cents": v.current_balance - v.ledger_sum,
                }
                for v in violations
            ],
        }
