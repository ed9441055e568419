"""LedgerApplicationService — thin composition layer.

Combines Ledger/repository calls with schema transformations.
Mutating operations commit on success and roll back on any error.
get_balance also commits because it may lazily create the account row.
History and summaries are read-only and run without an explicit transaction.
"""

from datetime import date

from sqlalchemy.ext.asyncio import AsyncSession

from src.hh_common.datetime_utils import day_range, month_range
from src.hh_common.enums import ReferenceType, TransactionKind
from src.hh_common.errors import ValidationError
from src.hh_ledger.application.schemas import (
    BalanceResponse,
    MonthlyTotalResponse,
    SummaryResponse,
    TransactionItem,
    TransactionPageResponse,
)
from src.hh_ledger.domain.ledger import Ledger
from src.hh_ledger.domain.models import InvariantViolation, TransactionFilter
from src.hh_ledger.domain.repository import LedgerRepositoryProtocol
from src.hh_ledger.infrastructure.persistence import LedgerRepository

DEFAULT_PAGE_SIZE = 50
MAX_PAGE_SIZE = 100


class LedgerApplicationService:
    def __init__(self, repo: LedgerRepositoryProtocol | None = None) -> None:
        self._repo: LedgerRepositoryProtocol = repo or LedgerRepository()
        self._ledger = Ledger(self._repo)

    @property
    def ledger(self) -> Ledger:
        return self._ledger

    async def get_balance(self, db: AsyncSession, user_id: str) -> BalanceResponse:
        try:
            account = await self._ledger.get_balance(db, user_id)
            await db.commit()
        except Exception:
            await db.rollback()
            raise
        return BalanceResponse.from_cents(user_id, account.current_balance)

    async def record_payout(
        self, db: AsyncSession, user_id: str, amount_cents: int, description: str = "Payout"
    ) -> TransactionItem:
        try:
            tx = await self._ledger.debit(
                db,
                user_id,
                amount_cents,
                TransactionKind.PAYOUT.value,
                description,
                reference_type=ReferenceType.PAYOUT.value,
            )
            await db.commit()
        except Exception:
            await db.rollback()
            raise
        return TransactionItem.from_domain(tx)

    async def list_transactions(
        self,
        db: AsyncSession,
        user_id: str,
        filters: TransactionFilter,
        limit: int = DEFAULT_PAGE_SIZE,
        offset: int = 0,
    ) -> TransactionPageResponse:
        if filters.kind is not None:
            try:
                TransactionKind(filters.kind)
            except ValueError:
                raise ValidationError(f"unknown transaction kind '{filters.kind}'") from None
        if offset < 0:
            raise ValidationError("offset must be >= 0")
        if (
            filters.start_date is not None
            and filters.end_date is not None
            and filters.start_date > filters.end_date
        ):
            raise ValidationError("start_date must not be after end_date")
        limit = max(1, min(limit, MAX_PAGE_SIZE))

        start_at = end_at = None
        if filters.start_date is not None:
            start_at, _ = day_range(filters.start_date, filters.start_date)
        if filters.end_date is not None:
            _, end_at = day_range(filters.end_date, filters.end_date)

        total = await self._repo.count_transactions(db, user_id, filters.kind, start_at, end_at)
        entries = await self._repo.list_transactions(
            db, user_id, filters.kind, start_at, end_at, limit, offset
        )
        return TransactionPageResponse(
            items=[TransactionItem.from_domain(e) for e in entries],
            total=total,
            limit=limit,
            offset=offset,
            has_more=offset + len(entries) < total,
        )

    async def get_monthly_total(
        self, db: AsyncSession, user_id: str, month: int, year: int
    ) -> MonthlyTotalResponse:
        if not 1 <= month <= 12:
            raise ValidationError(f"month must be 1-12, got {month}")
        if not 1 <= year <= 9998:
            raise ValidationError(f"year out of range: {year}")
        start_at, end_at = month_range(month, year)
        totals = await self._repo.totals_by_kind(db, user_id, start_at, end_at)
        return MonthlyTotalResponse.from_totals(user_id, month, year, totals)

    async def get_summary(
        self, db: AsyncSession, user_id: str, start_date: date, end_date: date
    ) -> SummaryResponse:
        if start_date > end_date:
            raise ValidationError("start_date must not be after end_date")
        start_at, end_at = day_range(start_date, end_date)
        totals = await self._repo.totals_by_kind(db, user_id, start_at, end_at)
        return SummaryResponse.from_totals(
            user_id, start_date.isoformat(), end_date.isoformat(), totals
        )

    async def verify_balance_invariant(self, db: AsyncSession) -> list[InvariantViolation]:
        return await self._repo.find_invariant_violations(db)
