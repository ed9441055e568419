"""Repository Protocol: dependency inversion for testability.

Unit tests inject a fake that conforms to this Protocol.
Infrastructure layer provides the real implementation.
"""

from datetime import datetime
from typing import Protocol

from sqlalchemy.ext.asyncio import AsyncSession

from src.hh_ledger.domain.models import (
    BalanceAccount,
    InvariantViolation,
    KindTotal,
    Transaction,
)


class LedgerRepositoryProtocol(Protocol):
    async def get_or_create_account(
        self, db: AsyncSession, user_id: str
    ) -> BalanceAccount: ...

    async def apply_signed(
        self,
        db: AsyncSession,
        user_id: str,
        amount: int,
        kind: str,
        description: str,
        reference_type: str | None,
        reference_id: str | None,
    ) -> Transaction: ...

    async def apply_debit(
        self,
        db: AsyncSession,
        user_id: str,
        amount: int,
        kind: str,
        description: str,
        reference_type: str | None,
        reference_id: str | None,
    ) -> Transaction: ...

    async def list_by_reference(
        self,
        db: AsyncSession,
        user_id: str,
        reference_type: str,
        reference_id: str,
    ) -> list[Transaction]: ...

    async def list_transactions(
        self,
        db: AsyncSession,
        user_id: str,
        kind: str | None,
        start_at: datetime | None,
        end_at: datetime | None,
        limit: int,
        offset: int,
    ) -> list[Transaction]: ...

    async def count_transactions(
        self,
        db: AsyncSession,
        user_id: str,
        kind: str | None,
        start_at: datetime | None,
        end_at: datetime | None,
    ) -> int: ...

    async def totals_by_kind(
        self,
        db: AsyncSession,
        user_id: str,
        start_at: datetime,
        end_at: datetime,
    ) -> dict[str, KindTotal]: ...

    async def find_invariant_violations(
        self, db: AsyncSession
    ) -> list[InvariantViolation]: ...
