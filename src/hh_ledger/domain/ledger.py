"""Ledger — balance mutations inside the caller's DB transaction.

Every mutation appends exactly one row to balance_transactions and moves
balance_accounts.current_balance by the same signed amount in the same
transaction, so current_balance == SUM(amount) holds at every commit.
Nothing here commits; the application service (or another component's
service) owns the transaction.
"""

import logging

from sqlalchemy.ext.asyncio import AsyncSession

from src.hh_common.cents import validate_positive_amount
from src.hh_common.enums import CREDIT_KINDS, DEBIT_KINDS, TransactionKind
from src.hh_common.errors import InvalidAmountError, InvalidKindError
from src.hh_ledger.domain.models import BalanceAccount, Transaction
from src.hh_ledger.domain.repository import LedgerRepositoryProtocol

logger = logging.getLogger(__name__)


def _check_amount(amount: int) -> None:
    try:
        validate_positive_amount(amount)
    except ValueError:
        raise InvalidAmountError(amount) from None


def _check_kind(kind: str, allowed: frozenset[TransactionKind], operation: str) -> str:
    try:
        parsed = TransactionKind(kind)
    except ValueError:
        raise InvalidKindError(str(kind), operation) from None
    if parsed not in allowed:
        raise InvalidKindError(parsed.value, operation)
    return parsed.value


class Ledger:
    def __init__(self, repo: LedgerRepositoryProtocol) -> None:
        self._repo = repo

    async def get_balance(self, db: AsyncSession, user_id: str) -> BalanceAccount:
        return await self._repo.get_or_create_account(db, user_id)

    async def credit(
        self,
        db: AsyncSession,
        user_id: str,
        amount: int,
        kind: str,
        description: str,
        reference_type: str | None = None,
        reference_id: str | None = None,
    ) -> Transaction:
        _check_amount(amount)
        kind_value = _check_kind(kind, CREDIT_KINDS, "credit")
        tx = await self._repo.apply_signed(
            db, user_id, amount, kind_value, description, reference_type, reference_id
        )
        logger.debug("Credit %s +%d (%s) -> %d", user_id, amount, kind_value, tx.balance_after)
        return tx

    async def debit(
        self,
        db: AsyncSession,
        user_id: str,
        amount: int,
        kind: str,
        description: str,
        reference_type: str | None = None,
        reference_id: str | None = None,
    ) -> Transaction:
        """Raises InsufficientBalanceError when the balance cannot cover `amount`."""
        _check_amount(amount)
        kind_value = _check_kind(kind, DEBIT_KINDS, "debit")
        tx = await self._repo.apply_debit(
            db, user_id, amount, kind_value, description, reference_type, reference_id
        )
        logger.debug("Debit %s -%d (%s) -> %d", user_id, amount, kind_value, tx.balance_after)
        return tx

    async def reverse(
        self,
        db: AsyncSession,
        user_id: str,
        original_amount: int,
        description: str,
        reference_type: str | None = None,
        reference_id: str | None = None,
    ) -> Transaction:
        """Post a compensating adjustment of -original_amount.

        No balance check: reversing an earlier credit may take the balance
        below zero if the money was already paid out.
        """
        if isinstance(original_amount, bool) or not isinstance(original_amount, int) \
                or original_amount == 0:
            raise InvalidAmountError(original_amount)
        tx = await self._repo.apply_signed(
            db,
            user_id,
            -original_amount,
            TransactionKind.ADJUSTMENT.value,
            description,
            reference_type,
            reference_id,
        )
        logger.info("Reversed %d cents for user %s: %s", original_amount, user_id, description)
        return tx

    async def credited_for(
        self, db: AsyncSession, user_id: str, reference_type: str, reference_id: str
    ) -> int:
        """Net cents posted against one reference (e.g. a completion's earnings)."""
        txs = await self._repo.list_by_reference(db, user_id, reference_type, reference_id)
        return sum(tx.amount for tx in txs)
