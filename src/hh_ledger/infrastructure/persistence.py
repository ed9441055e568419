"""LedgerRepository — concrete implementation of LedgerRepositoryProtocol.

Balance mutations are single PostgreSQL statements (upsert or conditional
UPDATE ... RETURNING) that take the account row lock, so the sufficiency
check of a debit is evaluated inside the lock rather than against an
earlier read. A debit returning 0 rows means the balance could not cover it.

Transaction ownership: the CALLER commits or rolls back.
"""

from datetime import datetime

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from src.hh_common.errors import InsufficientBalanceError, InternalError
from src.hh_ledger.domain.models import (
    BalanceAccount,
    InvariantViolation,
    KindTotal,
    Transaction,
)

# ---------------------------------------------------------------------------
# SQL: balance_accounts
# ---------------------------------------------------------------------------

_ENSURE_ACCOUNT_SQL = text("""
    INSERT INTO balance_accounts (user_id, current_balance)
    VALUES (:user_id, 0)
    ON CONFLICT (user_id) DO NOTHING
""")

_GET_ACCOUNT_SQL = text("""
    SELECT user_id, current_balance, version, created_at, updated_at
    FROM balance_accounts
    WHERE user_id = :user_id
""")

# Lazily creates the account with the first amount, otherwise adds to it.
_APPLY_SIGNED_SQL = text("""
    INSERT INTO balance_accounts (user_id, current_balance, version)
    VALUES (:user_id, :amount, 1)
    ON CONFLICT (user_id) DO UPDATE
    SET current_balance = balance_accounts.current_balance + EXCLUDED.current_balance,
        version = balance_accounts.version + 1,
        updated_at = NOW()
    RETURNING user_id, current_balance, version, created_at, updated_at
""")

_APPLY_DEBIT_SQL = text("""
    UPDATE balance_accounts
    SET current_balance = current_balance - :amount,
        version = version + 1,
        updated_at = NOW()
    WHERE user_id = :user_id AND current_balance >= :amount
    RETURNING user_id, current_balance, version, created_at, updated_at
""")

# ---------------------------------------------------------------------------
# SQL: balance_transactions (append-only)
# ---------------------------------------------------------------------------

_INSERT_TRANSACTION_SQL = text("""
    INSERT INTO balance_transactions
        (user_id, amount, kind, description, balance_after,
         reference_type, reference_id)
    VALUES
        (:user_id, :amount, :kind, :description, :balance_after,
         :reference_type, :reference_id)
    RETURNING id, user_id, amount, kind, description, balance_after,
              reference_type, reference_id, created_at
""")

_LIST_BY_REFERENCE_SQL = text("""
    SELECT id, user_id, amount, kind, description, balance_after,
           reference_type, reference_id, created_at
    FROM balance_transactions
    WHERE user_id = :user_id
      AND reference_type = :reference_type
      AND reference_id = :reference_id
    ORDER BY id
""")

_FILTER_CLAUSE = """
    WHERE user_id = :user_id
      AND (CAST(:kind AS VARCHAR) IS NULL OR kind = CAST(:kind AS VARCHAR))
      AND (CAST(:start_at AS TIMESTAMPTZ) IS NULL OR created_at >= CAST(:start_at AS TIMESTAMPTZ))
      AND (CAST(:end_at AS TIMESTAMPTZ) IS NULL OR created_at < CAST(:end_at AS TIMESTAMPTZ))
"""

_LIST_TRANSACTIONS_SQL = text(f"""
    SELECT id, user_id, amount, kind, description, balance_after,
           reference_type, reference_id, created_at
    FROM balance_transactions
    {_FILTER_CLAUSE}
    ORDER BY created_at DESC, id DESC
    LIMIT :limit OFFSET :offset
""")

_COUNT_TRANSACTIONS_SQL = text(f"""
    SELECT COUNT(*) FROM balance_transactions
    {_FILTER_CLAUSE}
""")

_TOTALS_BY_KIND_SQL = text("""
    SELECT kind, COALESCE(SUM(amount), 0) AS total, COUNT(*) AS count
    FROM balance_transactions
    WHERE user_id = :user_id
      AND created_at >= :start_at
      AND created_at < :end_at
    GROUP BY kind
""")

_INVARIANT_SQL = text("""
    SELECT a.user_id, a.current_balance, COALESCE(SUM(t.amount), 0) AS ledger_sum
    FROM balance_accounts a
    LEFT JOIN balance_transactions t ON t.user_id = a.user_id
    GROUP BY a.user_id, a.current_balance
    HAVING a.current_balance <> COALESCE(SUM(t.amount), 0)
""")


def _row_to_account(row: object) -> BalanceAccount:
    return BalanceAccount(
        user_id=row.user_id,  # type: ignore[attr-defined]
        current_balance=row.current_balance,  # type: ignore[attr-defined]
        version=row.version,  # type: ignore[attr-defined]
        created_at=row.created_at,  # type: ignore[attr-defined]
        updated_at=row.updated_at,  # type: ignore[attr-defined]
    )


def _row_to_transaction(row: object) -> Transaction:
    return Transaction(
        id=row.id,  # type: ignore[attr-defined]
        user_id=row.user_id,  # type: ignore[attr-defined]
        amount=row.amount,  # type: ignore[attr-defined]
        kind=row.kind,  # type: ignore[attr-defined]
        balance_after=row.balance_after,  # type: ignore[attr-defined]
        description=row.description,  # type: ignore[attr-defined]
        reference_type=row.reference_type,  # type: ignore[attr-defined]
        reference_id=row.reference_id,  # type: ignore[attr-defined]
        created_at=row.created_at,  # type: ignore[attr-defined]
    )


class LedgerRepository:
    """Concrete repository. Every balance move is atomic at the SQL level."""

    async def get_or_create_account(
        self, db: AsyncSession, user_id: str
    ) -> BalanceAccount:
        await db.execute(_ENSURE_ACCOUNT_SQL, {"user_id": user_id})
        result = await db.execute(_GET_ACCOUNT_SQL, {"user_id": user_id})
        row = result.fetchone()
        if row is None:
            raise InternalError(f"Balance account missing after upsert for user {user_id}")
        return _row_to_account(row)

    async def apply_signed(
        self,
        db: AsyncSession,
        user_id: str,
        amount: int,
        kind: str,
        description: str,
        reference_type: str | None,
        reference_id: str | None,
    ) -> Transaction:
        result = await db.execute(_APPLY_SIGNED_SQL, {"user_id": user_id, "amount": amount})
        row = result.fetchone()
        if row is None:
            raise InternalError(f"Balance upsert returned no rows for user {user_id}")
        account = _row_to_account(row)
        return await self._append(
            db, account, amount, kind, description, reference_type, reference_id
        )

    async def apply_debit(
        self,
        db: AsyncSession,
        user_id: str,
        amount: int,
        kind: str,
        description: str,
        reference_type: str | None,
        reference_id: str | None,
    ) -> Transaction:
        await db.execute(_ENSURE_ACCOUNT_SQL, {"user_id": user_id})
        result = await db.execute(_APPLY_DEBIT_SQL, {"user_id": user_id, "amount": amount})
        row = result.fetchone()
        if row is None:
            acc_result = await db.execute(_GET_ACCOUNT_SQL, {"user_id": user_id})
            acc_row = acc_result.fetchone()
            available = acc_row.current_balance if acc_row else 0
            raise InsufficientBalanceError(amount, available)
        account = _row_to_account(row)
        return await self._append(
            db, account, -amount, kind, description, reference_type, reference_id
        )

    async def _append(
        self,
        db: AsyncSession,
        account: BalanceAccount,
        amount: int,
        kind: str,
        description: str,
        reference_type: str | None,
        reference_id: str | None,
    ) -> Transaction:
        tx_result = await db.execute(
            _INSERT_TRANSACTION_SQL,
            {
                "user_id": account.user_id,
                "amount": amount,
                "kind": kind,
                "description": description,
                "balance_after": account.current_balance,
                "reference_type": reference_type,
                "reference_id": reference_id,
            },
        )
        tx_row = tx_result.fetchone()
        if tx_row is None:
            raise InternalError("Transaction insert returned no rows")
        return _row_to_transaction(tx_row)

    async def list_by_reference(
        self,
        db: AsyncSession,
        user_id: str,
        reference_type: str,
        reference_id: str,
    ) -> list[Transaction]:
        result = await db.execute(
            _LIST_BY_REFERENCE_SQL,
            {
                "user_id": user_id,
                "reference_type": reference_type,
                "reference_id": reference_id,
            },
        )
        return [_row_to_transaction(row) for row in result.fetchall()]

    async def list_transactions(
        self,
        db: AsyncSession,
        user_id: str,
        kind: str | None,
        start_at: datetime | None,
        end_at: datetime | None,
        limit: int,
        offset: int,
    ) -> list[Transaction]:
        result = await db.execute(
            _LIST_TRANSACTIONS_SQL,
            {
                "user_id": user_id,
                "kind": kind,
                "start_at": start_at,
                "end_at": end_at,
                "limit": limit,
                "offset": offset,
            },
        )
        return [_row_to_transaction(row) for row in result.fetchall()]

    async def count_transactions(
        self,
        db: AsyncSession,
        user_id: str,
        kind: str | None,
        start_at: datetime | None,
        end_at: datetime | None,
    ) -> int:
        result = await db.execute(
            _COUNT_TRANSACTIONS_SQL,
            {"user_id": user_id, "kind": kind, "start_at": start_at, "end_at": end_at},
        )
        return int(result.scalar_one())

    async def totals_by_kind(
        self,
        db: AsyncSession,
        user_id: str,
        start_at: datetime,
        end_at: datetime,
    ) -> dict[str, KindTotal]:
        result = await db.execute(
            _TOTALS_BY_KIND_SQL,
            {"user_id": user_id, "start_at": start_at, "end_at": end_at},
        )
        return {
            row.kind: KindTotal(total=int(row.total), count=int(row.count))
            for row in result.fetchall()
        }

    async def find_invariant_violations(self, db: AsyncSession) -> list[InvariantViolation]:
        result = await db.execute(_INVARIANT_SQL)
        return [
            InvariantViolation(
                user_id=row.user_id,
                current_balance=int(row.current_balance),
                ledger_sum=int(row.ledger_sum),
            )
            for row in result.fetchall()
        ]
