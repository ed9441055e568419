"""Unit tests for LedgerRepository using MagicMock AsyncSession."""

from datetime import UTC, datetime
from typing import Any
from unittest.mock import AsyncMock, MagicMock

import pytest

from src.hh_common.errors import InsufficientBalanceError
from src.hh_ledger.infrastructure.persistence import LedgerRepository


def _account_row(**kwargs: Any) -> MagicMock:
    row = MagicMock()
    row.user_id = kwargs.get("user_id", "kid-1")
    row.current_balance = kwargs.get("current_balance", 0)
    row.version = kwargs.get("version", 1)
    row.created_at = datetime.now(UTC)
    row.updated_at = datetime.now(UTC)
    return row


def _tx_row(**kwargs: Any) -> MagicMock:
    row = MagicMock()
    row.id = kwargs.get("id", 1)
    row.user_id = kwargs.get("user_id", "kid-1")
    row.amount = kwargs.get("amount", 50)
    row.kind = kwargs.get("kind", "earned")
    row.description = kwargs.get("description", "Completed: Make bed")
    row.balance_after = kwargs.get("balance_after", 50)
    row.reference_type = kwargs.get("reference_type")
    row.reference_id = kwargs.get("reference_id")
    row.created_at = datetime.now(UTC)
    return row


def _result(fetchone: Any = None, fetchall: list | None = None) -> MagicMock:
    result = MagicMock()
    result.fetchone.return_value = fetchone
    result.fetchall.return_value = fetchall or []
    return result


class TestApplySigned:
    async def test_upserts_then_appends(self) -> None:
        db = MagicMock()
        db.execute = AsyncMock(
            side_effect=[
                _result(_account_row(current_balance=150)),
                _result(_tx_row(amount=50, balance_after=150)),
            ]
        )
        tx = await LedgerRepository().apply_signed(
            db, "kid-1", 50, "earned", "Completed: Make bed", "COMPLETION", "c-1"
        )
        assert tx.balance_after == 150
        assert db.execute.await_count == 2
        insert_params = db.execute.await_args_list[1].args[1]
        assert insert_params["balance_after"] == 150
        assert insert_params["reference_id"] == "c-1"


class TestApplyDebit:
    async def test_no_row_means_insufficient(self) -> None:
        db = MagicMock()
        db.execute = AsyncMock(
            side_effect=[
                _result(None),                                    # ensure account
                _result(None),                                    # conditional UPDATE
                _result(_account_row(current_balance=30)),        # read for message
            ]
        )
        with pytest.raises(InsufficientBalanceError) as exc_info:
            await LedgerRepository().apply_debit(db, "kid-1", 100, "payout", "Cash", None, None)
        assert "30" in exc_info.value.message

    async def test_debit_appends_negative_amount(self) -> None:
        db = MagicMock()
        db.execute = AsyncMock(
            side_effect=[
                _result(None),
                _result(_account_row(current_balance=70)),
                _result(_tx_row(amount=-30, kind="spent", balance_after=70)),
            ]
        )
        tx = await LedgerRepository().apply_debit(db, "kid-1", 30, "spent", "Toy", None, None)
        assert tx.amount == -30
        assert db.execute.await_args_list[2].args[1]["amount"] == -30


class TestQueries:
    async def test_totals_by_kind(self) -> None:
        earned = MagicMock(kind="earned", total=500, count=3)
        spent = MagicMock(kind="spent", total=-200, count=1)
        db = MagicMock()
        db.execute = AsyncMock(return_value=_result(fetchall=[earned, spent]))
        totals = await LedgerRepository().totals_by_kind(
            db, "kid-1", datetime(2026, 3, 1, tzinfo=UTC), datetime(2026, 4, 1, tzinfo=UTC)
        )
        assert totals["earned"].total == 500
        assert totals["spent"].count == 1

    async def test_count_transactions(self) -> None:
        result = MagicMock()
        result.scalar_one.return_value = 7
        db = MagicMock()
        db.execute = AsyncMock(return_value=result)
        assert await LedgerRepository().count_transactions(db, "kid-1", None, None, None) == 7

    async def test_invariant_violations(self) -> None:
        row = MagicMock(user_id="kid-1", current_balance=100, ledger_sum=90)
        db = MagicMock()
        db.execute = AsyncMock(return_value=_result(fetchall=[row]))
        violations = await LedgerRepository().find_invariant_violations(db)
        assert violations[0].ledger_sum == 90
