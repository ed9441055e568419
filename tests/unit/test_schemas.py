"""Tests for response schema builders."""

from datetime import UTC, date, datetime

import pytest
from pydantic import ValidationError

from src.hh_completion.application.schemas import CompletionItem
from src.hh_completion.domain.models import Completion
from src.hh_ledger.application.schemas import (
    BalanceResponse,
    MonthlyTotalResponse,
    PayoutRequest,
    TransactionItem,
)
from src.hh_ledger.domain.models import KindTotal, Transaction


class TestLedgerSchemas:
    def test_balance_display(self) -> None:
        resp = BalanceResponse.from_cents("kid-1", -250)
        assert resp.current_balance_display == "-$2.50"

    def test_transaction_item(self) -> None:
        tx = Transaction(
            id=3, user_id="kid-1", amount=-50, kind="adjustment", balance_after=0,
            description="Undone: Make bed", reference_type="UNDO", reference_id="c-1",
            created_at=datetime(2026, 3, 1, tzinfo=UTC),
        )
        item = TransactionItem.from_domain(tx)
        assert item.amount_display == "-$0.50"
        assert item.created_at.startswith("2026-03-01")

    def test_monthly_with_no_activity(self) -> None:
        resp = MonthlyTotalResponse.from_totals("kid-1", 3, 2026, {})
        assert resp.net_cents == 0
        assert resp.formatted["earned"] == "$0.00"

    def test_monthly_payout_counts_as_spent(self) -> None:
        totals = {"earned": KindTotal(1000, 4), "payout": KindTotal(-400, 1)}
        resp = MonthlyTotalResponse.from_totals("kid-1", 3, 2026, totals)
        assert resp.spent_cents == 400
        assert resp.net_cents == 600

    def test_payout_request_rejects_zero(self) -> None:
        with pytest.raises(ValidationError):
            PayoutRequest(user_id="kid-1", amount_cents=0)


class TestCompletionSchemas:
    def test_completion_item(self) -> None:
        c = Completion("c-1", "make-bed", "kid-1", datetime(2026, 3, 1, 15, tzinfo=UTC), date(2026, 3, 1))
        item = CompletionItem.from_domain(c, can_undo=False)
        assert item.completion_date == "2026-03-01"
        assert item.can_undo is False
