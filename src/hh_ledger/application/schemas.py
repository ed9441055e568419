"""Pydantic schemas for hh_ledger API."""

from pydantic import BaseModel, Field

from src.hh_common.cents import cents_to_display
from src.hh_common.enums import TransactionKind
from src.hh_ledger.domain.models import KindTotal, Transaction

# ---------------------------------------------------------------------------
# Request schemas
# ---------------------------------------------------------------------------


class PayoutRequest(BaseModel):
    user_id: str = Field(..., min_length=1, max_length=64)
    amount_cents: int = Field(..., gt=0, description="Amount paid out in cents")
    description: str = Field("Payout", max_length=500)


# ---------------------------------------------------------------------------
# Response schemas
# ---------------------------------------------------------------------------


class BalanceResponse(BaseModel):
    user_id: str
    current_balance_cents: int
    current_balance_display: str

    @classmethod
    def from_cents(cls, user_id: str, balance: int) -> "BalanceResponse":
        return cls(
            user_id=user_id,
            current_balance_cents=balance,
            current_balance_display=cents_to_display(balance),
        )


class TransactionItem(BaseModel):
    id: int
    kind: str
    amount_cents: int
    amount_display: str
    balance_after_cents: int
    balance_after_display: str
    description: str | None
    reference_type: str | None
    reference_id: str | None
    created_at: str  # ISO8601 string

    @classmethod
    def from_domain(cls, tx: Transaction) -> "TransactionItem":
        return cls(
            id=tx.id,
            kind=tx.kind,
            amount_cents=tx.amount,
            amount_display=cents_to_display(tx.amount),
            balance_after_cents=tx.balance_after,
            balance_after_display=cents_to_display(tx.balance_after),
            description=tx.description,
            reference_type=tx.reference_type,
            reference_id=tx.reference_id,
            created_at=tx.created_at.isoformat() if tx.created_at else "",
        )


class TransactionPageResponse(BaseModel):
    items: list[TransactionItem]
    total: int
    limit: int
    offset: int
    has_more: bool


class MonthlyTotalResponse(BaseModel):
    user_id: str
    month: int
    year: int
    earned_cents: int
    bonus_cents: int
    spent_cents: int
    adjustments_cents: int
    net_cents: int
    formatted: dict[str, str]

    @classmethod
    def from_totals(
        cls, user_id: str, month: int, year: int, totals: dict[str, KindTotal]
    ) -> "MonthlyTotalResponse":
        def total_of(kind: TransactionKind) -> int:
            return totals.get(kind.value, KindTotal()).total

        earned = total_of(TransactionKind.EARNED)
        bonus = total_of(TransactionKind.BONUS)
        # spent/payout rows are stored negative; report the absolute outflow
        spent = -(total_of(TransactionKind.SPENT) + total_of(TransactionKind.PAYOUT))
        adjustments = total_of(TransactionKind.ADJUSTMENT)
        net = earned + bonus - spent + adjustments
        return cls(
            user_id=user_id,
            month=month,
            year=year,
            earned_cents=earned,
            bonus_cents=bonus,
            spent_cents=spent,
            adjustments_cents=adjustments,
            net_cents=net,
            formatted={
                "earned": cents_to_display(earned),
                "bonus": cents_to_display(bonus),
                "spent": cents_to_display(spent),
                "adjustments": cents_to_display(adjustments),
                "net": cents_to_display(net),
            },
        )


class KindTotalItem(BaseModel):
    total_cents: int
    total_display: str
    count: int


class SummaryResponse(BaseModel):
    user_id: str
    start_date: str
    end_date: str
    by_kind: dict[str, KindTotalItem]

    @classmethod
    def from_totals(
        cls, user_id: str, start_date: str, end_date: str, totals: dict[str, KindTotal]
    ) -> "SummaryResponse":
        by_kind = {}
        for kind in TransactionKind:
            kt = totals.get(kind.value, KindTotal())
            by_kind[kind.value] = KindTotalItem(
                total_cents=kt.total,
                total_display=cents_to_display(kt.total),
                count=kt.count,
            )
        return cls(user_id=user_id, start_date=start_date, end_date=end_date, by_kind=by_kind)
