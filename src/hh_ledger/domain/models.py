"""Domain models for hh_ledger: pure dataclasses, no SQLAlchemy dependency."""

from dataclasses import dataclass
from datetime import date, datetime


@dataclass
class BalanceAccount:
    user_id: str
    current_balance: int     # cents
    version: int = 0
    created_at: datetime | None = None
    updated_at: datetime | None = None


@dataclass
class Transaction:
    id: int                          # BIGSERIAL
    user_id: str
    amount: int                      # cents, positive=credit negative=debit
    kind: str                        # TransactionKind value
    balance_after: int               # cents, current_balance snapshot after op
    description: str | None = None
    reference_type: str | None = None
    reference_id: str | None = None
    created_at: datetime | None = None


@dataclass
class TransactionFilter:
    kind: str | None = None
    start_date: date | None = None   # inclusive, household calendar day
    end_date: date | None = None     # inclusive, household calendar day


@dataclass
class TransactionPage:
    items: list[Transaction]
    total: int
    limit: int
    offset: int

    @property
    def has_more(self) -> bool:
        return self.offset + len(self.items) < self.total


@dataclass
class KindTotal:
    total: int = 0   # signed cents
    count: int = 0


@dataclass
class InvariantViolation:
    user_id: str
    current_balance: int
    ledger_sum: int
