"""Global enums. Values must match DB CHECK constraints exactly."""

from enum import Enum


class TransactionKind(str, Enum):
    EARNED = "earned"
    SPENT = "spent"
    ADJUSTMENT = "adjustment"
    PAYOUT = "payout"
    BONUS = "bonus"


# Kinds each ledger operation accepts
CREDIT_KINDS = frozenset({TransactionKind.EARNED, TransactionKind.ADJUSTMENT, TransactionKind.BONUS})
DEBIT_KINDS = frozenset({TransactionKind.SPENT, TransactionKind.PAYOUT, TransactionKind.ADJUSTMENT})


class ReferenceType(str, Enum):
    """What a ledger transaction points back to."""
    COMPLETION = "COMPLETION"
    UNDO = "UNDO"
    MILESTONE = "MILESTONE"
    PAYOUT = "PAYOUT"
    MANUAL = "MANUAL"


class NotificationKind(str, Enum):
    TASK_COMPLETE = "task_complete"
    STREAK_MILESTONE = "streak_milestone"
    STREAK_BROKEN = "streak_broken"
    BALANCE_UPDATE = "balance_update"
    SYSTEM = "system"
