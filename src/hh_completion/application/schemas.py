"""Pydantic schemas for hh_completion API."""

from pydantic import BaseModel

from src.hh_completion.domain.models import Completion
from src.hh_ledger.application.schemas import BalanceResponse


class CompletionItem(BaseModel):
    id: str
    task_id: str
    user_id: str
    completed_at: str       # ISO8601
    completion_date: str    # ISO date, household calendar
    can_undo: bool

    @classmethod
    def from_domain(cls, completion: Completion, can_undo: bool) -> "CompletionItem":
        return cls(
            id=completion.id,
            task_id=completion.task_id,
            user_id=completion.user_id,
            completed_at=completion.completed_at.isoformat(),
            completion_date=completion.completion_date.isoformat(),
            can_undo=can_undo,
        )


class CompleteResponse(BaseModel):
    completion: CompletionItem
    balance: BalanceResponse
    earned_cents: int
    can_undo: bool


class UndoResponse(BaseModel):
    success: bool
    reversed_cents: int
    balance: BalanceResponse


class CanUndoResponse(BaseModel):
    completion_id: str
    can_undo: bool


class DayCompletionsResponse(BaseModel):
    user_id: str
    date: str
    items: list[CompletionItem]
