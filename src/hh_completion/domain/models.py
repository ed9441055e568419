"""Domain models for hh_completion: pure dataclasses, no SQLAlchemy dependency."""

from dataclasses import dataclass, field
from datetime import date, datetime, timedelta


@dataclass
class Completion:
    id: str
    task_id: str
    user_id: str
    completed_at: datetime       # timezone-aware
    completion_date: date        # household calendar day


def can_undo(completed_at: datetime, now: datetime, window: timedelta) -> bool:
    """True while `now` is no more than `window` after `completed_at`."""
    return now - completed_at <= window


@dataclass
class TaskValue:
    task_id: str
    name: str
    value_cents: int


@dataclass
class RoutineTask:
    task_id: str
    name: str
    position: int
    is_scheduled: bool


@dataclass
class RoutinePlan:
    """A routine assigned to a user, with its tasks in display order for one day."""
    routine_id: str
    name: str
    tasks: list[RoutineTask] = field(default_factory=list)

    def scheduled_task_ids(self) -> set[str]:
        return {t.task_id for t in self.tasks if t.is_scheduled}


def is_scheduled_for(schedule_days: list[int] | None, day: date) -> bool:
    """Weekday schedule check; days are 0=Sunday..6=Saturday, empty means daily."""
    if not schedule_days:
        return True
    sunday_based = (day.weekday() + 1) % 7
    return sunday_based in schedule_days
