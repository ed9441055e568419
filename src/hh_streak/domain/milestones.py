"""Milestone table: streak-day thresholds that pay a one-time bonus.

Loaded once from settings.MILESTONES and never mutated afterwards.
"""

from collections.abc import Iterable

from config.settings import MilestoneSetting, settings
from src.hh_streak.domain.models import Milestone


class MilestoneTable:
    def __init__(self, milestones: Iterable[Milestone]) -> None:
        ordered = sorted(milestones, key=lambda m: m.days)
        days = [m.days for m in ordered]
        if len(days) != len(set(days)):
            raise ValueError("Milestone thresholds must be unique")
        if any(m.days <= 0 or m.bonus_cents <= 0 for m in ordered):
            raise ValueError("Milestone days and bonus must be positive")
        self._milestones: tuple[Milestone, ...] = tuple(ordered)

    @classmethod
    def from_settings(
        cls, configured: Iterable[MilestoneSetting] | None = None
    ) -> "MilestoneTable":
        source = settings.MILESTONES if configured is None else configured
        return cls(
            Milestone(days=m.days, bonus_cents=m.bonus_cents, label=m.label) for m in source
        )

    def next_after(self, days: int) -> Milestone | None:
        for m in self._milestones:
            if m.days > days:
                return m
        return None

    def crossed(self, previous: int, current: int) -> list[Milestone]:
        """Thresholds t with previous < t <= current, lowest first."""
        return [m for m in self._milestones if previous < m.days <= current]
