"""Pure streak arithmetic shared by the live path and the recalculation job."""

from collections.abc import Iterable
from datetime import date, timedelta

_ONE_DAY = timedelta(days=1)


def advance_streak(current_count: int, last_date: date | None, day: date) -> int:
    """Count after a routine is fully completed on `day`.

    Consecutive day continues the streak, the same day keeps it, and any
    other gap restarts it at 1.
    """
    if last_date is not None:
        if last_date == day - _ONE_DAY:
            return current_count + 1
        if last_date == day:
            return current_count
    return 1


def count_current_streak(dates: Iterable[date], today: date) -> int:
    """Consecutive-day run ending at the most recent date.

    The run only counts while its most recent day is today or yesterday.
    """
    ordered = sorted(set(dates), reverse=True)
    if not ordered:
        return 0
    most_recent = ordered[0]
    if most_recent < today - _ONE_DAY:
        return 0

    count = 1
    expected = most_recent - _ONE_DAY
    for day in ordered[1:]:
        if day != expected:
            break
        count += 1
        expected -= _ONE_DAY
    return count
