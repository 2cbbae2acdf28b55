"""
Streak Domain Rules - pure functions for per-habit streaks.

AICODE-NOTE: Days are UTC calendar days. "Today" is taken when the
completion happens and passed in by the use case.
"""

from dataclasses import dataclass
from datetime import date, datetime, timedelta, timezone


@dataclass(frozen=True)
class StreakUpdate:
    current_streak: int
    best_streak: int
    continued: bool


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def utc_today() -> date:
    return utc_now().date()


def to_utc_date(moment: datetime) -> date:
    """UTC calendar date of a timestamp (naive values are taken as UTC)."""
    if moment.tzinfo is None:
        return moment.date()
    return moment.astimezone(timezone.utc).date()


def calculate_streak(
    last_completed_on: date | None,
    current_streak: int,
    best_streak: int,
    today: date,
) -> StreakUpdate:
    """
    Streak after completing a habit today.

    Args:
        last_completed_on: date of the latest completion strictly before today
        current_streak: streak stored on the habit
        best_streak: best streak stored on the habit
        today: UTC date of the completion

    Logic:
    - No earlier completion -> streak = 1
    - Last completion was yesterday -> streak += 1
    - Gap of 2+ days -> streak = 1
    """
    if last_completed_on is not None and last_completed_on == today - timedelta(days=1):
        new_streak = max(0, current_streak) + 1
        continued = True
    else:
        new_streak = 1
        continued = False

    return StreakUpdate(
        current_streak=new_streak,
        best_streak=max(best_streak, new_streak),
        continued=continued,
    )
