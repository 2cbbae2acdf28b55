"""
User Stats Domain - pure aggregation over a window of UTC days.

AICODE-NOTE: The use case/router loads completion days from the repository
and passes them in. Nothing here touches the database or the clock.
"""

from collections import Counter
from collections.abc import Iterable
from dataclasses import dataclass, field
from datetime import date, timedelta

MIN_STATS_DAYS = 1
MAX_STATS_DAYS = 365
DEFAULT_STATS_DAYS = 30


@dataclass(frozen=True)
class UserStats:
    total_completions: int
    completion_rate: float
    current_streak: int
    longest_streak_in_period: int
    average_completions_per_day: float
    period_start: date
    period_end: date
    # ISO date -> completions that day, every day of the period present
    daily_completions: dict[str, int] = field(default_factory=dict)


def validate_stats_days(days: int) -> str | None:
    if days < MIN_STATS_DAYS or days > MAX_STATS_DAYS:
        return f"Days must be between {MIN_STATS_DAYS} and {MAX_STATS_DAYS}"
    return None


def stats_period(days: int, today: date) -> tuple[date, date]:
    """[start, end] covering `days` UTC days and ending today."""
    return today - timedelta(days=days - 1), today


def longest_run(days: Iterable[date]) -> int:
    """Longest run of consecutive calendar days."""
    best = run = 0
    previous: date | None = None
    for day in sorted(set(days)):
        if previous is not None and day == previous + timedelta(days=1):
            run += 1
        else:
            run = 1
        best = max(best, run)
        previous = day
    return best


def current_run(days: Iterable[date], today: date) -> int:
    """
    Consecutive completion days ending today.

    A day without completions yet today does not break the run:
    it then ends yesterday.
    """
    day_set = set(days)
    cursor = today if today in day_set else today - timedelta(days=1)
    run = 0
    while cursor in day_set:
        run += 1
        cursor -= timedelta(days=1)
    return run


def calculate_user_stats(
    completion_days: Iterable[date],
    active_habits: int,
    days: int,
    today: date,
    streak_days: Iterable[date] | None = None,
) -> UserStats:
    """
    Aggregate completions into period stats.

    Args:
        completion_days: UTC day of every completion (one entry per log)
        active_habits: habits currently active (denominator of the rate)
        days: period length in days
        today: last day of the period
        streak_days: days with any completion looked up beyond the period;
            when given, the current streak may extend past period_start

    Logic:
    - completions outside [today - days + 1, today] are ignored
    - rate = completions / (active_habits * days) * 100, capped at 100
    - streaks are computed over days with at least one completion
    """
    start, end = stats_period(days, today)
    per_day = Counter(d for d in completion_days if start <= d <= end)
    total = sum(per_day.values())

    if active_habits > 0:
        rate = min(100.0, round(total / (active_habits * days) * 100, 2))
    else:
        rate = 0.0

    daily = {
        (start + timedelta(days=offset)).isoformat(): per_day.get(
            start + timedelta(days=offset), 0
        )
        for offset in range(days)
    }

    return UserStats(
        total_completions=total,
        completion_rate=rate,
        current_streak=current_run(
            per_day if streak_days is None else streak_days, today
        ),
        longest_streak_in_period=longest_run(per_day),
        average_completions_per_day=round(total / days, 2),
        period_start=start,
        period_end=end,
        daily_completions=daily,
    )
