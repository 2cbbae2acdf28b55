from datetime import date, datetime, time, timedelta, timezone

import pytest

from habitrpg.core.domain.stats import (
    calculate_user_stats,
    current_run,
    longest_run,
    stats_period,
    validate_stats_days,
)
from habitrpg.database.models import CompletionLog, Habit, User
from habitrpg.storage import completion_log_repo

TODAY = date(2026, 3, 10)


def days_ago(*offsets: int) -> list[date]:
    return [TODAY - timedelta(days=offset) for offset in offsets]


def test_validate_stats_days() -> None:
    assert validate_stats_days(1) is None
    assert validate_stats_days(365) is None
    assert validate_stats_days(0) == "Days must be between 1 and 365"
    assert validate_stats_days(500) == "Days must be between 1 and 365"


def test_stats_period_ends_today() -> None:
    assert stats_period(1, TODAY) == (TODAY, TODAY)
    assert stats_period(7, TODAY) == (date(2026, 3, 4), TODAY)


def test_longest_run() -> None:
    assert longest_run([]) == 0
    assert longest_run(days_ago(0, 1, 2, 5, 6)) == 3
    # Duplicates and order do not matter
    assert longest_run(days_ago(6, 0, 5, 5, 4, 4)) == 3


def test_current_run_tolerates_no_completion_yet_today() -> None:
    assert current_run(days_ago(0, 1, 2), TODAY) == 3
    assert current_run(days_ago(1, 2), TODAY) == 2
    assert current_run(days_ago(2, 3), TODAY) == 0
    assert current_run([], TODAY) == 0


def test_calculate_user_stats() -> None:
    completions = days_ago(0, 0, 1, 3, 40)

    stats = calculate_user_stats(completions, active_habits=2, days=7, today=TODAY)

    assert stats.total_completions == 4
    assert stats.completion_rate == round(4 / 14 * 100, 2)
    assert stats.current_streak == 2
    assert stats.longest_streak_in_period == 2
    assert stats.average_completions_per_day == round(4 / 7, 2)
    assert stats.period_start == date(2026, 3, 4)
    assert stats.period_end == TODAY
    assert list(stats.daily_completions) == [
        (date(2026, 3, 4) + timedelta(days=i)).isoformat() for i in range(7)
    ]
    assert stats.daily_completions["2026-03-10"] == 2
    assert stats.daily_completions["2026-03-08"] == 0


def test_calculate_user_stats_rate_bounds() -> None:
    stats = calculate_user_stats(days_ago(0, 1), active_habits=0, days=2, today=TODAY)
    assert stats.completion_rate == 0.0

    # Completions of since-deactivated habits can exceed the active capacity
    stats = calculate_user_stats(
        days_ago(0, 0, 0, 1), active_habits=1, days=2, today=TODAY
    )
    assert stats.completion_rate == 100.0


def test_current_streak_can_reach_past_period() -> None:
    history = days_ago(0, 1, 2, 3, 4)

    stats = calculate_user_stats(
        history, active_habits=1, days=2, today=TODAY, streak_days=history
    )

    assert stats.total_completions == 2
    assert stats.current_streak == 5
    assert stats.longest_streak_in_period == 2


async def add_log(habit: Habit, day: date) -> None:
    moment = datetime.combine(day, time(8, 0), tzinfo=timezone.utc)
    await CompletionLog.create(habit=habit, completed_at=moment, completed_on=day)


@pytest.mark.asyncio
async def test_completions_by_habit_ids_in_range(user: User, other_user: User) -> None:
    run = await Habit.create(user=user, title="Run")
    read = await Habit.create(user=user, title="Read", is_active=False)
    foreign = await Habit.create(user=other_user, title="Swim")
    for offset in (0, 1, 5):
        await add_log(run, TODAY - timedelta(days=offset))
    await add_log(read, TODAY - timedelta(days=1))
    await add_log(foreign, TODAY)

    logs = await completion_log_repo.get_completions_by_habit_ids(
        [run.id, read.id], TODAY - timedelta(days=1), TODAY
    )
    assert len(logs) == 3
    assert [log.completed_on for log in logs] == sorted(log.completed_on for log in logs)

    all_logs = await completion_log_repo.get_completions_by_habit_ids([run.id, read.id])
    assert len(all_logs) == 4

    assert await completion_log_repo.get_completions_by_habit_ids([]) == []


@pytest.mark.asyncio
async def test_completion_dates_are_distinct(user: User) -> None:
    run = await Habit.create(user=user, title="Run")
    read = await Habit.create(user=user, title="Read")
    await add_log(run, TODAY)
    await add_log(read, TODAY)
    await add_log(read, TODAY - timedelta(days=2))
    await add_log(read, TODAY - timedelta(days=10))

    dates = await completion_log_repo.get_completion_dates_by_habit_ids(
        [run.id, read.id], TODAY - timedelta(days=6), TODAY
    )

    assert dates == {TODAY, TODAY - timedelta(days=2)}
    assert (
        await completion_log_repo.get_completion_dates_by_habit_ids([], TODAY, TODAY)
        == set()
    )
