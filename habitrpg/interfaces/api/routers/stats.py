"""
Stats API router.

Endpoints:
- GET /api/user/stats?days=N - Completion stats for the last N UTC days
"""

import uuid

from fastapi import APIRouter, Depends, HTTPException, status

from habitrpg.core.domain.stats import (
    DEFAULT_STATS_DAYS,
    MAX_STATS_DAYS,
    calculate_user_stats,
    stats_period,
    validate_stats_days,
)
from habitrpg.core.domain.streaks import utc_today
from habitrpg.interfaces.api.auth import get_current_user_id
from habitrpg.interfaces.api.schemas import UserStatsResponse
from habitrpg.storage import completion_log_repo, habit_repo

router = APIRouter(prefix="/api", tags=["stats"])


@router.get("/user/stats", response_model=UserStatsResponse)
async def get_user_stats(
    days: int = DEFAULT_STATS_DAYS,
    user_id: uuid.UUID = Depends(get_current_user_id),
) -> UserStatsResponse:
    """
    Get completion statistics.

    Includes:
    - Totals (completions, rate against active habits, daily average)
    - Streaks over days with any completion (current streak looks back
      up to a year, independent of `days`)
    - Per-day completion counts
    """
    error = validate_stats_days(days)
    if error:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=error)

    today = utc_today()
    start, end = stats_period(days, today)

    # AICODE-NOTE: History of deactivated habits still counts as completions
    habits = await habit_repo.get_habits(user_id, include_inactive=True)
    habit_ids = [h.id for h in habits]
    logs = await completion_log_repo.get_completions_by_habit_ids(habit_ids, start, end)
    streak_start, _ = stats_period(MAX_STATS_DAYS, today)
    streak_days = await completion_log_repo.get_completion_dates_by_habit_ids(
        habit_ids, streak_start, end
    )
    active_habits = sum(1 for h in habits if h.is_active)

    stats = calculate_user_stats(
        [log.completed_on for log in logs],
        active_habits,
        days,
        today,
        streak_days=streak_days,
    )
    return UserStatsResponse(
        total_completions=stats.total_completions,
        completion_rate=stats.completion_rate,
        current_streak=stats.current_streak,
        longest_streak_in_period=stats.longest_streak_in_period,
        average_completions_per_day=stats.average_completions_per_day,
        daily_completions=stats.daily_completions,
        period_start=stats.period_start,
        period_end=stats.period_end,
    )
