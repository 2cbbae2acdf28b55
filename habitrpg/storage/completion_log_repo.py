"""
CompletionLog Repository - dumb CRUD operations for the CompletionLog model.

AICODE-NOTE: The repository only accesses data, NO business logic.
Day boundaries are UTC dates stored in completed_on.
"""

import uuid
from collections.abc import Iterable
from datetime import date, datetime
from typing import Optional

from tortoise import BaseDBAsyncClient

from habitrpg.database.models import CompletionLog, Habit


async def is_completed_on(
    habit_id: int, day: date, conn: Optional[BaseDBAsyncClient] = None
) -> bool:
    """Whether the habit already has a completion on `day`."""
    return (
        await CompletionLog.filter(habit_id=habit_id, completed_on=day)
        .using_db(conn)
        .exists()
    )


async def get_last_completion_before(
    habit_id: int, day: date, conn: Optional[BaseDBAsyncClient] = None
) -> Optional[CompletionLog]:
    """Latest completion strictly before `day`."""
    return (
        await CompletionLog.filter(habit_id=habit_id, completed_on__lt=day)
        .using_db(conn)
        .order_by("-completed_on", "-completed_at")
        .first()
    )


async def get_completed_habit_ids_on(habit_ids: Iterable[int], day: date) -> set[int]:
    """IDs among `habit_ids` that were completed on `day`."""
    habit_ids = list(habit_ids)
    if not habit_ids:
        return set()
    completed = await CompletionLog.filter(
        habit_id__in=habit_ids, completed_on=day
    ).values_list("habit_id", flat=True)
    return set(completed)


async def get_completions_by_habit_ids(
    habit_ids: Iterable[int],
    start: Optional[date] = None,
    end: Optional[date] = None,
) -> list[CompletionLog]:
    """
    Completions of `habit_ids`, optionally limited to a UTC day range.

    Args:
        habit_ids: Habit IDs
        start: First day included (None = no lower bound)
        end: Last day included (None = no upper bound)

    Returns:
        List of CompletionLog, oldest first
    """
    habit_ids = list(habit_ids)
    if not habit_ids:
        return []
    query = CompletionLog.filter(habit_id__in=habit_ids)
    if start is not None:
        query = query.filter(completed_on__gte=start)
    if end is not None:
        query = query.filter(completed_on__lte=end)
    return await query.order_by("completed_on", "completed_at").all()


async def get_completion_dates_by_habit_ids(
    habit_ids: Iterable[int], start: date, end: date
) -> set[date]:
    """Distinct days in [start, end] on which any of `habit_ids` was completed."""
    habit_ids = list(habit_ids)
    if not habit_ids:
        return set()
    days = await CompletionLog.filter(
        habit_id__in=habit_ids, completed_on__gte=start, completed_on__lte=end
    ).values_list("completed_on", flat=True)
    return set(days)


async def create_log(
    habit: Habit,
    completed_at: datetime,
    completed_on: date,
    conn: Optional[BaseDBAsyncClient] = None,
) -> CompletionLog:
    """Append a completion."""
    return await CompletionLog.create(
        habit=habit,
        completed_at=completed_at,
        completed_on=completed_on,
        using_db=conn,
    )


async def count_for_habits(
    habit_ids: Iterable[int], conn: Optional[BaseDBAsyncClient] = None
) -> int:
    habit_ids = list(habit_ids)
    if not habit_ids:
        return 0
    return await CompletionLog.filter(habit_id__in=habit_ids).using_db(conn).count()


async def count_for_user(user_id: uuid.UUID) -> int:
    """Total completions over all habits of the user."""
    habit_ids = await Habit.filter(user_id=user_id).values_list("id", flat=True)
    return await count_for_habits(habit_ids)


async def delete_for_habits(
    habit_ids: Iterable[int], conn: Optional[BaseDBAsyncClient] = None
) -> int:
    """Delete every completion of `habit_ids`; returns row count."""
    habit_ids = list(habit_ids)
    if not habit_ids:
        return 0
    return await CompletionLog.filter(habit_id__in=habit_ids).using_db(conn).delete()
