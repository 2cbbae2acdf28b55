"""
Habit Repository - CRUD operations for the Habit model.

AICODE-NOTE: This is a dumb repository layer - only database access,
no business logic. Use-cases orchestrate these operations and decide
which of them share a transaction (via `conn`).
"""

import uuid
from collections.abc import Iterable
from datetime import datetime
from typing import Optional

from tortoise import BaseDBAsyncClient

from habitrpg.database.models import Habit, HabitDifficulty, HabitFrequency


async def get_habit_for_user(
    habit_id: int,
    user_id: uuid.UUID,
    conn: Optional[BaseDBAsyncClient] = None,
) -> Optional[Habit]:
    """Get a habit by ID scoped to its owner (active or not)."""
    return await Habit.filter(id=habit_id, user_id=user_id).using_db(conn).first()


async def get_active_habit_for_user(
    habit_id: int,
    user_id: uuid.UUID,
    conn: Optional[BaseDBAsyncClient] = None,
) -> Optional[Habit]:
    """Get an active habit by ID scoped to its owner, locked for update."""
    return (
        await Habit.filter(id=habit_id, user_id=user_id, is_active=True)
        .select_for_update()
        .using_db(conn)
        .first()
    )


async def get_habits(user_id: uuid.UUID, include_inactive: bool = False) -> list[Habit]:
    """
    Get habits of a user, newest first.

    Args:
        user_id: Owner ID
        include_inactive: Also return soft-deleted habits

    Returns:
        List of Habits (empty list if none)
    """
    query = Habit.filter(user_id=user_id)
    if not include_inactive:
        query = query.filter(is_active=True)
    return await query.order_by("-created_at", "-id").all()


async def get_inactive_habits(user_id: uuid.UUID) -> list[Habit]:
    """Get soft-deleted habits of a user, newest first."""
    return await Habit.filter(user_id=user_id, is_active=False).order_by(
        "-created_at", "-id"
    )


async def get_habits_by_ids(
    user_id: uuid.UUID,
    habit_ids: Iterable[int],
    conn: Optional[BaseDBAsyncClient] = None,
) -> list[Habit]:
    """Get the habits among `habit_ids` that belong to the user."""
    return (
        await Habit.filter(id__in=list(habit_ids), user_id=user_id)
        .using_db(conn)
        .order_by("id")
        .all()
    )


async def count_active(
    user_id: uuid.UUID, conn: Optional[BaseDBAsyncClient] = None
) -> int:
    """Number of active habits of a user."""
    return await Habit.filter(user_id=user_id, is_active=True).using_db(conn).count()


async def title_exists(
    user_id: uuid.UUID,
    title: str,
    exclude_habit_id: Optional[int] = None,
    conn: Optional[BaseDBAsyncClient] = None,
) -> bool:
    """
    Check whether an active habit of the user already uses `title`
    (case-insensitive, trimmed).
    """
    query = Habit.filter(user_id=user_id, is_active=True, title__iexact=title.strip())
    if exclude_habit_id is not None:
        query = query.exclude(id=exclude_habit_id)
    return await query.using_db(conn).exists()


async def get_active_titles(
    user_id: uuid.UUID, conn: Optional[BaseDBAsyncClient] = None
) -> list[str]:
    return (
        await Habit.filter(user_id=user_id, is_active=True)
        .using_db(conn)
        .values_list("title", flat=True)
    )


async def create_habit(
    user_id: uuid.UUID,
    title: str,
    description: Optional[str],
    frequency: HabitFrequency,
    difficulty: HabitDifficulty,
    conn: Optional[BaseDBAsyncClient] = None,
) -> Habit:
    """
    Create a new active habit.

    Args:
        user_id: Owner ID
        title: Normalized title
        description: Normalized description (None = empty)
        frequency: HabitFrequency
        difficulty: HabitDifficulty

    Returns:
        Created Habit instance
    """
    return await Habit.create(
        user_id=user_id,
        title=title,
        description=description,
        frequency=frequency,
        difficulty=difficulty,
        is_active=True,
        using_db=conn,
    )


async def set_active(
    habit: Habit, is_active: bool, conn: Optional[BaseDBAsyncClient] = None
) -> Habit:
    """Soft-delete (False) or restore (True) a habit."""
    habit.is_active = is_active
    await habit.save(using_db=conn, update_fields=["is_active"])
    return habit


async def set_active_bulk(
    user_id: uuid.UUID,
    habit_ids: Iterable[int],
    is_active: bool,
    conn: Optional[BaseDBAsyncClient] = None,
) -> int:
    """Flip is_active for the user's habits among `habit_ids`; returns row count."""
    return (
        await Habit.filter(id__in=list(habit_ids), user_id=user_id)
        .using_db(conn)
        .update(is_active=is_active)
    )


async def update_streak(
    habit: Habit,
    current_streak: int,
    best_streak: int,
    last_completed_at: datetime,
    conn: Optional[BaseDBAsyncClient] = None,
) -> Habit:
    """Write streak values computed by the domain."""
    habit.current_streak = current_streak
    habit.best_streak = best_streak
    habit.last_completed_at = last_completed_at
    await habit.save(
        using_db=conn,
        update_fields=["current_streak", "best_streak", "last_completed_at"],
    )
    return habit


async def save_habit(
    habit: Habit,
    update_fields: Optional[list[str]] = None,
    conn: Optional[BaseDBAsyncClient] = None,
) -> Habit:
    """Save habit changes."""
    await habit.save(using_db=conn, update_fields=update_fields)
    return habit


async def delete_habits(
    user_id: uuid.UUID,
    habit_ids: Iterable[int],
    conn: Optional[BaseDBAsyncClient] = None,
) -> int:
    """Delete the user's habits among `habit_ids`; returns row count."""
    return (
        await Habit.filter(id__in=list(habit_ids), user_id=user_id)
        .using_db(conn)
        .delete()
    )


async def get_streak_summary(user_id: uuid.UUID) -> list[tuple[int, int, bool]]:
    """(current_streak, best_streak, is_active) for every habit of the user."""
    return await Habit.filter(user_id=user_id).values_list(
        "current_streak", "best_streak", "is_active"
    )
