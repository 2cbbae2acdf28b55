"""
Delete Habit Use Cases - soft delete (reversible) and permanent delete.

AICODE-NOTE: Permanent delete removes the completion logs explicitly before
the habit (the FK cascade would do it too) so the removed count can be
reported, all in one transaction.
"""

import logging
import uuid
from typing import Optional

from tortoise.transactions import in_transaction

from habitrpg.core.domain.habit_rules import (
    CONFIRMATION_TOKEN,
    can_soft_delete,
    is_confirmed,
    is_valid_habit_id,
    is_valid_user_id,
)
from habitrpg.core.errors import ErrorCategory, OperationRejected
from habitrpg.core.use_cases.results import HabitResult
from habitrpg.storage import completion_log_repo, habit_repo

logger = logging.getLogger(__name__)

CONFIRMATION_REQUIRED = (
    f"Permanent deletion must be confirmed with '{CONFIRMATION_TOKEN}'"
)


def _validate_ids(user_id: uuid.UUID, habit_id: int) -> Optional[HabitResult]:
    if not is_valid_user_id(user_id):
        return HabitResult.rejected("Invalid user ID", ErrorCategory.VALIDATION)
    if not is_valid_habit_id(habit_id):
        return HabitResult.rejected("Invalid habit ID", ErrorCategory.VALIDATION)
    return None


class SoftDeleteHabitUseCase:
    """Use-case for deactivating a habit."""

    async def execute(self, user_id: uuid.UUID, habit_id: int) -> HabitResult:
        invalid = _validate_ids(user_id, habit_id)
        if invalid:
            return invalid

        try:
            async with in_transaction() as conn:
                habit = await habit_repo.get_habit_for_user(habit_id, user_id, conn)
                if not habit:
                    raise OperationRejected("Habit not found", ErrorCategory.NOT_FOUND)
                if not can_soft_delete(habit):
                    raise OperationRejected(
                        "Habit is already deleted", ErrorCategory.BUSINESS_RULE
                    )
                await habit_repo.set_active(habit, False, conn)
        except OperationRejected as e:
            logger.warning(
                f"Soft delete of habit {habit_id} rejected for user {user_id}: {e.message}"
            )
            return HabitResult.rejected(e.message, e.category)

        logger.info(f"Soft deleted habit {habit_id} for user {user_id}")
        return HabitResult(success=True, message="Habit deleted", habit=habit, changed=True)


class PermanentlyDeleteHabitUseCase:
    """Use-case for removing a habit and its history for good."""

    async def execute(
        self, user_id: uuid.UUID, habit_id: int, confirmation: Optional[str]
    ) -> HabitResult:
        """
        Delete the habit and all of its completion logs.

        Args:
            user_id: Owner ID
            habit_id: Habit ID (active or soft-deleted)
            confirmation: Must be "DELETE" (case-insensitive, trimmed)
        """
        invalid = _validate_ids(user_id, habit_id)
        if invalid:
            return invalid
        if not is_confirmed(confirmation):
            return HabitResult.rejected(CONFIRMATION_REQUIRED, ErrorCategory.BUSINESS_RULE)

        try:
            async with in_transaction() as conn:
                habit = await habit_repo.get_habit_for_user(habit_id, user_id, conn)
                if not habit:
                    raise OperationRejected("Habit not found", ErrorCategory.NOT_FOUND)

                deleted_completions = await completion_log_repo.delete_for_habits(
                    [habit.id], conn
                )
                await habit_repo.delete_habits(user_id, [habit.id], conn)
        except OperationRejected as e:
            logger.warning(
                f"Permanent delete of habit {habit_id} rejected for user {user_id}: "
                f"{e.message}"
            )
            return HabitResult.rejected(e.message, e.category)

        logger.info(
            f"Permanently deleted habit {habit_id} and {deleted_completions} "
            f"completion logs for user {user_id}"
        )
        return HabitResult(
            success=True,
            message="Habit permanently deleted",
            changed=True,
            deleted_completions=deleted_completions,
        )
