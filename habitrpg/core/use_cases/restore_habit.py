"""
Restore Habit Use Case - bring a soft-deleted habit back.
"""

import logging
import uuid

from tortoise.transactions import in_transaction

from habitrpg.core.domain.habit_rules import (
    can_restore,
    is_valid_habit_id,
    is_valid_user_id,
    would_exceed_active_cap,
)
from habitrpg.core.errors import ErrorCategory, OperationRejected
from habitrpg.core.use_cases.create_habit import DUPLICATE_TITLE, MAX_HABITS_REACHED
from habitrpg.core.use_cases.results import HabitResult
from habitrpg.storage import habit_repo, user_repo

logger = logging.getLogger(__name__)


class RestoreHabitUseCase:
    """Use-case for reactivating a habit."""

    async def execute(self, user_id: uuid.UUID, habit_id: int) -> HabitResult:
        """
        Restore a soft-deleted habit.

        Rules:
        - habit must currently be inactive
        - the user must stay within the active-habit cap
        - its title must not clash with an active habit
        """
        if not is_valid_user_id(user_id):
            return HabitResult.rejected("Invalid user ID", ErrorCategory.VALIDATION)
        if not is_valid_habit_id(habit_id):
            return HabitResult.rejected("Invalid habit ID", ErrorCategory.VALIDATION)

        try:
            async with in_transaction() as conn:
                await user_repo.lock_user(user_id, conn)
                habit = await habit_repo.get_habit_for_user(habit_id, user_id, conn)
                if not habit:
                    raise OperationRejected("Habit not found", ErrorCategory.NOT_FOUND)
                if not can_restore(habit):
                    raise OperationRejected(
                        "Habit is already active", ErrorCategory.BUSINESS_RULE
                    )

                active_count = await habit_repo.count_active(user_id, conn)
                if would_exceed_active_cap(active_count):
                    raise OperationRejected(MAX_HABITS_REACHED, ErrorCategory.BUSINESS_RULE)

                if await habit_repo.title_exists(user_id, habit.title, conn=conn):
                    raise OperationRejected(DUPLICATE_TITLE, ErrorCategory.BUSINESS_RULE)

                await habit_repo.set_active(habit, True, conn)
        except OperationRejected as e:
            logger.warning(
                f"Restore of habit {habit_id} rejected for user {user_id}: {e.message}"
            )
            return HabitResult.rejected(e.message, e.category)

        logger.info(f"Restored habit {habit_id} for user {user_id}")
        return HabitResult(success=True, message="Habit restored", habit=habit, changed=True)
