"""
Create Habit Use Case.

AICODE-NOTE: The active-habit cap and title uniqueness are checked in the
same transaction that inserts the habit, after locking the user row.
"""

import logging
import uuid
from typing import Optional

from tortoise.transactions import in_transaction

from habitrpg.core.domain.habit_rules import (
    MAX_ACTIVE_HABITS,
    is_valid_user_id,
    normalize_description,
    normalize_title,
    parse_difficulty,
    parse_frequency,
    validate_description,
    validate_title,
    would_exceed_active_cap,
)
from habitrpg.core.errors import ErrorCategory, OperationRejected
from habitrpg.core.use_cases.results import HabitResult
from habitrpg.database.models import HabitDifficulty, HabitFrequency
from habitrpg.storage import habit_repo, user_repo

logger = logging.getLogger(__name__)

MAX_HABITS_REACHED = f"Maximum number of habits ({MAX_ACTIVE_HABITS}) reached"
DUPLICATE_TITLE = "A habit with this title already exists"


class CreateHabitUseCase:
    """Use-case for creating a habit."""

    async def execute(
        self,
        user_id: uuid.UUID,
        title: str,
        description: Optional[str] = None,
        frequency: HabitFrequency | str = HabitFrequency.DAILY,
        difficulty: HabitDifficulty | str = HabitDifficulty.MEDIUM,
    ) -> HabitResult:
        if not is_valid_user_id(user_id):
            return HabitResult.rejected("Invalid user ID", ErrorCategory.VALIDATION)

        error = validate_title(title) or validate_description(description)
        if error:
            return HabitResult.rejected(error, ErrorCategory.VALIDATION)

        parsed_frequency = parse_frequency(frequency)
        if parsed_frequency is None:
            return HabitResult.rejected("Invalid habit frequency", ErrorCategory.VALIDATION)
        parsed_difficulty = parse_difficulty(difficulty)
        if parsed_difficulty is None:
            return HabitResult.rejected("Invalid habit difficulty", ErrorCategory.VALIDATION)

        clean_title = normalize_title(title)

        try:
            async with in_transaction() as conn:
                user = await user_repo.lock_user(user_id, conn)
                if not user:
                    raise OperationRejected("User not found", ErrorCategory.NOT_FOUND)

                active_count = await habit_repo.count_active(user_id, conn)
                if would_exceed_active_cap(active_count):
                    raise OperationRejected(MAX_HABITS_REACHED, ErrorCategory.BUSINESS_RULE)

                if await habit_repo.title_exists(user_id, clean_title, conn=conn):
                    raise OperationRejected(DUPLICATE_TITLE, ErrorCategory.BUSINESS_RULE)

                habit = await habit_repo.create_habit(
                    user_id=user_id,
                    title=clean_title,
                    description=normalize_description(description),
                    frequency=parsed_frequency,
                    difficulty=parsed_difficulty,
                    conn=conn,
                )
        except OperationRejected as e:
            logger.warning(f"Create habit rejected for user {user_id}: {e.message}")
            return HabitResult.rejected(e.message, e.category)

        logger.info(f"Created habit {habit.id} for user {user_id}")
        return HabitResult(success=True, message="Habit created", habit=habit, changed=True)
