"""
Update Habit Use Case - partial update of an active habit.
"""

import logging
import uuid
from typing import Optional

from tortoise.transactions import in_transaction

from habitrpg.core.domain.habit_rules import (
    can_update,
    is_valid_habit_id,
    is_valid_user_id,
    normalize_description,
    normalize_title,
    parse_difficulty,
    parse_frequency,
    validate_description,
    validate_title,
)
from habitrpg.core.errors import ErrorCategory, OperationRejected
from habitrpg.core.use_cases.create_habit import DUPLICATE_TITLE
from habitrpg.core.use_cases.results import HabitResult
from habitrpg.database.models import HabitDifficulty, HabitFrequency
from habitrpg.storage import habit_repo

logger = logging.getLogger(__name__)


class UpdateHabitUseCase:
    """Use-case for editing title / description / frequency / difficulty."""

    async def execute(
        self,
        user_id: uuid.UUID,
        habit_id: int,
        title: Optional[str] = None,
        description: Optional[str] = None,
        frequency: HabitFrequency | str | None = None,
        difficulty: HabitDifficulty | str | None = None,
    ) -> HabitResult:
        """
        Apply the given fields; None means "leave unchanged".

        An empty description clears it. A request that changes nothing
        succeeds with changed=False and writes nothing.
        """
        if not is_valid_user_id(user_id):
            return HabitResult.rejected("Invalid user ID", ErrorCategory.VALIDATION)
        if not is_valid_habit_id(habit_id):
            return HabitResult.rejected("Invalid habit ID", ErrorCategory.VALIDATION)

        if title is not None:
            error = validate_title(title, required=False)
            if error:
                return HabitResult.rejected(error, ErrorCategory.VALIDATION)
        error = validate_description(description)
        if error:
            return HabitResult.rejected(error, ErrorCategory.VALIDATION)

        parsed_frequency = None
        if frequency is not None:
            parsed_frequency = parse_frequency(frequency)
            if parsed_frequency is None:
                return HabitResult.rejected(
                    "Invalid habit frequency", ErrorCategory.VALIDATION
                )
        parsed_difficulty = None
        if difficulty is not None:
            parsed_difficulty = parse_difficulty(difficulty)
            if parsed_difficulty is None:
                return HabitResult.rejected(
                    "Invalid habit difficulty", ErrorCategory.VALIDATION
                )

        try:
            async with in_transaction() as conn:
                habit = await habit_repo.get_habit_for_user(habit_id, user_id, conn)
                if not habit:
                    raise OperationRejected("Habit not found", ErrorCategory.NOT_FOUND)
                if not can_update(habit):
                    raise OperationRejected(
                        "Cannot update inactive habit", ErrorCategory.BUSINESS_RULE
                    )

                changed_fields: list[str] = []

                if title is not None and normalize_title(title) != habit.title:
                    new_title = normalize_title(title)
                    if await habit_repo.title_exists(
                        user_id, new_title, exclude_habit_id=habit.id, conn=conn
                    ):
                        raise OperationRejected(
                            DUPLICATE_TITLE, ErrorCategory.BUSINESS_RULE
                        )
                    habit.title = new_title
                    changed_fields.append("title")

                if description is not None:
                    new_description = normalize_description(description)
                    if new_description != habit.description:
                        habit.description = new_description
                        changed_fields.append("description")

                if parsed_frequency is not None and parsed_frequency != habit.frequency:
                    habit.frequency = parsed_frequency
                    changed_fields.append("frequency")

                if parsed_difficulty is not None and parsed_difficulty != habit.difficulty:
                    habit.difficulty = parsed_difficulty
                    changed_fields.append("difficulty")

                if changed_fields:
                    await habit_repo.save_habit(habit, changed_fields, conn)
        except OperationRejected as e:
            logger.warning(
                f"Update of habit {habit_id} rejected for user {user_id}: {e.message}"
            )
            return HabitResult.rejected(e.message, e.category)

        if not changed_fields:
            return HabitResult(success=True, message="No changes", habit=habit)

        logger.info(
            f"Updated habit {habit_id} for user {user_id}: {', '.join(changed_fields)}"
        )
        return HabitResult(success=True, message="Habit updated", habit=habit, changed=True)
