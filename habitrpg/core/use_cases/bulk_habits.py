"""
Bulk Habit Use Cases - delete (soft or permanent) and restore up to 50 habits.

AICODE-NOTE: Ids that do not resolve to a habit of the caller are reported
in `not_found` instead of failing the batch. Everything else is
all-or-nothing: one transaction per batch, any rejection rolls back every row.
"""

import logging
import uuid
from collections.abc import Iterable
from typing import Optional

from tortoise.transactions import in_transaction

from habitrpg.core.domain.habit_rules import (
    CONFIRMATION_TOKEN,
    MAX_ACTIVE_HABITS,
    can_restore,
    find_title_clashes,
    is_confirmed,
    is_valid_user_id,
    normalize_ids,
    title_key,
    validate_bulk_ids,
    would_exceed_active_cap,
)
from habitrpg.core.errors import ErrorCategory, OperationRejected
from habitrpg.core.use_cases.results import BulkResult
from habitrpg.database.models import Habit
from habitrpg.storage import completion_log_repo, habit_repo, user_repo

logger = logging.getLogger(__name__)

BULK_CONFIRMATION_REQUIRED = (
    f"Permanent bulk deletion must be confirmed with '{CONFIRMATION_TOKEN}'"
)


def _missing_ids(requested: list[int], habits: list[Habit]) -> list[int]:
    found = {habit.id for habit in habits}
    return [habit_id for habit_id in requested if habit_id not in found]


class BulkDeleteHabitsUseCase:
    """Use-case for deleting many habits at once."""

    async def execute(
        self,
        user_id: uuid.UUID,
        habit_ids: Iterable[int],
        permanent: bool = False,
        confirmation: Optional[str] = None,
    ) -> BulkResult:
        """
        Delete the caller's habits among `habit_ids`.

        Args:
            user_id: Owner ID
            habit_ids: 1-50 positive habit IDs
            permanent: Remove habits and their logs instead of deactivating
            confirmation: Required ("DELETE") when permanent=True

        Returns:
            BulkResult with processed_count, deleted_completions and not_found
        """
        if not is_valid_user_id(user_id):
            return BulkResult.rejected("Invalid user ID", ErrorCategory.VALIDATION)

        ids = list(habit_ids)
        error = validate_bulk_ids(ids, "delete")
        if error:
            return BulkResult.rejected(error, ErrorCategory.VALIDATION)
        ids = normalize_ids(ids)

        if permanent and not is_confirmed(confirmation):
            return BulkResult.rejected(
                BULK_CONFIRMATION_REQUIRED, ErrorCategory.BUSINESS_RULE
            )

        deleted_completions = 0
        try:
            async with in_transaction() as conn:
                await user_repo.lock_user(user_id, conn)
                habits = await habit_repo.get_habits_by_ids(user_id, ids, conn)
                if not habits:
                    raise OperationRejected(
                        "No habits found to delete", ErrorCategory.NOT_FOUND
                    )
                found_ids = [habit.id for habit in habits]

                if permanent:
                    deleted_completions = await completion_log_repo.delete_for_habits(
                        found_ids, conn
                    )
                    await habit_repo.delete_habits(user_id, found_ids, conn)
                else:
                    await habit_repo.set_active_bulk(user_id, found_ids, False, conn)
        except OperationRejected as e:
            logger.warning(f"Bulk delete rejected for user {user_id}: {e.message}")
            return BulkResult.rejected(e.message, e.category)

        not_found = _missing_ids(ids, habits)

        if permanent:
            logger.info(
                f"Permanently bulk deleted {len(habits)} habits and "
                f"{deleted_completions} completion logs for user {user_id}"
            )
            message = f"Successfully deleted {len(habits)} habits permanently"
        else:
            logger.info(f"Soft bulk deleted {len(habits)} habits for user {user_id}")
            message = f"Successfully deactivated {len(habits)} habits"

        return BulkResult(
            success=True,
            message=message,
            processed_count=len(habits),
            deleted_completions=deleted_completions,
            not_found=not_found,
        )


class BulkRestoreHabitsUseCase:
    """Use-case for restoring many soft-deleted habits at once."""

    async def execute(self, user_id: uuid.UUID, habit_ids: Iterable[int]) -> BulkResult:
        """
        Restore the caller's inactive habits among `habit_ids`.

        Already active habits are ignored. The batch is rejected as a whole
        when it would push the user over the active cap or duplicate an
        active title.
        """
        if not is_valid_user_id(user_id):
            return BulkResult.rejected("Invalid user ID", ErrorCategory.VALIDATION)

        ids = list(habit_ids)
        error = validate_bulk_ids(ids, "restore")
        if error:
            return BulkResult.rejected(error, ErrorCategory.VALIDATION)
        ids = normalize_ids(ids)

        try:
            async with in_transaction() as conn:
                await user_repo.lock_user(user_id, conn)
                habits = await habit_repo.get_habits_by_ids(user_id, ids, conn)
                to_restore = [habit for habit in habits if can_restore(habit)]

                active_count = await habit_repo.count_active(user_id, conn)
                if would_exceed_active_cap(active_count, len(to_restore)):
                    raise OperationRejected(
                        "Restoring these habits would exceed the maximum limit of "
                        f"{MAX_ACTIVE_HABITS} active habits",
                        ErrorCategory.BUSINESS_RULE,
                    )

                active_titles = {
                    title_key(title)
                    for title in await habit_repo.get_active_titles(user_id, conn)
                }
                restore_titles = [habit.title for habit in to_restore]
                if find_title_clashes(restore_titles) or any(
                    title_key(title) in active_titles for title in restore_titles
                ):
                    raise OperationRejected(
                        "Restoring these habits would duplicate active habit titles",
                        ErrorCategory.BUSINESS_RULE,
                    )

                if to_restore:
                    await habit_repo.set_active_bulk(
                        user_id, [habit.id for habit in to_restore], True, conn
                    )
        except OperationRejected as e:
            logger.warning(f"Bulk restore rejected for user {user_id}: {e.message}")
            return BulkResult.rejected(e.message, e.category)

        logger.info(f"Bulk restored {len(to_restore)} habits for user {user_id}")
        return BulkResult(
            success=True,
            message=f"Successfully restored {len(to_restore)} habits",
            processed_count=len(to_restore),
            not_found=_missing_ids(ids, habits),
        )
