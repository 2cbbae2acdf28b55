"""
Complete Habit Use Case - the reward engine.

AICODE-NOTE: Use-case combines repositories + domain rules.
Everything between loading the habit and writing the reward happens in
ONE transaction: either the completion log, the user's XP and the habit's
streak are all committed, or none of them is.
"""

import logging
import uuid
from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional

from tortoise import BaseDBAsyncClient
from tortoise.exceptions import IntegrityError
from tortoise.transactions import in_transaction

from habitrpg.core.domain.gamification import Reward, calculate_reward, reward_message
from habitrpg.core.domain.habit_rules import is_valid_habit_id, is_valid_user_id
from habitrpg.core.domain.streaks import to_utc_date, utc_now, utc_today
from habitrpg.core.errors import ErrorCategory, OperationRejected
from habitrpg.database.models import Habit
from habitrpg.storage import completion_log_repo, habit_repo, user_repo

logger = logging.getLogger(__name__)

ALREADY_COMPLETED = "Habit already completed today"
NOT_FOUND_OR_INACTIVE = "Habit not found or inactive"


@dataclass
class RewardResult:
    """Result of completing a habit."""

    success: bool
    message: str = ""
    error_category: Optional[ErrorCategory] = None
    xp_gained: int = 0
    leveled_up: bool = False
    new_level: int = 0
    new_xp: int = 0
    new_total_xp: int = 0
    new_streak: int = 0
    updated_habit: Optional[Habit] = None

    @classmethod
    def rejected(cls, message: str, category: ErrorCategory) -> "RewardResult":
        return cls(success=False, message=message, error_category=category)


class CompleteHabitUseCase:
    """Use-case for completing a habit once per UTC day."""

    async def execute(
        self,
        user_id: uuid.UUID,
        habit_id: int,
        now: Optional[datetime] = None,
    ) -> RewardResult:
        """
        Complete a habit and award XP.

        Args:
            user_id: Owner ID
            habit_id: Habit ID
            now: Completion moment (for tests, defaults to current UTC time)

        Returns:
            RewardResult with the outcome of the operation
        """
        if not is_valid_user_id(user_id):
            return RewardResult.rejected("Invalid user ID", ErrorCategory.VALIDATION)
        if not is_valid_habit_id(habit_id):
            return RewardResult.rejected("Invalid habit ID", ErrorCategory.VALIDATION)

        if now is None:
            now = utc_now()
        today = to_utc_date(now)

        try:
            async with in_transaction() as conn:
                habit, reward = await self._complete(conn, user_id, habit_id, now, today)
        except OperationRejected as e:
            logger.warning(
                f"Failed to complete habit {habit_id} for user {user_id}: {e.message}"
            )
            return RewardResult.rejected(e.message, e.category)
        except IntegrityError:
            # A concurrent request logged today's completion first
            logger.warning(
                f"Concurrent completion of habit {habit_id} for user {user_id} rejected"
            )
            return RewardResult.rejected(ALREADY_COMPLETED, ErrorCategory.BUSINESS_RULE)

        logger.info(
            f"User {user_id} completed habit {habit_id}: +{reward.xp_gained} XP, "
            f"level {reward.new_level}, streak {reward.new_streak}"
        )

        return RewardResult(
            success=True,
            message=reward_message(reward),
            xp_gained=reward.xp_gained,
            leveled_up=reward.leveled_up,
            new_level=reward.new_level,
            new_xp=reward.new_xp,
            new_total_xp=reward.new_total_xp,
            new_streak=reward.new_streak,
            updated_habit=habit,
        )

    async def _complete(
        self,
        conn: BaseDBAsyncClient,
        user_id: uuid.UUID,
        habit_id: int,
        now: datetime,
        today: date,
    ) -> tuple[Habit, Reward]:
        # 1. Load both aggregates (user row first, same lock order as lifecycle ops)
        user = await user_repo.lock_user(user_id, conn)
        habit = await habit_repo.get_active_habit_for_user(habit_id, user_id, conn)
        if not user or not habit:
            raise OperationRejected(NOT_FOUND_OR_INACTIVE, ErrorCategory.NOT_FOUND)

        # 2. Once per UTC day
        if await completion_log_repo.is_completed_on(habit.id, today, conn):
            raise OperationRejected(ALREADY_COMPLETED, ErrorCategory.BUSINESS_RULE)

        # 3. Compute everything (domain)
        last = await completion_log_repo.get_last_completion_before(habit.id, today, conn)
        reward = calculate_reward(
            difficulty=habit.difficulty,
            total_xp=user.total_xp,
            current_streak=habit.current_streak,
            best_streak=habit.best_streak,
            last_completed_on=last.completed_on if last else None,
            today=today,
        )

        # 4. Persist (repositories)
        await completion_log_repo.create_log(habit, now, today, conn)
        await user_repo.update_progress(
            user, reward.new_level, reward.new_xp, reward.new_total_xp, conn
        )
        await habit_repo.update_streak(
            habit, reward.new_streak, reward.new_best_streak, now, conn
        )
        return habit, reward


async def can_complete_today(habit_id: int, today: Optional[date] = None) -> bool:
    """Whether the habit has no completion yet on the (UTC) day."""
    if not is_valid_habit_id(habit_id):
        return False
    if today is None:
        today = utc_today()
    return not await completion_log_repo.is_completed_on(habit_id, today)
