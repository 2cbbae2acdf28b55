"""
Gamification Domain Rules - reward for a single habit completion.

AICODE-NOTE: Pure functions WITHOUT database access, WITHOUT side-effects.
The complete-habit use case loads User + Habit, calls calculate_reward()
and persists every value of the returned Reward in one commit.
"""

from dataclasses import dataclass
from datetime import date

from habitrpg.core.domain.leveling import (
    level_from_total_xp,
    xp_for_difficulty,
    xp_required_for_level,
)
from habitrpg.core.domain.streaks import calculate_streak
from habitrpg.database.models import HabitDifficulty


@dataclass(frozen=True)
class Reward:
    xp_gained: int
    old_level: int
    new_level: int
    new_xp: int
    new_total_xp: int
    new_streak: int
    new_best_streak: int

    @property
    def leveled_up(self) -> bool:
        return self.new_level > self.old_level


def calculate_reward(
    *,
    difficulty: HabitDifficulty | str,
    total_xp: int,
    current_streak: int,
    best_streak: int,
    last_completed_on: date | None,
    today: date,
) -> Reward:
    """
    Compute every value that changes when a habit is completed today.

    old_level is derived from total_xp rather than read from the user row,
    so a stale stored level can never produce a phantom level-up.
    """
    xp_gained = xp_for_difficulty(difficulty)
    total_before = max(0, total_xp)
    new_total_xp = total_before + xp_gained
    new_level = level_from_total_xp(new_total_xp)

    streak = calculate_streak(last_completed_on, current_streak, best_streak, today)

    return Reward(
        xp_gained=xp_gained,
        old_level=level_from_total_xp(total_before),
        new_level=new_level,
        new_xp=new_total_xp - xp_required_for_level(new_level),
        new_total_xp=new_total_xp,
        new_streak=streak.current_streak,
        new_best_streak=streak.best_streak,
    )


def reward_message(reward: Reward) -> str:
    message = f"Habit completed! +{reward.xp_gained} XP"
    if reward.leveled_up:
        message += f". Congratulations, you reached level {reward.new_level}!"
    return message
