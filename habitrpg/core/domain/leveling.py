"""
Leveling Domain Rules - pure functions mapping XP to levels.

AICODE-NOTE: Pure functions WITHOUT database access and WITHOUT side-effects.
The curve is linear: every level costs XP_PER_LEVEL more lifetime XP.
"""

from dataclasses import dataclass

from habitrpg.database.models import HabitDifficulty

MAX_LEVEL = 1000
XP_PER_LEVEL = 100

XP_BY_DIFFICULTY = {
    HabitDifficulty.EASY: 5,
    HabitDifficulty.MEDIUM: 10,
    HabitDifficulty.HARD: 20,
}


@dataclass(frozen=True)
class LevelProgress:
    """Where a lifetime XP total sits on the leveling curve."""

    level: int
    xp: int
    total_xp: int
    xp_to_next_level: int
    xp_required_for_next_level: int


def xp_for_difficulty(difficulty: HabitDifficulty | str) -> int:
    """
    XP reward for completing a habit of the given difficulty.

    Raises ValueError for anything outside HabitDifficulty.
    """
    return XP_BY_DIFFICULTY[HabitDifficulty(difficulty)]


def xp_required_for_level(level: int) -> int:
    """
    Lifetime XP needed to reach `level`.

    threshold(L) = (L - 1) * 100 for L in [1, MAX_LEVEL].
    - level < 1 is treated as "before level 1" and returns the first
      level-up cost (100)
    - level > MAX_LEVEL is clamped to MAX_LEVEL
    """
    if level < 1:
        return XP_PER_LEVEL
    level = min(level, MAX_LEVEL)
    return (level - 1) * XP_PER_LEVEL


def level_from_total_xp(total_xp: int) -> int:
    """
    Highest level whose threshold is <= total_xp.

    Examples:
    - 0-99 XP = Level 1
    - 100-199 XP = Level 2
    - 99900+ XP = Level 1000 (max)
    """
    if total_xp <= 0:
        return 1
    return min(MAX_LEVEL, total_xp // XP_PER_LEVEL + 1)


def level_progress(total_xp: int) -> LevelProgress:
    """Level, in-level XP and distance to the next level for a total."""
    total_xp = max(0, total_xp)
    level = level_from_total_xp(total_xp)
    floor = xp_required_for_level(level)

    if level >= MAX_LEVEL:
        to_next = 0
        span = 0
    else:
        ceiling = xp_required_for_level(level + 1)
        to_next = ceiling - total_xp
        span = ceiling - floor

    return LevelProgress(
        level=level,
        xp=total_xp - floor,
        total_xp=total_xp,
        xp_to_next_level=to_next,
        xp_required_for_next_level=span,
    )
