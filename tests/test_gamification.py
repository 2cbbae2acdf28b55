from datetime import date, datetime, timedelta, timezone

from habitrpg.core.domain.gamification import calculate_reward, reward_message
from habitrpg.core.domain.streaks import calculate_streak, to_utc_date
from habitrpg.database.models import HabitDifficulty

TODAY = date(2026, 3, 10)


def test_streak_continues_from_yesterday() -> None:
    update = calculate_streak(TODAY - timedelta(days=1), 5, 5, TODAY)
    assert update.current_streak == 6
    assert update.best_streak == 6
    assert update.continued


def test_streak_resets_after_gap() -> None:
    update = calculate_streak(TODAY - timedelta(days=3), 5, 8, TODAY)
    assert update.current_streak == 1
    assert update.best_streak == 8
    assert not update.continued


def test_first_completion_starts_streak() -> None:
    update = calculate_streak(None, 0, 0, TODAY)
    assert update.current_streak == 1
    assert update.best_streak == 1


def test_to_utc_date_converts_offsets() -> None:
    """23:30 at UTC-2 is already the next UTC day."""
    moment = datetime(2026, 3, 9, 23, 30, tzinfo=timezone(timedelta(hours=-2)))
    assert to_utc_date(moment) == TODAY


def test_reward_levels_up_from_90_xp() -> None:
    reward = calculate_reward(
        difficulty=HabitDifficulty.MEDIUM,
        total_xp=90,
        current_streak=0,
        best_streak=0,
        last_completed_on=None,
        today=TODAY,
    )
    assert reward.xp_gained == 10
    assert reward.leveled_up
    assert reward.old_level == 1
    assert reward.new_level == 2
    assert reward.new_total_xp == 100
    assert reward.new_xp == 0
    assert "reached level 2" in reward_message(reward)


def test_reward_without_level_up() -> None:
    reward = calculate_reward(
        difficulty=HabitDifficulty.EASY,
        total_xp=10,
        current_streak=2,
        best_streak=4,
        last_completed_on=TODAY - timedelta(days=1),
        today=TODAY,
    )
    assert not reward.leveled_up
    assert reward.new_total_xp == 15
    assert reward.new_xp == 15
    assert reward.new_streak == 3
    assert reward.new_best_streak == 4
    assert reward_message(reward) == "Habit completed! +5 XP"
