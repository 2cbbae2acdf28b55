import uuid

from habitrpg.core.domain.habit_rules import (
    find_title_clashes,
    is_confirmed,
    is_valid_habit_id,
    is_valid_user_id,
    normalize_description,
    normalize_ids,
    parse_difficulty,
    validate_bulk_ids,
    validate_password,
    validate_title,
    validate_username,
    would_exceed_active_cap,
)
from habitrpg.database.models import HabitDifficulty


def test_identifiers() -> None:
    assert is_valid_user_id(uuid.uuid4())
    assert not is_valid_user_id(uuid.UUID(int=0))
    assert not is_valid_user_id("not-a-uuid")
    assert is_valid_habit_id(1)
    assert not is_valid_habit_id(0)
    assert not is_valid_habit_id(-5)
    assert not is_valid_habit_id(True)


def test_bulk_ids_rules() -> None:
    assert validate_bulk_ids([], "delete") == "At least one habit ID is required"
    assert (
        validate_bulk_ids(list(range(1, 52)), "restore")
        == "Cannot restore more than 50 habits at once"
    )
    assert (
        validate_bulk_ids([1, 0], "delete")
        == "All habit IDs must be valid positive integers"
    )
    assert validate_bulk_ids(list(range(1, 51)), "delete") is None
    assert normalize_ids([3, 1, 3, 2, 1]) == [3, 1, 2]


def test_confirmation_token() -> None:
    assert is_confirmed("DELETE")
    assert is_confirmed("  delete ")
    assert not is_confirmed("DELET")
    assert not is_confirmed(None)


def test_active_cap() -> None:
    assert not would_exceed_active_cap(99)
    assert would_exceed_active_cap(100)
    assert would_exceed_active_cap(95, 6)
    assert not would_exceed_active_cap(95, 5)


def test_title_and_description() -> None:
    assert validate_title("   ") == "Habit title is required"
    assert validate_title("", required=False) == "Habit title cannot be empty"
    assert validate_title("x" * 201) == "Habit title cannot exceed 200 characters"
    assert validate_title("  Read  ") is None
    assert normalize_description("   ") is None
    assert normalize_description(" notes ") == "notes"
    assert find_title_clashes(["Run", " run ", "Read"]) == {"run"}


def test_parse_difficulty() -> None:
    assert parse_difficulty("easy") is HabitDifficulty.EASY
    assert parse_difficulty(HabitDifficulty.HARD) is HabitDifficulty.HARD
    assert parse_difficulty("extreme") is None


def test_account_rules() -> None:
    assert validate_username("ab") is not None
    assert validate_username("bad name!") is not None
    assert validate_username("good_name-1") is None
    assert validate_password("short") is not None
    assert validate_password("onlyletters") is not None
    assert validate_password("secret1") is None
