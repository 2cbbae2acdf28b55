"""
Habit Rules Domain - pure validation rules for the habit lifecycle.

AICODE-NOTE: Pure functions WITHOUT database access, WITHOUT side-effects.
Validators return an error message or None; use cases turn the message
into a rejected result.
"""

import re
import uuid
from collections.abc import Iterable
from enum import Enum
from typing import Optional, TypeVar

from habitrpg.database.models import Habit, HabitDifficulty, HabitFrequency

MAX_ACTIVE_HABITS = 100
MAX_BULK_IDS = 50
CONFIRMATION_TOKEN = "DELETE"

TITLE_MAX_LENGTH = 200
DESCRIPTION_MAX_LENGTH = 1000

USERNAME_MIN_LENGTH = 3
USERNAME_MAX_LENGTH = 50
USERNAME_PATTERN = re.compile(r"^[a-zA-Z0-9_-]+$")
PASSWORD_MIN_LENGTH = 6
PASSWORD_MAX_LENGTH = 100

E = TypeVar("E", bound=Enum)


# ============ Identifiers ============


def is_valid_user_id(user_id: object) -> bool:
    """A user id is a non-nil UUID."""
    return isinstance(user_id, uuid.UUID) and user_id.int != 0


def is_valid_habit_id(habit_id: object) -> bool:
    return isinstance(habit_id, int) and not isinstance(habit_id, bool) and habit_id > 0


def normalize_ids(habit_ids: Iterable[int]) -> list[int]:
    """Drop duplicates, keep request order."""
    return list(dict.fromkeys(habit_ids))


def validate_bulk_ids(habit_ids: list[int], action: str) -> Optional[str]:
    """
    Rules for bulk requests:
    - at least one id
    - at most MAX_BULK_IDS ids
    - every id is a positive integer
    """
    if not habit_ids:
        return "At least one habit ID is required"
    if len(habit_ids) > MAX_BULK_IDS:
        return f"Cannot {action} more than {MAX_BULK_IDS} habits at once"
    if not all(is_valid_habit_id(habit_id) for habit_id in habit_ids):
        return "All habit IDs must be valid positive integers"
    return None


# ============ Fields ============


def normalize_title(title: str) -> str:
    return title.strip()


def title_key(title: str) -> str:
    """Comparison key for case-insensitive title uniqueness."""
    return normalize_title(title).lower()


def normalize_description(description: Optional[str]) -> Optional[str]:
    if description is None or not description.strip():
        return None
    return description.strip()


def validate_title(title: Optional[str], *, required: bool = True) -> Optional[str]:
    if title is None or not title.strip():
        return "Habit title is required" if required else "Habit title cannot be empty"
    if len(normalize_title(title)) > TITLE_MAX_LENGTH:
        return f"Habit title cannot exceed {TITLE_MAX_LENGTH} characters"
    return None


def validate_description(description: Optional[str]) -> Optional[str]:
    if description and len(description.strip()) > DESCRIPTION_MAX_LENGTH:
        return f"Habit description cannot exceed {DESCRIPTION_MAX_LENGTH} characters"
    return None


def parse_enum(enum_type: type[E], value: object) -> Optional[E]:
    """Coerce a raw value into enum_type, None when it is not a member."""
    if isinstance(value, enum_type):
        return value
    try:
        return enum_type(value)
    except ValueError:
        return None


def parse_frequency(value: object) -> Optional[HabitFrequency]:
    return parse_enum(HabitFrequency, value)


def parse_difficulty(value: object) -> Optional[HabitDifficulty]:
    return parse_enum(HabitDifficulty, value)


# ============ Lifecycle ============


def is_confirmed(confirmation: Optional[str]) -> bool:
    """Irreversible operations need the literal token (case-insensitive, trimmed)."""
    if confirmation is None:
        return False
    return confirmation.strip().upper() == CONFIRMATION_TOKEN


def would_exceed_active_cap(active_count: int, additional: int = 1) -> bool:
    return active_count + additional > MAX_ACTIVE_HABITS


def can_soft_delete(habit: Habit) -> bool:
    return habit.is_active


def can_restore(habit: Habit) -> bool:
    return not habit.is_active


def can_update(habit: Habit) -> bool:
    return habit.is_active


def find_title_clashes(titles: Iterable[str]) -> set[str]:
    """Title keys that appear more than once in `titles`."""
    seen: set[str] = set()
    clashes: set[str] = set()
    for title in titles:
        key = title_key(title)
        if key in seen:
            clashes.add(key)
        seen.add(key)
    return clashes


# ============ Accounts ============


def validate_username(username: Optional[str]) -> Optional[str]:
    if not username or not username.strip():
        return "Username is required"
    username = username.strip()
    if not USERNAME_MIN_LENGTH <= len(username) <= USERNAME_MAX_LENGTH:
        return (
            f"Username must be between {USERNAME_MIN_LENGTH} "
            f"and {USERNAME_MAX_LENGTH} characters"
        )
    if not USERNAME_PATTERN.match(username):
        return "Username can only contain letters, numbers, hyphens, and underscores"
    return None


def validate_password(password: Optional[str]) -> Optional[str]:
    if not password:
        return "Password is required"
    if len(password) < PASSWORD_MIN_LENGTH:
        return f"Password must be at least {PASSWORD_MIN_LENGTH} characters long"
    if len(password) > PASSWORD_MAX_LENGTH:
        return f"Password cannot exceed {PASSWORD_MAX_LENGTH} characters"
    if not (any(c.isalpha() for c in password) and any(c.isdigit() for c in password)):
        return "Password must contain at least one letter and one number"
    return None


def normalize_email(email: str) -> str:
    return email.strip().lower()
