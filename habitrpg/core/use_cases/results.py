"""Result objects returned by the habit lifecycle use cases."""

from dataclasses import dataclass, field
from typing import Optional

from habitrpg.core.errors import ErrorCategory
from habitrpg.database.models import Habit


@dataclass
class HabitResult:
    """Result of a single-habit lifecycle operation."""

    success: bool
    message: str = ""
    error_category: Optional[ErrorCategory] = None
    habit: Optional[Habit] = None
    # UpdateHabit: False when the request changed nothing (no-op)
    changed: bool = False
    # PermanentlyDeleteHabit: number of completion logs removed
    deleted_completions: int = 0

    @classmethod
    def rejected(cls, message: str, category: ErrorCategory) -> "HabitResult":
        return cls(success=False, message=message, error_category=category)


@dataclass
class BulkResult:
    """Result of a bulk delete / restore."""

    success: bool
    message: str = ""
    error_category: Optional[ErrorCategory] = None
    processed_count: int = 0
    deleted_completions: int = 0
    not_found: list[int] = field(default_factory=list)

    @classmethod
    def rejected(cls, message: str, category: ErrorCategory) -> "BulkResult":
        return cls(success=False, message=message, error_category=category)
