"""Storage layer - dumb CRUD repositories without business logic."""

from . import completion_log_repo, habit_repo, user_repo

__all__ = ["completion_log_repo", "habit_repo", "user_repo"]
