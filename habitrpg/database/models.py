"""
Database models for HabitRPG.

Structure:
- User: player account with XP / level progress
- Habit: a habit owned by a user (active or soft-deleted)
- CompletionLog: one completion of a habit (at most one per UTC day)
"""

import uuid
from enum import Enum

from tortoise import fields, models


class HabitFrequency(str, Enum):
    DAILY = "daily"
    WEEKLY = "weekly"


class HabitDifficulty(str, Enum):
    EASY = "easy"
    MEDIUM = "medium"
    HARD = "hard"


class User(models.Model):
    """Player account."""

    id = fields.UUIDField(primary_key=True, default=uuid.uuid4)
    username = fields.CharField(max_length=50, unique=True)
    # Stored lower-cased, so uniqueness is case-insensitive
    email = fields.CharField(max_length=255, unique=True, db_index=True)
    password_hash = fields.CharField(max_length=255)

    # Progress
    level = fields.IntField(default=1)
    xp = fields.IntField(default=0)  # progress inside the current level
    total_xp = fields.IntField(default=0)

    created_at = fields.DatetimeField(auto_now_add=True)

    habits: fields.ReverseRelation["Habit"]

    class Meta:
        table = "users"


class Habit(models.Model):
    """Habit owned by a user."""

    id = fields.IntField(primary_key=True)
    user: fields.ForeignKeyRelation[User] = fields.ForeignKeyField(
        "models.User", related_name="habits", on_delete=fields.CASCADE
    )
    user_id: uuid.UUID  # Tortoise creates the FK column attribute

    title = fields.CharField(max_length=200)
    description = fields.TextField(null=True)

    frequency = fields.CharEnumField(
        HabitFrequency, max_length=10, default=HabitFrequency.DAILY
    )
    difficulty = fields.CharEnumField(
        HabitDifficulty, max_length=10, default=HabitDifficulty.MEDIUM
    )

    # False = soft-deleted
    is_active = fields.BooleanField(default=True, db_index=True)

    current_streak = fields.IntField(default=0)
    best_streak = fields.IntField(default=0)
    last_completed_at = fields.DatetimeField(null=True)

    created_at = fields.DatetimeField(auto_now_add=True)

    completion_logs: fields.ReverseRelation["CompletionLog"]

    class Meta:
        table = "habits"
        ordering = ["-created_at", "-id"]


class CompletionLog(models.Model):
    """
    A single completion of a habit.

    completed_on is the UTC date of completed_at; the unique pair
    (habit, completed_on) backs up the once-per-day rule of the reward engine.
    """

    id = fields.IntField(primary_key=True)
    habit: fields.ForeignKeyRelation[Habit] = fields.ForeignKeyField(
        "models.Habit", related_name="completion_logs", on_delete=fields.CASCADE
    )
    habit_id: int

    completed_at = fields.DatetimeField()
    completed_on = fields.DateField()

    class Meta:
        table = "completion_logs"
        unique_together = (("habit", "completed_on"),)
