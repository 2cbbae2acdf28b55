"""
Pydantic schemas for API requests and responses.
"""

import uuid
from datetime import date, datetime

from pydantic import BaseModel, ConfigDict, Field

from habitrpg.database.models import HabitDifficulty, HabitFrequency

# ============ Auth Schemas ============


class RegisterRequest(BaseModel):
    # Plain str so address problems surface as 400 with a readable message
    username: str = ""
    email: str = ""
    password: str = ""


class LoginRequest(BaseModel):
    """Login with email (or username) and password."""

    email: str = ""
    password: str = ""


class AuthResponse(BaseModel):
    message: str
    token: str
    user_id: uuid.UUID
    username: str


# ============ User Schemas ============


class UserProfileResponse(BaseModel):
    """User profile with progress and habit stats."""

    id: uuid.UUID
    username: str
    email: str
    created_at: datetime

    # Gamification
    level: int
    xp: int
    total_xp: int
    xp_to_next_level: int
    xp_required_for_next_level: int

    # Habits
    active_habits_count: int
    total_completions: int
    longest_streak: int
    current_active_streaks: int


class UpdateProfileRequest(BaseModel):
    """Omitted or empty fields are left unchanged."""

    username: str | None = None


class UserStatsResponse(BaseModel):
    """Completion stats over the last `days` UTC days."""

    total_completions: int
    completion_rate: float
    current_streak: int
    longest_streak_in_period: int
    average_completions_per_day: float
    daily_completions: dict[str, int]
    period_start: date
    period_end: date


# ============ Habit Schemas ============


class HabitResponse(BaseModel):
    """Habit item response."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    title: str
    description: str | None = None
    frequency: HabitFrequency
    difficulty: HabitDifficulty
    current_streak: int
    best_streak: int
    last_completed_at: datetime | None = None
    is_active: bool
    can_complete_today: bool = False
    created_at: datetime


# AICODE-NOTE: Request enums are plain strings; the use cases reject unknown
# values with a 400 and a readable message instead of a 422.


class CreateHabitRequest(BaseModel):
    title: str = ""
    description: str | None = None
    frequency: str = HabitFrequency.DAILY.value
    difficulty: str = HabitDifficulty.MEDIUM.value


class UpdateHabitRequest(BaseModel):
    """Partial update: omitted fields stay unchanged."""

    title: str | None = None
    description: str | None = None
    frequency: str | None = None
    difficulty: str | None = None


class PermanentDeleteRequest(BaseModel):
    confirmation_text: str | None = None


class PermanentDeleteResponse(BaseModel):
    message: str
    deleted_completions: int


class BulkDeleteRequest(BaseModel):
    habit_ids: list[int] = Field(default_factory=list)
    is_permanent: bool = False
    confirmation_text: str | None = None


class BulkDeleteResponse(BaseModel):
    message: str
    processed_count: int
    deleted_completions: int
    not_found: list[int]


class BulkRestoreRequest(BaseModel):
    habit_ids: list[int] = Field(default_factory=list)


class BulkRestoreResponse(BaseModel):
    message: str
    restored_count: int
    not_found: list[int]


# ============ Reward Schemas ============


class RewardResponse(BaseModel):
    """Response after completing a habit."""

    success: bool
    message: str
    xp_gained: int
    leveled_up: bool
    new_level: int
    new_xp: int
    new_total_xp: int
    new_streak: int
    updated_habit: HabitResponse | None = None
