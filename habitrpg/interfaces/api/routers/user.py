"""
User API router.

Endpoints:
- GET /api/me (alias GET /api/user/profile) - Get current user profile
- PATCH /api/user/profile - Change username
"""

import uuid

from fastapi import APIRouter, Depends, HTTPException, Response, status

from habitrpg.core.domain.leveling import level_progress
from habitrpg.core.errors import ErrorCategory
from habitrpg.core.use_cases.update_profile import UpdateProfileUseCase
from habitrpg.database.models import User
from habitrpg.interfaces.api.auth import get_current_user, get_current_user_id
from habitrpg.interfaces.api.schemas import UpdateProfileRequest, UserProfileResponse
from habitrpg.storage import completion_log_repo, habit_repo

router = APIRouter(prefix="/api", tags=["user"])


@router.get("/me", response_model=UserProfileResponse)
@router.get("/user/profile", response_model=UserProfileResponse)
async def get_me(user: User = Depends(get_current_user)) -> UserProfileResponse:
    """
    Get current user profile.

    Includes:
    - Gamification (level, XP inside the level, distance to next level)
    - Habit stats (active habits, completions, streaks)
    """
    progress = level_progress(user.total_xp)

    # AICODE-NOTE: One small query per habit list, aggregation in Python
    streaks = await habit_repo.get_streak_summary(user.id)
    active_habits_count = sum(1 for _, _, is_active in streaks if is_active)
    longest_streak = max((best for _, best, _ in streaks), default=0)
    current_active_streaks = sum(
        1 for current, _, is_active in streaks if is_active and current > 0
    )

    total_completions = await completion_log_repo.count_for_user(user.id)

    return UserProfileResponse(
        id=user.id,
        username=user.username,
        email=user.email,
        created_at=user.created_at,
        level=user.level,
        xp=user.xp,
        total_xp=user.total_xp,
        xp_to_next_level=progress.xp_to_next_level,
        xp_required_for_next_level=progress.xp_required_for_next_level,
        active_habits_count=active_habits_count,
        total_completions=total_completions,
        longest_streak=longest_streak,
        current_active_streaks=current_active_streaks,
    )


@router.patch("/user/profile", status_code=status.HTTP_204_NO_CONTENT)
async def update_profile(
    request: UpdateProfileRequest,
    user_id: uuid.UUID = Depends(get_current_user_id),
) -> Response:
    """Change username; omitted/empty fields are left as they are."""
    result = await UpdateProfileUseCase().execute(user_id, username=request.username)
    if not result.success:
        raise HTTPException(
            status_code=(
                status.HTTP_404_NOT_FOUND
                if result.error_category == ErrorCategory.NOT_FOUND
                else status.HTTP_400_BAD_REQUEST
            ),
            detail=result.message,
        )
    return Response(status_code=status.HTTP_204_NO_CONTENT)
