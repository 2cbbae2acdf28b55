"""
Habits API router.

Endpoints:
- GET /api/habits - List habits (active only unless include_inactive)
- GET /api/habits/deleted - List soft-deleted habits
- GET /api/habits/{id} - Get one habit
- POST /api/habits - Create habit
- PATCH /api/habits/{id} - Update habit
- DELETE /api/habits/{id} - Soft delete habit
- DELETE /api/habits/{id}/permanent - Delete habit and its history
- POST /api/habits/{id}/restore - Restore soft-deleted habit
- POST /api/habits/{id}/complete - Complete habit for today (awards XP)
- POST /api/habits/bulk/delete - Soft/permanent delete up to 50 habits
- POST /api/habits/bulk/restore - Restore up to 50 habits
"""

import logging
import uuid
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Response, status

from habitrpg.core.domain.streaks import utc_today
from habitrpg.core.errors import ErrorCategory
from habitrpg.core.use_cases.bulk_habits import (
    BulkDeleteHabitsUseCase,
    BulkRestoreHabitsUseCase,
)
from habitrpg.core.use_cases.complete_habit import (
    CompleteHabitUseCase,
    can_complete_today,
)
from habitrpg.core.use_cases.create_habit import CreateHabitUseCase
from habitrpg.core.use_cases.delete_habit import (
    PermanentlyDeleteHabitUseCase,
    SoftDeleteHabitUseCase,
)
from habitrpg.core.use_cases.restore_habit import RestoreHabitUseCase
from habitrpg.core.use_cases.update_habit import UpdateHabitUseCase
from habitrpg.database.models import Habit
from habitrpg.interfaces.api.auth import get_current_user_id
from habitrpg.interfaces.api.schemas import (
    BulkDeleteRequest,
    BulkDeleteResponse,
    BulkRestoreRequest,
    BulkRestoreResponse,
    CreateHabitRequest,
    HabitResponse,
    PermanentDeleteRequest,
    PermanentDeleteResponse,
    RewardResponse,
    UpdateHabitRequest,
)
from habitrpg.storage import completion_log_repo, habit_repo

router = APIRouter(prefix="/api/habits", tags=["habits"])
logger = logging.getLogger(__name__)

STATUS_BY_CATEGORY = {
    ErrorCategory.VALIDATION: status.HTTP_400_BAD_REQUEST,
    ErrorCategory.BUSINESS_RULE: status.HTTP_400_BAD_REQUEST,
    ErrorCategory.NOT_FOUND: status.HTTP_404_NOT_FOUND,
}


def _raise_for(category: Optional[ErrorCategory], message: str) -> None:
    raise HTTPException(
        status_code=STATUS_BY_CATEGORY.get(category, status.HTTP_400_BAD_REQUEST),
        detail=message,
    )


async def _to_responses(habits: list[Habit]) -> list[HabitResponse]:
    """Project habits, resolving can_complete_today with a single query."""
    completed = await completion_log_repo.get_completed_habit_ids_on(
        [h.id for h in habits], utc_today()
    )
    responses = []
    for habit in habits:
        response = HabitResponse.model_validate(habit)
        response.can_complete_today = habit.is_active and habit.id not in completed
        responses.append(response)
    return responses


async def _to_response(habit: Habit) -> HabitResponse:
    response = HabitResponse.model_validate(habit)
    response.can_complete_today = habit.is_active and await can_complete_today(habit.id)
    return response


# ============ Reads ============


@router.get("", response_model=list[HabitResponse])
async def list_habits(
    include_inactive: bool = False,
    user_id: uuid.UUID = Depends(get_current_user_id),
) -> list[HabitResponse]:
    """
    List the user's habits, newest first.

    Soft-deleted habits are only returned with include_inactive=true.
    """
    habits = await habit_repo.get_habits(user_id, include_inactive=include_inactive)
    return await _to_responses(habits)


@router.get("/deleted", response_model=list[HabitResponse])
async def list_deleted_habits(
    user_id: uuid.UUID = Depends(get_current_user_id),
) -> list[HabitResponse]:
    """List soft-deleted habits (candidates for restore or permanent delete)."""
    habits = await habit_repo.get_inactive_habits(user_id)
    return await _to_responses(habits)


@router.get("/{habit_id}", response_model=HabitResponse)
async def get_habit(
    habit_id: int,
    user_id: uuid.UUID = Depends(get_current_user_id),
) -> HabitResponse:
    habit = await habit_repo.get_habit_for_user(habit_id, user_id)
    if not habit:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Habit not found",
        )
    return await _to_response(habit)


# ============ Bulk ============
# AICODE-NOTE: Declared before the /{habit_id} mutations so "bulk" is never
# parsed as an ID.


@router.post("/bulk/delete", response_model=BulkDeleteResponse)
async def bulk_delete_habits(
    request: BulkDeleteRequest,
    user_id: uuid.UUID = Depends(get_current_user_id),
) -> BulkDeleteResponse:
    """
    Delete up to 50 habits at once.

    Soft delete by default; is_permanent=true also requires
    confirmation_text="DELETE" and removes completion history.
    """
    result = await BulkDeleteHabitsUseCase().execute(
        user_id,
        request.habit_ids,
        permanent=request.is_permanent,
        confirmation=request.confirmation_text,
    )
    if not result.success:
        _raise_for(result.error_category, result.message)

    return BulkDeleteResponse(
        message=result.message,
        processed_count=result.processed_count,
        deleted_completions=result.deleted_completions,
        not_found=result.not_found,
    )


@router.post("/bulk/restore", response_model=BulkRestoreResponse)
async def bulk_restore_habits(
    request: BulkRestoreRequest,
    user_id: uuid.UUID = Depends(get_current_user_id),
) -> BulkRestoreResponse:
    """Restore up to 50 soft-deleted habits (all or nothing)."""
    result = await BulkRestoreHabitsUseCase().execute(user_id, request.habit_ids)
    if not result.success:
        _raise_for(result.error_category, result.message)

    return BulkRestoreResponse(
        message=result.message,
        restored_count=result.processed_count,
        not_found=result.not_found,
    )


# ============ Single habit ============


@router.post("", response_model=HabitResponse, status_code=status.HTTP_201_CREATED)
async def create_habit(
    request: CreateHabitRequest,
    user_id: uuid.UUID = Depends(get_current_user_id),
) -> HabitResponse:
    result = await CreateHabitUseCase().execute(
        user_id,
        title=request.title,
        description=request.description,
        frequency=request.frequency,
        difficulty=request.difficulty,
    )
    if not result.success:
        _raise_for(result.error_category, result.message)

    response = HabitResponse.model_validate(result.habit)
    response.can_complete_today = True
    return response


@router.patch("/{habit_id}", status_code=status.HTTP_204_NO_CONTENT)
async def update_habit(
    habit_id: int,
    request: UpdateHabitRequest,
    user_id: uuid.UUID = Depends(get_current_user_id),
) -> Response:
    """Update the given fields of an active habit. Omitted fields stay as they are."""
    result = await UpdateHabitUseCase().execute(
        user_id,
        habit_id,
        title=request.title,
        description=request.description,
        frequency=request.frequency,
        difficulty=request.difficulty,
    )
    if not result.success:
        _raise_for(result.error_category, result.message)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.delete("/{habit_id}", status_code=status.HTTP_204_NO_CONTENT)
async def soft_delete_habit(
    habit_id: int,
    user_id: uuid.UUID = Depends(get_current_user_id),
) -> Response:
    """Deactivate a habit. History is kept and the habit can be restored."""
    result = await SoftDeleteHabitUseCase().execute(user_id, habit_id)
    if not result.success:
        _raise_for(result.error_category, result.message)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.delete("/{habit_id}/permanent", response_model=PermanentDeleteResponse)
async def permanently_delete_habit(
    habit_id: int,
    request: Optional[PermanentDeleteRequest] = None,
    user_id: uuid.UUID = Depends(get_current_user_id),
) -> PermanentDeleteResponse:
    """Delete a habit and all of its completions. Needs confirmation_text="DELETE"."""
    confirmation = request.confirmation_text if request else None
    result = await PermanentlyDeleteHabitUseCase().execute(
        user_id, habit_id, confirmation
    )
    if not result.success:
        _raise_for(result.error_category, result.message)

    return PermanentDeleteResponse(
        message=result.message,
        deleted_completions=result.deleted_completions,
    )


@router.post("/{habit_id}/restore", status_code=status.HTTP_204_NO_CONTENT)
async def restore_habit(
    habit_id: int,
    user_id: uuid.UUID = Depends(get_current_user_id),
) -> Response:
    result = await RestoreHabitUseCase().execute(user_id, habit_id)
    if not result.success:
        _raise_for(result.error_category, result.message)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/{habit_id}/complete", response_model=RewardResponse)
async def complete_habit(
    habit_id: int,
    user_id: uuid.UUID = Depends(get_current_user_id),
) -> RewardResponse:
    """
    Complete a habit for today.

    Awards XP by difficulty, updates level and streak. Once per UTC day.
    """
    result = await CompleteHabitUseCase().execute(user_id, habit_id)
    if not result.success:
        _raise_for(result.error_category, result.message)

    logger.info(
        f"Habit {habit_id} completed via API by user {user_id}: +{result.xp_gained} XP"
    )

    updated = HabitResponse.model_validate(result.updated_habit)
    updated.can_complete_today = False

    return RewardResponse(
        success=True,
        message=result.message,
        xp_gained=result.xp_gained,
        leveled_up=result.leveled_up,
        new_level=result.new_level,
        new_xp=result.new_xp,
        new_total_xp=result.new_total_xp,
        new_streak=result.new_streak,
        updated_habit=updated,
    )
