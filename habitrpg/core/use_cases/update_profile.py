"""
Update Profile Use Case - change the username of the current user.
"""

import logging
import uuid
from dataclasses import dataclass
from typing import Optional

from tortoise.exceptions import IntegrityError
from tortoise.transactions import in_transaction

from habitrpg.core.domain.habit_rules import is_valid_user_id, validate_username
from habitrpg.core.errors import ErrorCategory, OperationRejected
from habitrpg.database.models import User
from habitrpg.storage import user_repo

logger = logging.getLogger(__name__)

USERNAME_TAKEN = "This username is already taken"


@dataclass
class ProfileResult:
    success: bool
    message: str = ""
    error_category: Optional[ErrorCategory] = None
    user: Optional[User] = None
    # False when the request changed nothing
    changed: bool = False

    @classmethod
    def rejected(cls, message: str, category: ErrorCategory) -> "ProfileResult":
        return cls(success=False, message=message, error_category=category)


class UpdateProfileUseCase:
    """Use-case for editing the profile."""

    async def execute(
        self, user_id: uuid.UUID, username: Optional[str] = None
    ) -> ProfileResult:
        """
        Apply a partial profile update.

        Rules:
        - omitted or empty username leaves the profile unchanged
        - username follows the registration rules
        - username stays unique (case-insensitive) among other users
        """
        if not is_valid_user_id(user_id):
            return ProfileResult.rejected("Invalid user ID", ErrorCategory.VALIDATION)

        if username is None or not username.strip():
            return ProfileResult(success=True, message="Nothing to update")

        error = validate_username(username)
        if error:
            return ProfileResult.rejected(error, ErrorCategory.VALIDATION)
        username = username.strip()

        try:
            async with in_transaction() as conn:
                user = await user_repo.lock_user(user_id, conn)
                if not user:
                    raise OperationRejected("User not found", ErrorCategory.NOT_FOUND)
                if user.username == username:
                    return ProfileResult(
                        success=True, message="Nothing to update", user=user
                    )
                if await user_repo.username_exists(
                    username, exclude_user_id=user_id, conn=conn
                ):
                    raise OperationRejected(USERNAME_TAKEN, ErrorCategory.BUSINESS_RULE)

                await user_repo.update_username(user, username, conn)
        except OperationRejected as e:
            logger.warning(f"Profile update rejected for user {user_id}: {e.message}")
            return ProfileResult.rejected(e.message, e.category)
        except IntegrityError:
            # Lost a race against a concurrent rename/registration
            logger.warning(f"Username race for {username!r}")
            return ProfileResult.rejected(USERNAME_TAKEN, ErrorCategory.BUSINESS_RULE)

        logger.info(f"User {user_id} renamed to {username}")
        return ProfileResult(
            success=True, message="Profile updated", user=user, changed=True
        )
