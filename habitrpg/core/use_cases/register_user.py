"""
Register User Use Case - the only place where users are created.
"""

import logging
from dataclasses import dataclass
from typing import Optional

from email_validator import EmailNotValidError, validate_email
from tortoise.exceptions import IntegrityError

from habitrpg.core.domain.habit_rules import (
    normalize_email,
    validate_password,
    validate_username,
)
from habitrpg.core.errors import ErrorCategory
from habitrpg.database.models import User
from habitrpg.services.security import create_access_token, hash_password
from habitrpg.storage import user_repo

logger = logging.getLogger(__name__)


@dataclass
class AuthResult:
    """Result of registration or login."""

    success: bool
    message: str = ""
    error_category: Optional[ErrorCategory] = None
    token: Optional[str] = None
    user: Optional[User] = None

    @classmethod
    def rejected(cls, message: str, category: ErrorCategory) -> "AuthResult":
        return cls(success=False, message=message, error_category=category)


class RegisterUserUseCase:
    """Use-case for creating an account."""

    async def execute(self, username: str, email: str, password: str) -> AuthResult:
        error = validate_username(username)
        if not error and (not email or not email.strip()):
            error = "Email is required"
        if error:
            return AuthResult.rejected(error, ErrorCategory.VALIDATION)

        try:
            validate_email(email.strip(), check_deliverability=False)
        except EmailNotValidError:
            return AuthResult.rejected(
                "Please provide a valid email address", ErrorCategory.VALIDATION
            )

        error = validate_password(password)
        if error:
            return AuthResult.rejected(error, ErrorCategory.VALIDATION)

        username = username.strip()
        email = normalize_email(email)

        if await user_repo.email_exists(email):
            return AuthResult.rejected(
                "An account with this email already exists",
                ErrorCategory.BUSINESS_RULE,
            )
        if await user_repo.username_exists(username):
            return AuthResult.rejected(
                "This username is already taken", ErrorCategory.BUSINESS_RULE
            )

        try:
            user = await user_repo.create_user(username, email, hash_password(password))
        except IntegrityError:
            # Lost a race against a concurrent registration
            logger.warning(f"Registration race for {username!r}")
            return AuthResult.rejected(
                "An account with this email or username already exists",
                ErrorCategory.BUSINESS_RULE,
            )

        logger.info(f"Registered user {user.id} ({username})")
        return AuthResult(
            success=True,
            message="Registration successful! Welcome to HabitRPG!",
            token=create_access_token(user.id),
            user=user,
        )
