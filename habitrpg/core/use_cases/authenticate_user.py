"""
Authenticate User Use Case - login by email or username.
"""

import logging

from habitrpg.core.errors import ErrorCategory
from habitrpg.core.use_cases.register_user import AuthResult
from habitrpg.services.security import create_access_token, verify_password
from habitrpg.storage import user_repo

logger = logging.getLogger(__name__)

INVALID_CREDENTIALS = "Invalid email or password"


class AuthenticateUserUseCase:
    """Use-case for exchanging credentials for an access token."""

    async def execute(self, login: str, password: str) -> AuthResult:
        if not login or not login.strip() or not password:
            return AuthResult.rejected(
                "Email and password are required", ErrorCategory.VALIDATION
            )

        user = await user_repo.get_by_email_or_username(login)
        if not user or not verify_password(password, user.password_hash):
            logger.warning("Failed login attempt")
            return AuthResult.rejected(INVALID_CREDENTIALS, ErrorCategory.BUSINESS_RULE)

        logger.info(f"User {user.id} logged in")
        return AuthResult(
            success=True,
            message="Login successful",
            token=create_access_token(user.id),
            user=user,
        )
