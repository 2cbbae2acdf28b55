"""
Bearer token authentication.

Validates the JWT from the Authorization header and resolves the caller's
user ID (UUID) for the routers.
"""

import uuid

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from habitrpg.database.models import User
from habitrpg.services.security import decode_access_token
from habitrpg.storage import user_repo

bearer_scheme = HTTPBearer(auto_error=False)


async def get_current_user_id(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
) -> uuid.UUID:
    """
    FastAPI dependency for authenticated endpoints.

    Usage:
        @router.get("/api/habits")
        async def list_habits(user_id: uuid.UUID = Depends(get_current_user_id)):
            ...

    Raises:
        HTTPException 401 if auth fails
    """
    if credentials is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or missing user authentication",
            headers={"WWW-Authenticate": "Bearer"},
        )

    user_id = decode_access_token(credentials.credentials)
    if user_id is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or expired token",
            headers={"WWW-Authenticate": "Bearer"},
        )

    return user_id


async def get_current_user(user_id: uuid.UUID = Depends(get_current_user_id)) -> User:
    """Like get_current_user_id, but loads the User (401 if it no longer exists)."""
    user = await user_repo.get_user(user_id)
    if not user:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="User not found",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return user
