"""
User Repository - dumb CRUD operations for the User model.

AICODE-NOTE: The repository only accesses data, NO business logic.
Level/XP math lives in core/domain/leveling.py.
Every function takes an optional `conn` so use cases can run it
inside their transaction.
"""

import uuid
from typing import Optional

from tortoise import BaseDBAsyncClient

from habitrpg.database.models import User


async def get_user(
    user_id: uuid.UUID, conn: Optional[BaseDBAsyncClient] = None
) -> Optional[User]:
    """Get user by ID."""
    return await User.filter(id=user_id).using_db(conn).first()


async def lock_user(
    user_id: uuid.UUID, conn: Optional[BaseDBAsyncClient] = None
) -> Optional[User]:
    """
    Get user by ID with a row lock (SELECT ... FOR UPDATE).

    Serializes XP updates and habit-count checks of one user.
    Backends without FOR UPDATE (SQLite) ignore the lock.
    """
    return await User.filter(id=user_id).select_for_update().using_db(conn).first()


async def get_by_email(email: str) -> Optional[User]:
    """Get user by (already lower-cased) email."""
    return await User.get_or_none(email=email)


async def get_by_username(username: str) -> Optional[User]:
    return await User.filter(username__iexact=username).first()


async def get_by_email_or_username(login: str) -> Optional[User]:
    user = await get_by_email(login.strip().lower())
    if user:
        return user
    return await get_by_username(login.strip())


async def email_exists(email: str) -> bool:
    return await User.filter(email=email).exists()


async def username_exists(
    username: str,
    exclude_user_id: Optional[uuid.UUID] = None,
    conn: Optional[BaseDBAsyncClient] = None,
) -> bool:
    """Case-insensitive username lookup, optionally ignoring one user."""
    query = User.filter(username__iexact=username)
    if exclude_user_id is not None:
        query = query.exclude(id=exclude_user_id)
    return await query.using_db(conn).exists()


async def create_user(
    username: str,
    email: str,
    password_hash: str,
    conn: Optional[BaseDBAsyncClient] = None,
) -> User:
    """Create a level-1 user with zero XP."""
    return await User.create(
        username=username,
        email=email,
        password_hash=password_hash,
        level=1,
        xp=0,
        total_xp=0,
        using_db=conn,
    )


async def update_progress(
    user: User,
    level: int,
    xp: int,
    total_xp: int,
    conn: Optional[BaseDBAsyncClient] = None,
) -> User:
    """Write level / XP values computed by the domain."""
    user.level = level
    user.xp = xp
    user.total_xp = total_xp
    await user.save(using_db=conn, update_fields=["level", "xp", "total_xp"])
    return user


async def update_username(
    user: User, username: str, conn: Optional[BaseDBAsyncClient] = None
) -> User:
    user.username = username
    await user.save(using_db=conn, update_fields=["username"])
    return user
