"""
Password hashing and access tokens.

Tokens are HS256 JWTs whose `sub` claim is the user's UUID.
"""

import logging
import uuid
from datetime import datetime, timedelta, timezone
from typing import Optional

from jose import JWTError, jwt
from passlib.context import CryptContext

from habitrpg.config import config

logger = logging.getLogger(__name__)

pwd_context = CryptContext(schemes=["pbkdf2_sha256"], deprecated="auto")


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    try:
        return pwd_context.verify(plain_password, hashed_password)
    except ValueError:
        # Malformed hash in the database
        logger.warning("Stored password hash could not be parsed")
        return False


def create_access_token(
    user_id: uuid.UUID, expires_delta: Optional[timedelta] = None
) -> str:
    expire = datetime.now(timezone.utc) + (
        expires_delta or timedelta(minutes=config.ACCESS_TOKEN_EXPIRE_MINUTES)
    )
    to_encode = {"sub": str(user_id), "exp": expire}
    return jwt.encode(
        to_encode, config.JWT_SECRET.get_secret_value(), algorithm=config.JWT_ALGORITHM
    )


def decode_access_token(token: str) -> Optional[uuid.UUID]:
    """
    Validate a token and return the user ID it was issued for.

    Returns None for bad signatures, expired tokens and malformed subjects.
    """
    try:
        payload = jwt.decode(
            token,
            config.JWT_SECRET.get_secret_value(),
            algorithms=[config.JWT_ALGORITHM],
        )
    except JWTError:
        return None

    subject = payload.get("sub")
    if not subject:
        return None
    try:
        user_id = uuid.UUID(subject)
    except ValueError:
        return None
    return user_id if user_id.int != 0 else None
