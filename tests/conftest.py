import os
import sys

import pytest_asyncio
from tortoise import Tortoise

PROJECT_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if PROJECT_ROOT not in sys.path:
    sys.path.insert(0, PROJECT_ROOT)


@pytest_asyncio.fixture(scope="function")
async def db() -> None:
    """Lightweight in-memory DB per test."""
    await Tortoise.init(
        db_url="sqlite://:memory:",
        modules={"models": ["habitrpg.database.models"]},
        use_tz=True,
        timezone="UTC",
    )
    await Tortoise.generate_schemas()
    yield
    await Tortoise.close_connections()


@pytest_asyncio.fixture
async def user(db):
    """Create a test user."""
    from habitrpg.database.models import User

    user = await User.create(
        username="test_user",
        email="test@example.com",
        password_hash="not-a-real-hash",
    )
    return user


@pytest_asyncio.fixture
async def other_user(db):
    from habitrpg.database.models import User

    return await User.create(
        username="other_user",
        email="other@example.com",
        password_hash="not-a-real-hash",
    )
