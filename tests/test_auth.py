import uuid
from datetime import timedelta

import pytest

from habitrpg.core.errors import ErrorCategory
from habitrpg.core.use_cases.authenticate_user import AuthenticateUserUseCase
from habitrpg.core.use_cases.register_user import RegisterUserUseCase
from habitrpg.database.models import User
from habitrpg.services.security import (
    create_access_token,
    decode_access_token,
    hash_password,
    verify_password,
)


def test_password_hashing() -> None:
    hashed = hash_password("secret1")
    assert hashed != "secret1"
    assert verify_password("secret1", hashed)
    assert not verify_password("secret2", hashed)
    assert not verify_password("secret1", "garbage")


def test_access_token_round_trip() -> None:
    user_id = uuid.uuid4()
    token = create_access_token(user_id)
    assert decode_access_token(token) == user_id


def test_expired_or_bad_token() -> None:
    expired = create_access_token(uuid.uuid4(), expires_delta=timedelta(minutes=-1))
    assert decode_access_token(expired) is None
    assert decode_access_token("not.a.token") is None
    assert decode_access_token(create_access_token(uuid.UUID(int=0))) is None


@pytest.mark.asyncio
async def test_register_creates_level_one_user(db: None) -> None:
    result = await RegisterUserUseCase().execute(
        "hero_01", "  Hero@Example.COM ", "secret1"
    )

    assert result.success
    assert result.token
    user = await User.get(id=result.user.id)
    assert user.email == "hero@example.com"
    assert user.level == 1
    assert user.xp == 0
    assert user.total_xp == 0
    assert user.password_hash != "secret1"
    assert decode_access_token(result.token) == user.id


@pytest.mark.asyncio
async def test_register_rejections(db: None) -> None:
    use_case = RegisterUserUseCase()
    await use_case.execute("hero_01", "hero@example.com", "secret1")

    result = await use_case.execute("hero_02", "HERO@example.com", "secret1")
    assert result.message == "An account with this email already exists"
    assert result.error_category == ErrorCategory.BUSINESS_RULE

    result = await use_case.execute("hero_01", "other@example.com", "secret1")
    assert result.message == "This username is already taken"

    result = await use_case.execute("hero_03", "not-an-email", "secret1")
    assert result.message == "Please provide a valid email address"
    assert result.error_category == ErrorCategory.VALIDATION

    result = await use_case.execute("hero_03", "hero3@example.com", "abcdef")
    assert result.error_category == ErrorCategory.VALIDATION

    assert await User.all().count() == 1


@pytest.mark.asyncio
async def test_login_by_email_or_username(db: None) -> None:
    await RegisterUserUseCase().execute("hero_01", "hero@example.com", "secret1")
    use_case = AuthenticateUserUseCase()

    by_email = await use_case.execute("HERO@example.com", "secret1")
    by_username = await use_case.execute("hero_01", "secret1")
    assert by_email.success
    assert by_username.success
    assert by_email.user.id == by_username.user.id

    wrong = await use_case.execute("hero@example.com", "secret2")
    assert not wrong.success
    assert wrong.message == "Invalid email or password"

    missing = await use_case.execute("", "")
    assert missing.error_category == ErrorCategory.VALIDATION
