"""API endpoint tests.

To run:
    pytest tests/test_api.py -v

Requests go straight to the ASGI app in the test's event loop; the `db`
fixture provides the in-memory database (the app lifespan is not run).
"""

from datetime import datetime, timedelta, timezone

import httpx
import pytest
import pytest_asyncio

from habitrpg.database.models import CompletionLog, Habit
from habitrpg.interfaces.api.main import app


@pytest_asyncio.fixture
async def client(db):
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


async def register(client: httpx.AsyncClient, username: str = "hero_01") -> dict:
    response = await client.post(
        "/api/auth/register",
        json={
            "username": username,
            "email": f"{username}@example.com",
            "password": "secret1",
        },
    )
    assert response.status_code == 201
    return {"Authorization": f"Bearer {response.json()['token']}"}


async def create_habit(
    client: httpx.AsyncClient, headers: dict, title: str = "Run", **fields
) -> dict:
    response = await client.post(
        "/api/habits", json={"title": title, **fields}, headers=headers
    )
    assert response.status_code == 201
    return response.json()


@pytest.mark.asyncio
async def test_health_endpoint(client: httpx.AsyncClient) -> None:
    """Health check needs no auth."""
    response = await client.get("/api/health")

    assert response.status_code == 200
    assert response.json()["status"] == "ok"


@pytest.mark.asyncio
async def test_requires_auth(client: httpx.AsyncClient) -> None:
    assert (await client.get("/api/me")).status_code == 401
    assert (await client.get("/api/habits")).status_code == 401

    response = await client.get(
        "/api/habits", headers={"Authorization": "Bearer not-a-token"}
    )
    assert response.status_code == 401


@pytest.mark.asyncio
async def test_register_and_login(client: httpx.AsyncClient) -> None:
    await register(client)

    response = await client.post(
        "/api/auth/login", json={"email": "hero_01@example.com", "password": "secret1"}
    )
    assert response.status_code == 200
    assert response.json()["username"] == "hero_01"

    response = await client.post(
        "/api/auth/login", json={"email": "hero_01@example.com", "password": "wrong1"}
    )
    assert response.status_code == 401
    assert response.json()["detail"] == "Invalid email or password"

    response = await client.post(
        "/api/auth/register",
        json={"username": "hero_02", "email": "hero_01@example.com", "password": "secret1"},
    )
    assert response.status_code == 400
    assert response.json()["detail"] == "An account with this email already exists"


@pytest.mark.asyncio
async def test_complete_flow_and_profile(client: httpx.AsyncClient) -> None:
    headers = await register(client)
    habit = await create_habit(client, headers, difficulty="hard")
    assert habit["can_complete_today"] is True

    response = await client.post(f"/api/habits/{habit['id']}/complete", headers=headers)
    assert response.status_code == 200
    reward = response.json()
    assert reward["xp_gained"] == 20
    assert reward["new_streak"] == 1
    assert reward["updated_habit"]["can_complete_today"] is False

    response = await client.post(f"/api/habits/{habit['id']}/complete", headers=headers)
    assert response.status_code == 400
    assert response.json()["detail"] == "Habit already completed today"

    response = await client.get("/api/habits", headers=headers)
    assert response.json()[0]["can_complete_today"] is False

    response = await client.get("/api/me", headers=headers)
    assert response.status_code == 200
    profile = response.json()
    assert profile["total_xp"] == 20
    assert profile["level"] == 1
    assert profile["xp_to_next_level"] == 80
    assert profile["active_habits_count"] == 1
    assert profile["total_completions"] == 1
    assert profile["longest_streak"] == 1
    assert profile["current_active_streaks"] == 1


@pytest.mark.asyncio
async def test_habit_crud_status_codes(client: httpx.AsyncClient) -> None:
    headers = await register(client)
    habit = await create_habit(client, headers, title="Read")
    habit_id = habit["id"]

    response = await client.patch(
        f"/api/habits/{habit_id}", json={"description": "20 pages"}, headers=headers
    )
    assert response.status_code == 204

    response = await client.get(f"/api/habits/{habit_id}", headers=headers)
    assert response.json()["description"] == "20 pages"

    response = await client.post(
        "/api/habits", json={"title": " read "}, headers=headers
    )
    assert response.status_code == 400

    response = await client.post(
        "/api/habits", json={"title": "Swim", "frequency": "hourly"}, headers=headers
    )
    assert response.status_code == 400
    assert response.json()["detail"] == "Invalid habit frequency"

    response = await client.delete(f"/api/habits/{habit_id}", headers=headers)
    assert response.status_code == 204

    response = await client.get("/api/habits", headers=headers)
    assert response.json() == []
    response = await client.get("/api/habits/deleted", headers=headers)
    assert [h["id"] for h in response.json()] == [habit_id]
    response = await client.get("/api/habits?include_inactive=true", headers=headers)
    assert len(response.json()) == 1

    response = await client.post(f"/api/habits/{habit_id}/restore", headers=headers)
    assert response.status_code == 204

    response = await client.get("/api/habits/999999", headers=headers)
    assert response.status_code == 404
    response = await client.delete("/api/habits/999999", headers=headers)
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_habits_are_private(client: httpx.AsyncClient) -> None:
    owner = await register(client, "owner_1")
    intruder = await register(client, "intruder_1")
    habit = await create_habit(client, owner)

    response = await client.get(f"/api/habits/{habit['id']}", headers=intruder)
    assert response.status_code == 404
    response = await client.post(
        f"/api/habits/{habit['id']}/complete", headers=intruder
    )
    assert response.status_code == 404
    assert response.json()["detail"] == "Habit not found or inactive"


@pytest.mark.asyncio
async def test_permanent_delete_endpoint(client: httpx.AsyncClient) -> None:
    headers = await register(client)
    habit = await create_habit(client, headers)
    await client.post(f"/api/habits/{habit['id']}/complete", headers=headers)

    response = await client.request(
        "DELETE", f"/api/habits/{habit['id']}/permanent", headers=headers
    )
    assert response.status_code == 400

    response = await client.request(
        "DELETE",
        f"/api/habits/{habit['id']}/permanent",
        json={"confirmation_text": "delete"},
        headers=headers,
    )
    assert response.status_code == 200
    assert response.json()["deleted_completions"] == 1
    assert await Habit.all().count() == 0
    assert await CompletionLog.all().count() == 0


@pytest.mark.asyncio
async def test_bulk_endpoints(client: httpx.AsyncClient) -> None:
    headers = await register(client)
    ids = [(await create_habit(client, headers, title=f"H{i}"))["id"] for i in range(3)]

    response = await client.post(
        "/api/habits/bulk/delete",
        json={"habit_ids": ids + [424242]},
        headers=headers,
    )
    assert response.status_code == 200
    body = response.json()
    assert body["processed_count"] == 3
    assert body["not_found"] == [424242]

    response = await client.post(
        "/api/habits/bulk/restore", json={"habit_ids": ids}, headers=headers
    )
    assert response.status_code == 200
    assert response.json()["restored_count"] == 3

    response = await client.post(
        "/api/habits/bulk/delete",
        json={"habit_ids": ids, "is_permanent": True},
        headers=headers,
    )
    assert response.status_code == 400

    response = await client.post(
        "/api/habits/bulk/delete", json={"habit_ids": [424242]}, headers=headers
    )
    assert response.status_code == 404

    response = await client.post(
        "/api/habits/bulk/delete", json={"habit_ids": []}, headers=headers
    )
    assert response.status_code == 400


# ============ User profile & stats ============


@pytest.mark.asyncio
async def test_user_profile_endpoint(client: httpx.AsyncClient) -> None:
    assert (await client.get("/api/user/profile")).status_code == 401

    headers = await register(client, "profile_user")
    await create_habit(client, headers, "Run")
    await create_habit(client, headers, "Read")

    response = await client.get("/api/user/profile", headers=headers)
    assert response.status_code == 200
    profile = response.json()
    assert profile["username"] == "profile_user"
    assert profile["email"] == "profile_user@example.com"
    assert profile["level"] == 1
    assert profile["active_habits_count"] == 2


@pytest.mark.asyncio
async def test_user_stats_counts_recent_completions(client: httpx.AsyncClient) -> None:
    headers = await register(client)
    habit = await create_habit(client, headers)
    now = datetime.now(timezone.utc)
    yesterday = now - timedelta(days=1)
    await CompletionLog.create(
        habit_id=habit["id"], completed_at=yesterday, completed_on=yesterday.date()
    )
    await CompletionLog.create(
        habit_id=habit["id"], completed_at=now, completed_on=now.date()
    )

    response = await client.get("/api/user/stats?days=30", headers=headers)

    assert response.status_code == 200
    stats = response.json()
    assert stats["total_completions"] == 2
    assert stats["current_streak"] == 2
    assert stats["longest_streak_in_period"] == 2
    assert len(stats["daily_completions"]) == 30
    assert stats["daily_completions"][now.date().isoformat()] == 1
    assert stats["period_end"] == now.date().isoformat()
    assert stats["completion_rate"] == round(2 / 30 * 100, 2)


@pytest.mark.asyncio
async def test_user_stats_rejects_out_of_range_days(client: httpx.AsyncClient) -> None:
    headers = await register(client)

    for days in (0, 500):
        response = await client.get(f"/api/user/stats?days={days}", headers=headers)
        assert response.status_code == 400
        assert response.json()["detail"] == "Days must be between 1 and 365"

    assert (await client.get("/api/user/stats")).status_code == 401


@pytest.mark.asyncio
async def test_update_username(client: httpx.AsyncClient) -> None:
    headers = await register(client, "old_name")

    response = await client.patch(
        "/api/user/profile", json={"username": "newusername"}, headers=headers
    )
    assert response.status_code == 204

    response = await client.get("/api/user/profile", headers=headers)
    assert response.json()["username"] == "newusername"


@pytest.mark.asyncio
async def test_update_username_rejections(client: httpx.AsyncClient) -> None:
    headers = await register(client, "first_user")
    await register(client, "taken_name")

    response = await client.patch(
        "/api/user/profile", json={"username": "ab"}, headers=headers
    )
    assert response.status_code == 400
    assert response.json()["detail"] == "Username must be between 3 and 50 characters"

    response = await client.patch(
        "/api/user/profile", json={"username": "taken_name"}, headers=headers
    )
    assert response.status_code == 400
    assert response.json()["detail"] == "This username is already taken"

    response = await client.get("/api/user/profile", headers=headers)
    assert response.json()["username"] == "first_user"
