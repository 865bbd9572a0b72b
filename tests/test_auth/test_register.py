import pytest
from httpx import AsyncClient

REGISTER_URL = "/api/v1/users/register"


def signup_body(**overrides):
    body = {
        "full_name": "Alice Doe",
        "email": "alice@example.com",
        "username": "alice",
        "password": "Password123!",
        "avatar": "https://cdn.example.com/avatars/alice.png",
    }
    body.update(overrides)
    return body


# ─────────────────────────────────────────────────────────────
# /register
# ─────────────────────────────────────────────────────────────
@pytest.mark.anyio
async def test_register_success(async_client: AsyncClient):
    resp = await async_client.post(REGISTER_URL, json=signup_body(username="Alice"))
    assert resp.status_code == 201, resp.text

    body = resp.json()
    assert body["success"] is True
    assert body["status_code"] == 201
    assert body["message"] == "User registered successfully"

    user = body["data"]
    assert user["username"] == "alice"
    assert user["email"] == "alice@example.com"
    assert user["cover_image"] == ""
    assert user["watch_history"] == []
    assert "password" not in user
    assert "refresh_token" not in user


@pytest.mark.anyio
async def test_register_keeps_cover_image(async_client: AsyncClient):
    resp = await async_client.post(REGISTER_URL, json=signup_body(cover_image="https://cdn.example.com/c.png"))
    assert resp.status_code == 201
    assert resp.json()["data"]["cover_image"] == "https://cdn.example.com/c.png"


@pytest.mark.anyio
@pytest.mark.parametrize("field", ["full_name", "email", "username", "password"])
async def test_register_blank_field_is_rejected(async_client: AsyncClient, field):
    resp = await async_client.post(REGISTER_URL, json=signup_body(**{field: "   "}))

    assert resp.status_code == 400
    body = resp.json()
    assert body["error"] is True
    assert body["message"] == "All fields are required"
    assert body["code"] == 400


@pytest.mark.anyio
async def test_register_missing_field_is_rejected(async_client: AsyncClient):
    body = signup_body()
    body.pop("password")

    resp = await async_client.post(REGISTER_URL, json=body)
    assert resp.status_code == 400


@pytest.mark.anyio
async def test_register_duplicate_username_case_insensitive(async_client: AsyncClient):
    first = await async_client.post(REGISTER_URL, json=signup_body())
    assert first.status_code == 201

    for attempt in ("ALICE", "Alice"):
        resp = await async_client.post(
            REGISTER_URL,
            json=signup_body(username=attempt, email=f"{attempt.lower()}+{attempt}@example.com"),
        )
        assert resp.status_code == 409
        assert resp.json()["message"] == "User already exists on this email or username"


@pytest.mark.anyio
async def test_register_duplicate_email(async_client: AsyncClient):
    await async_client.post(REGISTER_URL, json=signup_body())

    resp = await async_client.post(REGISTER_URL, json=signup_body(username="someone", email="ALICE@example.com"))
    assert resp.status_code == 409


@pytest.mark.anyio
async def test_register_requires_avatar(async_client: AsyncClient):
    body = signup_body()
    body.pop("avatar")

    resp = await async_client.post(REGISTER_URL, json=body)
    assert resp.status_code == 400
    assert resp.json()["message"] == "Avatar file is required"


@pytest.mark.anyio
async def test_register_conflict_is_checked_before_avatar(async_client: AsyncClient):
    await async_client.post(REGISTER_URL, json=signup_body())

    resp = await async_client.post(REGISTER_URL, json=signup_body(avatar=None))
    assert resp.status_code == 409


@pytest.mark.anyio
async def test_register_wrong_body_shape_is_422(async_client: AsyncClient):
    resp = await async_client.post(REGISTER_URL, json=["not", "an", "object"])

    assert resp.status_code == 422
    assert resp.headers["content-type"].startswith("application/problem+json")
