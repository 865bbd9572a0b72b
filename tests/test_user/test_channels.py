import pytest
from httpx import AsyncClient

from videotube.core.exceptions import NotFoundException, ValidationException
from videotube.services.channel_service import channel_profile
from tests.fixtures.users import bearer


@pytest.fixture
async def channel_graph(create_test_user, subscribe):
    """`chan` has two subscribers and follows one channel itself."""
    chan = await create_test_user(username="chan")
    fan_a = await create_test_user()
    fan_b = await create_test_user()
    other = await create_test_user()
    await subscribe(fan_a, chan)
    await subscribe(fan_b, chan)
    await subscribe(chan, other)
    return {"chan": chan, "fan_a": fan_a, "fan_b": fan_b, "other": other}


# ─────────────────────────────────────────────────────────────
# Service
# ─────────────────────────────────────────────────────────────
@pytest.mark.anyio
async def test_counts_and_subscription_flag(store, channel_graph):
    chan, fan_a, other = channel_graph["chan"], channel_graph["fan_a"], channel_graph["other"]

    seen_by_fan = await channel_profile(store, "chan", fan_a["id"])
    assert seen_by_fan.id == chan["id"]
    assert seen_by_fan.subscribers_count == 2
    assert seen_by_fan.channels_subscribed_to_count == 1
    assert seen_by_fan.is_subscribed is True

    seen_by_other = await channel_profile(store, "chan", other["id"])
    assert seen_by_other.is_subscribed is False

    anonymous = await channel_profile(store, "chan")
    assert anonymous.is_subscribed is False
    assert anonymous.subscribers_count == 2


@pytest.mark.anyio
async def test_lookup_is_case_insensitive(store, channel_graph):
    profile = await channel_profile(store, "  CHAN ")
    assert profile.username == "chan"


@pytest.mark.anyio
async def test_channel_without_subscriptions(store, create_test_user):
    await create_test_user(username="quiet")

    profile = await channel_profile(store, "quiet")
    assert profile.subscribers_count == 0
    assert profile.channels_subscribed_to_count == 0


@pytest.mark.anyio
async def test_blank_username(store):
    with pytest.raises(ValidationException):
        await channel_profile(store, "   ")


@pytest.mark.anyio
async def test_unknown_channel(store):
    with pytest.raises(NotFoundException):
        await channel_profile(store, "nobody")


@pytest.mark.anyio
async def test_profile_has_no_private_fields(store, channel_graph):
    dumped = (await channel_profile(store, "chan")).model_dump()
    assert "email" not in dumped
    assert "password" not in dumped
    assert "refresh_token" not in dumped


# ─────────────────────────────────────────────────────────────
# HTTP
# ─────────────────────────────────────────────────────────────
@pytest.mark.anyio
async def test_channel_endpoint_as_subscriber(async_client: AsyncClient, channel_graph):
    resp = await async_client.get("/api/v1/users/c/chan", headers=bearer(channel_graph["fan_b"]))
    assert resp.status_code == 200, resp.text

    body = resp.json()
    assert body["message"] == "User channel fetched successfully"
    assert body["data"]["is_subscribed"] is True
    assert body["data"]["subscribers_count"] == 2


@pytest.mark.anyio
async def test_channel_endpoint_anonymous(async_client: AsyncClient, channel_graph):
    resp = await async_client.get("/api/v1/users/c/chan")
    assert resp.status_code == 200
    assert resp.json()["data"]["is_subscribed"] is False


@pytest.mark.anyio
async def test_channel_endpoint_unknown(async_client: AsyncClient):
    resp = await async_client.get("/api/v1/users/c/ghost")
    assert resp.status_code == 404
    assert resp.json()["message"] == "Channel not found"


@pytest.mark.anyio
async def test_channel_endpoint_rejects_invalid_token(async_client: AsyncClient, channel_graph):
    resp = await async_client.get("/api/v1/users/c/chan", headers={"Authorization": "Bearer broken"})
    assert resp.status_code == 401
