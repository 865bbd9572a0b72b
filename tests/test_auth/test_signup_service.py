import pytest

from videotube.core.exceptions import ConflictException
from videotube.core.security import verify_password
from videotube.db.memory import MemoryDocumentStore
from videotube.db.store import USERS
from videotube.schemas.auth import RegisterPayload
from videotube.services.auth.signup_service import register_user


class _BlindPrecheckStore(MemoryDocumentStore):
    """Misses the duplicate in the pre-check, as a concurrent insert would."""

    async def find_one(self, collection, filter):
        if "$or" in filter:
            return None
        return await super().find_one(collection, filter)


def _payload(**overrides):
    data = {
        "full_name": "Alice Doe",
        "email": "alice@example.com",
        "username": "alice",
        "password": "Password123!",
        "avatar": "https://cdn.example.com/a.png",
    }
    data.update(overrides)
    return RegisterPayload(**data)


@pytest.mark.anyio
async def test_stores_normalized_fields_and_hash(store):
    view = await register_user(store, _payload(username="  Alice ", email="Alice@Example.com"))

    stored = await store.find_by_id(USERS, view.id)
    assert stored["username"] == "alice"
    assert stored["email"] == "alice@example.com"
    assert stored["password"] != "Password123!"
    assert verify_password("Password123!", stored["password"])
    assert stored["refresh_token"] is None
    assert stored["watch_history"] == []
    assert stored["cover_image"] == ""


@pytest.mark.anyio
async def test_unique_index_race_is_reported_as_conflict():
    racing = _BlindPrecheckStore()
    await register_user(racing, _payload())

    with pytest.raises(ConflictException):
        await register_user(racing, _payload(email="other@example.com"))


@pytest.mark.anyio
async def test_password_is_hashed_as_sent(store):
    view = await register_user(store, _payload(password="  pass word  "))

    stored = await store.find_by_id(USERS, view.id)
    assert verify_password("  pass word  ", stored["password"])
    assert not verify_password("pass word", stored["password"])
