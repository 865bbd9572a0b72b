import pytest

from videotube.db.memory import MemoryDocumentStore
from videotube.db.store import USERS, DuplicateKeyError, matches


# ─────────────────────────────────────────────────────────────
# Filters
# ─────────────────────────────────────────────────────────────
DOC = {"id": "1", "username": "alice", "refresh_token": None, "views": 3}


@pytest.mark.parametrize(
    "filter, expected",
    [
        ({}, True),
        ({"username": "alice"}, True),
        ({"username": "bob"}, False),
        ({"refresh_token": None}, True),
        ({"missing_field": None}, True),
        ({"username": None}, False),
        ({"username": {"$in": ["bob", "alice"]}}, True),
        ({"username": {"$in": []}}, False),
        ({"username": {"$ne": "bob"}}, True),
        ({"refresh_token": {"$ne": None}}, False),
        ({"$or": [{"username": "bob"}, {"views": 3}]}, True),
        ({"$or": [{"username": "bob"}, {"views": 4}]}, False),
        ({"username": "alice", "views": 4}, False),
    ],
)
def test_matches(filter, expected):
    assert matches(DOC, filter) is expected


def test_unknown_operator_is_an_error():
    with pytest.raises(ValueError):
        matches(DOC, {"views": {"$gt": 1}})


# ─────────────────────────────────────────────────────────────
# CRUD
# ─────────────────────────────────────────────────────────────
@pytest.mark.anyio
async def test_insert_assigns_id_and_timestamps(store: MemoryDocumentStore):
    doc = await store.insert(USERS, {"username": "alice", "email": "a@x.io"})

    assert isinstance(doc["id"], str) and doc["id"]
    assert doc["created_at"] is not None
    assert doc["updated_at"] == doc["created_at"]
    assert await store.find_by_id(USERS, doc["id"]) == doc


@pytest.mark.anyio
async def test_reads_return_copies(store: MemoryDocumentStore):
    doc = await store.insert(USERS, {"username": "alice", "email": "a@x.io", "watch_history": ["v1"]})

    fetched = await store.find_by_id(USERS, doc["id"])
    fetched["watch_history"].append("v2")
    fetched["username"] = "mallory"

    again = await store.find_by_id(USERS, doc["id"])
    assert again["watch_history"] == ["v1"]
    assert again["username"] == "alice"


@pytest.mark.anyio
async def test_unique_fields_are_enforced_on_insert_and_update(store: MemoryDocumentStore):
    await store.insert(USERS, {"username": "alice", "email": "a@x.io"})
    bob = await store.insert(USERS, {"username": "bob", "email": "b@x.io"})

    with pytest.raises(DuplicateKeyError):
        await store.insert(USERS, {"username": "alice", "email": "other@x.io"})
    with pytest.raises(DuplicateKeyError):
        await store.update_by_id(USERS, bob["id"], {"email": "a@x.io"})

    # Re-writing one's own value is not a clash
    updated = await store.update_by_id(USERS, bob["id"], {"email": "b@x.io", "full_name": "Bob"})
    assert updated["full_name"] == "Bob"


@pytest.mark.anyio
async def test_subscription_pair_is_unique(store: MemoryDocumentStore):
    await store.insert("subscriptions", {"subscriber": "a", "channel": "b"})
    await store.insert("subscriptions", {"subscriber": "b", "channel": "a"})

    with pytest.raises(DuplicateKeyError):
        await store.insert("subscriptions", {"subscriber": "a", "channel": "b"})


@pytest.mark.anyio
async def test_update_by_id_missing_returns_none(store: MemoryDocumentStore):
    assert await store.update_by_id(USERS, "nope", {"username": "x"}) is None


@pytest.mark.anyio
async def test_update_one_is_conditional(store: MemoryDocumentStore):
    doc = await store.insert(USERS, {"username": "alice", "email": "a@x.io", "refresh_token": "r1"})

    assert await store.update_one(USERS, {"id": doc["id"], "refresh_token": "r1"}, {"refresh_token": "r2"}) == 1
    # Second swap from the stale value matches nothing
    assert await store.update_one(USERS, {"id": doc["id"], "refresh_token": "r1"}, {"refresh_token": "r3"}) == 0

    assert (await store.find_by_id(USERS, doc["id"]))["refresh_token"] == "r2"


@pytest.mark.anyio
async def test_find_and_count(store: MemoryDocumentStore):
    for name in ("alice", "bob", "carol"):
        await store.insert(USERS, {"username": name, "email": f"{name}@x.io"})

    found = await store.find(USERS, {"username": {"$in": ["alice", "carol"]}})
    assert [d["username"] for d in found] == ["alice", "carol"]
    assert await store.count(USERS, {}) == 3
    assert await store.count(USERS, {"username": {"$ne": "bob"}}) == 2
    assert await store.find_one(USERS, {"username": "dave"}) is None
