import anyio
import pytest

from videotube.core.exceptions import InternalException, InvalidTokenException
from videotube.core.jwt import TokenKind, verify_token
from videotube.db.store import USERS
from videotube.services.auth.refresh_service import refresh_session
from videotube.services.token_service import (
    generate_access_and_refresh_tokens,
    revoke_refresh_token,
    rotate_refresh_token,
)


@pytest.mark.anyio
async def test_generate_overwrites_the_single_slot(store, create_test_user):
    user = await create_test_user()

    first = await generate_access_and_refresh_tokens(store, user)
    second = await generate_access_and_refresh_tokens(store, user)

    stored = await store.find_by_id(USERS, user["id"])
    assert stored["refresh_token"] == second.refresh_token
    assert first.refresh_token != second.refresh_token
    assert verify_token(second.access_token, TokenKind.ACCESS) == user["id"]


@pytest.mark.anyio
async def test_generate_for_missing_account_is_internal_error(store):
    with pytest.raises(InternalException) as exc:
        await generate_access_and_refresh_tokens(store, {"id": "ghost", "email": "g@x.io"})
    assert exc.value.status_code == 500


@pytest.mark.anyio
async def test_rotate_is_single_use(store, create_test_user):
    user = await create_test_user()
    pair = await generate_access_and_refresh_tokens(store, user)

    rotated = await rotate_refresh_token(store, user, pair.refresh_token)
    assert rotated.refresh_token != pair.refresh_token

    with pytest.raises(InvalidTokenException):
        await rotate_refresh_token(store, user, pair.refresh_token)

    stored = await store.find_by_id(USERS, user["id"])
    assert stored["refresh_token"] == rotated.refresh_token


@pytest.mark.anyio
async def test_concurrent_refreshes_have_exactly_one_winner(store, create_test_user):
    user = await create_test_user()
    pair = await generate_access_and_refresh_tokens(store, user)
    outcomes = []

    async def attempt():
        try:
            outcomes.append(await refresh_session(store, pair.refresh_token))
        except InvalidTokenException as exc:
            outcomes.append(exc)

    async with anyio.create_task_group() as tg:
        tg.start_soon(attempt)
        tg.start_soon(attempt)

    winners = [o for o in outcomes if not isinstance(o, Exception)]
    assert len(winners) == 1
    stored = await store.find_by_id(USERS, user["id"])
    assert stored["refresh_token"] == winners[0].refresh_token


@pytest.mark.anyio
async def test_revoke_is_idempotent(store, create_test_user):
    user = await create_test_user()
    pair = await generate_access_and_refresh_tokens(store, user)

    await revoke_refresh_token(store, user["id"])
    await revoke_refresh_token(store, user["id"])

    assert (await store.find_by_id(USERS, user["id"]))["refresh_token"] is None
    with pytest.raises(InvalidTokenException):
        await refresh_session(store, pair.refresh_token)


@pytest.mark.anyio
async def test_refresh_for_deleted_account_is_rejected(store):
    from videotube.core.security import create_refresh_token

    with pytest.raises(InvalidTokenException):
        await refresh_session(store, create_refresh_token("no-such-account"))
