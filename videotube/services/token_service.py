# videotube/services/token_service.py

from __future__ import annotations

"""
VideoTube · Refresh Token Slot
==============================
Each account has exactly one persisted refresh token (`users.refresh_token`).

- `generate_access_and_refresh_tokens` mints a pair and overwrites the slot,
  invalidating whatever refresh token was there before.
- `rotate_refresh_token` swaps the slot only if it still holds the presented
  token. The check and the write are one conditional update, so of two
  concurrent refreshes with the same token exactly one wins.
- `revoke_refresh_token` clears the slot (logout).

Tokens are minted by `videotube.core.security.issue_token_pair`.
"""

import logging
from typing import Any, Mapping

from videotube.core.exceptions import InternalException, InvalidTokenException
from videotube.core.security import issue_token_pair
from videotube.db.store import USERS, DocumentStore
from videotube.schemas.auth import CredentialPair

logger = logging.getLogger("videotube.auth.token")


# ──────────────────────────────────────────────────────────────────────────────
# 🔐 Issue + persist
# ──────────────────────────────────────────────────────────────────────────────
async def generate_access_and_refresh_tokens(store: DocumentStore, account: Mapping[str, Any]) -> CredentialPair:
    """Issue a pair for `account` and overwrite its refresh-token slot."""
    pair = issue_token_pair(account)
    try:
        updated = await store.update_by_id(USERS, str(account["id"]), {"refresh_token": pair.refresh_token})
    except Exception as e:
        logger.error("Failed to persist refresh token for %s: %s", account.get("id"), e)
        raise InternalException("Something went wrong while generating refresh and access token") from e

    if updated is None:
        logger.error("Account %s vanished while persisting refresh token", account.get("id"))
        raise InternalException("Something went wrong while generating refresh and access token")
    return pair


# ──────────────────────────────────────────────────────────────────────────────
# 🔄 Rotate (compare-and-swap)
# ──────────────────────────────────────────────────────────────────────────────
async def rotate_refresh_token(
    store: DocumentStore,
    account: Mapping[str, Any],
    presented: str,
) -> CredentialPair:
    """Replace `presented` with a fresh pair, or fail if it is no longer current."""
    pair = issue_token_pair(account)
    matched = await store.update_one(
        USERS,
        {"id": str(account["id"]), "refresh_token": presented},
        {"refresh_token": pair.refresh_token},
    )
    if matched != 1:
        logger.warning("Stale or reused refresh token for account %s", account.get("id"))
        raise InvalidTokenException("Refresh token is expired or used")
    return pair


# ──────────────────────────────────────────────────────────────────────────────
# 🚫 Revoke
# ──────────────────────────────────────────────────────────────────────────────
async def revoke_refresh_token(store: DocumentStore, account_id: str) -> None:
    """Clear the slot; a no-op when it is already empty."""
    await store.update_by_id(USERS, str(account_id), {"refresh_token": None})
    logger.info("Refresh token revoked for account %s", account_id)


__all__ = [
    "generate_access_and_refresh_tokens",
    "rotate_refresh_token",
    "revoke_refresh_token",
]
