"""
Refresh service
===============

Exchanges a refresh token for a new pair.

Steps
-----
1. Verify the token as a **refresh** token (signature, expiry, kind).
2. Load the account named by `sub`.
3. Compare-and-swap the account's slot from the presented token to the new
   one. A replayed token, or the loser of two concurrent refreshes, finds the
   slot already changed and gets 401.
"""

import logging
from typing import Optional

from videotube.core.exceptions import InvalidTokenException
from videotube.core.jwt import TokenKind, verify_token
from videotube.db.store import USERS, DocumentStore
from videotube.schemas.auth import CredentialPair
from videotube.services.token_service import rotate_refresh_token

logger = logging.getLogger("videotube.auth.refresh")


async def refresh_session(store: DocumentStore, presented: Optional[str]) -> CredentialPair:
    if not presented or not presented.strip():
        raise InvalidTokenException("Unauthorized request")
    presented = presented.strip()

    account_id = verify_token(presented, TokenKind.REFRESH)

    account = await store.find_by_id(USERS, account_id)
    if account is None:
        logger.warning("Refresh token references a missing account")
        raise InvalidTokenException("Invalid refresh token")

    # Fast path for the common stale case; the swap below is what enforces it
    if account.get("refresh_token") != presented:
        logger.warning("Refresh token for account %s is not the current one", account_id)
        raise InvalidTokenException("Refresh token is expired or used")

    pair = await rotate_refresh_token(store, account, presented)
    logger.info("Rotated refresh token for account %s", account_id)
    return pair


__all__ = ["refresh_session"]
