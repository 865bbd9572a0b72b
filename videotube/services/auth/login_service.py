"""
Login service
=============

Authenticates by username **or** email plus password, then issues a token
pair and overwrites the account's refresh-token slot (any previously issued
refresh token stops working).

Errors
------
- 400 when neither identifier is supplied
- 404 when no account matches the identifier
- 401 on password mismatch
"""

import logging

from videotube.core.exceptions import NotFoundException, UnauthorizedException, ValidationException
from videotube.core.security import verify_password
from videotube.db.store import USERS, DocumentStore
from videotube.schemas.auth import LoginRequest, LoginResult
from videotube.schemas.user import AccountPublicView
from videotube.services.token_service import generate_access_and_refresh_tokens
from videotube.services.validation import normalize_handle

logger = logging.getLogger("videotube.auth.login")


async def login_user(store: DocumentStore, payload: LoginRequest) -> LoginResult:
    identifiers = []
    if payload.username and payload.username.strip():
        identifiers.append({"username": normalize_handle(payload.username)})
    if payload.email and payload.email.strip():
        identifiers.append({"email": normalize_handle(payload.email)})
    if not identifiers:
        raise ValidationException("Username or email is required")

    account = await store.find_one(USERS, {"$or": identifiers})
    if account is None:
        raise NotFoundException("User not found")

    if not verify_password(payload.password or "", account.get("password")):
        logger.info("Invalid password for account %s", account["id"])
        raise UnauthorizedException("Invalid user credentials")

    pair = await generate_access_and_refresh_tokens(store, account)

    logger.info("Account %s logged in", account["id"])
    return LoginResult(
        user=AccountPublicView.model_validate(account),
        access_token=pair.access_token,
        refresh_token=pair.refresh_token,
    )


__all__ = ["login_user"]
