# videotube/core/security.py
from __future__ import annotations

"""
VideoTube · Authentication & Security Helpers
=============================================
- Password hashing via Passlib bcrypt
- Access/refresh JWT creation (`sub`, `jti`, `iat`, `exp`, `token_type`)
- `issue_token_pair` for login and rotation (pure; persistence lives in
  `videotube.services.token_service`)
- FastAPI dependencies resolving the **current account** from the
  `Authorization: Bearer` header or the `accessToken` cookie

Decoding is delegated to `videotube.core.jwt`.
"""

from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Mapping, Optional
from uuid import uuid4
import logging

from fastapi import Depends, Request
from jose import jwt
from passlib.context import CryptContext

from videotube.core.config import settings
from videotube.core.exceptions import InvalidTokenException
from videotube.core.jwt import TokenKind, get_bearer_token, verify_token
from videotube.db.session import get_document_store
from videotube.db.store import USERS, DocumentStore
from videotube.schemas.auth import CredentialPair
from videotube.schemas.user import AccountPublicView

# ───────────────────────────────────────────────
# 🔐 Security Constants and Setup
# ───────────────────────────────────────────────
ALGORITHM: str = settings.JWT_ALGORITHM
ACCESS_COOKIE = "accessToken"
REFRESH_COOKIE = "refreshToken"

pwd_context = CryptContext(
    schemes=["bcrypt"],
    deprecated="auto",
    bcrypt__rounds=settings.BCRYPT_ROUNDS,
)
logger = logging.getLogger("videotube.security")


# ───────────────────────────────────────────────
# 🔐 Password Hashing Utilities
# ───────────────────────────────────────────────
def get_password_hash(password: str) -> str:
    """Return a salted hash using Passlib's bcrypt."""
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: Optional[str]) -> bool:
    """Constant-time verify of a plaintext password against a stored hash."""
    if not hashed_password:
        return False
    try:
        return pwd_context.verify(plain_password, hashed_password)
    except ValueError:
        # Unrecognized/corrupt hash format
        logger.warning("Stored password hash could not be parsed")
        return False


# ───────────────────────────────────────────────
# 🪪 JWT · Token Generation
# ───────────────────────────────────────────────
def _sign(claims: Dict[str, Any], kind: TokenKind, lifetime: timedelta) -> str:
    now = datetime.now(timezone.utc)
    payload: Dict[str, Any] = {
        **claims,
        "iat": now,
        "exp": now + lifetime,
        "jti": str(uuid4()),
        "token_type": kind.value,
    }
    return jwt.encode(payload, kind.secret, algorithm=ALGORITHM)


def create_access_token(account: Mapping[str, Any], expires_delta: Optional[timedelta] = None) -> str:
    """Short-lived token carrying the account's identity claims."""
    claims = {
        "sub": str(account["id"]),
        "email": account.get("email"),
        "username": account.get("username"),
        "full_name": account.get("full_name"),
    }
    lifetime = expires_delta or timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
    return _sign(claims, TokenKind.ACCESS, lifetime)


def create_refresh_token(account_id: str, expires_delta: Optional[timedelta] = None) -> str:
    """Long-lived token carrying only the account id."""
    lifetime = expires_delta or timedelta(days=settings.REFRESH_TOKEN_EXPIRE_DAYS)
    return _sign({"sub": str(account_id)}, TokenKind.REFRESH, lifetime)


def issue_token_pair(account: Mapping[str, Any]) -> CredentialPair:
    """Mint a fresh access/refresh pair for `account`. No I/O."""
    return CredentialPair(
        access_token=create_access_token(account),
        refresh_token=create_refresh_token(str(account["id"])),
    )


# ───────────────────────────────────────────────
# 👤 Dependency · Get Current User
# ───────────────────────────────────────────────
def _presented_access_token(request: Request) -> Optional[str]:
    """Bearer header first, then the `accessToken` cookie.

    A malformed `Authorization` header only fails the request when there is
    no cookie to fall back to.
    """
    cookie = request.cookies.get(ACCESS_COOKIE)
    try:
        return get_bearer_token(request) or cookie
    except InvalidTokenException:
        if cookie:
            return cookie
        raise


async def _load_account(store: DocumentStore, token: str) -> AccountPublicView:
    account_id = verify_token(token, TokenKind.ACCESS)
    account = await store.find_by_id(USERS, account_id)
    if account is None:
        logger.warning("Access token references a missing account")
        raise InvalidTokenException("Invalid access token")
    return AccountPublicView.model_validate(account)


async def get_current_user(
    request: Request,
    store: DocumentStore = Depends(get_document_store),
) -> AccountPublicView:
    """Authenticate the caller from the presented **access** token.

    Steps:
    1) Read the token from the Bearer header, else the `accessToken` cookie.
    2) Verify signature, expiry and kind via `videotube.core.jwt`.
    3) Load the account; a token for a deleted account is rejected.
    """
    token = _presented_access_token(request)
    if not token:
        raise InvalidTokenException("Unauthorized request")
    user = await _load_account(store, token)
    request.state.user_id = user.id
    return user


async def get_optional_user(
    request: Request,
    store: DocumentStore = Depends(get_document_store),
) -> Optional[AccountPublicView]:
    """Like `get_current_user`, but anonymous callers resolve to `None`.

    A token that is present but invalid is still rejected with 401.
    """
    token = _presented_access_token(request)
    if not token:
        return None
    user = await _load_account(store, token)
    request.state.user_id = user.id
    return user


__all__ = [
    "ACCESS_COOKIE",
    "REFRESH_COOKIE",
    "pwd_context",
    "get_password_hash",
    "verify_password",
    "create_access_token",
    "create_refresh_token",
    "issue_token_pair",
    "get_current_user",
    "get_optional_user",
]
