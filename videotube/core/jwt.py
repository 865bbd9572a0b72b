# videotube/core/jwt.py
from __future__ import annotations

"""
VideoTube · JWT helpers
=======================
- `TokenKind` pairs each token kind with its own signing secret
- `decode_token` verifies signature, expiry and `token_type`
- `verify_token` returns the account id carried in `sub`
- Case-insensitive Bearer token extraction

Notes
-----
- Token *creation* lives in `videotube.core.security`.
- Access and refresh tokens are signed with independent secrets, so a token
  of one kind never verifies as the other even before the type check runs.
"""

from enum import Enum
from typing import Any, Dict, Optional
import logging

from fastapi import Request
from jose import ExpiredSignatureError, JWTError, jwt

from videotube.core.config import settings
from videotube.core.exceptions import InvalidTokenException

logger = logging.getLogger("videotube.auth")


class TokenKind(str, Enum):
    ACCESS = "access"
    REFRESH = "refresh"

    @property
    def secret(self) -> str:
        if self is TokenKind.ACCESS:
            return settings.ACCESS_TOKEN_SECRET.get_secret_value()
        return settings.REFRESH_TOKEN_SECRET.get_secret_value()


# ─────────────────────────────────────────────────────────────
# 🔓 Decode & verify
# ─────────────────────────────────────────────────────────────
def decode_token(token: Optional[str], kind: TokenKind) -> Dict[str, Any]:
    """Decode and validate a JWT of the given kind.

    Raises
    ------
    InvalidTokenException
      - missing/blank token
      - bad signature, malformed token or expired `exp`
      - `token_type` does not match `kind`
      - missing `sub` or `jti`
    """
    if not token or not token.strip():
        raise InvalidTokenException("Unauthorized request")

    try:
        payload = jwt.decode(token.strip(), kind.secret, algorithms=[settings.JWT_ALGORITHM])
    except ExpiredSignatureError:
        logger.info("%s token expired", kind.value)
        raise InvalidTokenException(f"{kind.value.capitalize()} token has expired")
    except JWTError as e:
        logger.warning("JWT decoding failed (%s): %s", kind.value, e)
        raise InvalidTokenException(f"Invalid {kind.value} token")

    if payload.get("token_type") != kind.value:
        logger.warning("Token type mismatch: got %r, expected %r", payload.get("token_type"), kind.value)
        raise InvalidTokenException(f"Invalid {kind.value} token")

    if not payload.get("sub") or not payload.get("jti"):
        logger.warning("Missing sub/jti in %s token payload", kind.value)
        raise InvalidTokenException(f"Invalid {kind.value} token")

    return payload


def verify_token(token: Optional[str], kind: TokenKind) -> str:
    """Return the account id (`sub`) of a valid token of `kind`."""
    return str(decode_token(token, kind)["sub"])


# ─────────────────────────────────────────────────────────────
# 📥 Extract tokens from a request
# ─────────────────────────────────────────────────────────────
def get_bearer_token(request: Request) -> Optional[str]:
    """Extract a Bearer token from the `Authorization` header, if present."""
    auth_header = request.headers.get("Authorization")
    if not auth_header:
        return None

    parts = auth_header.split()
    if len(parts) != 2 or parts[0].lower() != "bearer":
        logger.warning("Malformed Authorization header")
        raise InvalidTokenException("Invalid Authorization scheme")

    return parts[1].strip() or None


__all__ = ["TokenKind", "decode_token", "verify_token", "get_bearer_token"]
