"""
Signup service
==============

Core implementation of **account registration**, separate from the API layer.

Key behaviors
-------------
- Required fields (`full_name`, `email`, `username`, `password`) must be
  non-blank after trimming; checked before any store access. The password
  itself is hashed exactly as sent.
- Username and email are **normalized** (trimmed, lowercased), so uniqueness
  is case-insensitive.
- Duplicate handling is **race-safe**: the pre-check gives the friendly 409
  and the store's unique index catches the concurrent case.
- The password is hashed server-side; the returned view never carries the
  hash or the refresh-token slot.
"""

import logging

from videotube.core.exceptions import ConflictException, InternalException, MissingAssetException
from videotube.core.security import get_password_hash
from videotube.db.store import USERS, DocumentStore, DuplicateKeyError
from videotube.schemas.auth import RegisterPayload
from videotube.schemas.user import AccountPublicView
from videotube.services.validation import ensure_required_fields, normalize_handle

logger = logging.getLogger("videotube.auth.signup")

REQUIRED_FIELDS = ("full_name", "email", "username", "password")


# ─────────────────────────────────────────────────────────────
# 📝 Register a new account
# ─────────────────────────────────────────────────────────────
async def register_user(store: DocumentStore, payload: RegisterPayload) -> AccountPublicView:
    """Create an account and return its public view.

    Raises
    ------
    ValidationException    400 when a required field is blank
    ConflictException      409 when the username or email is taken
    MissingAssetException  400 when no avatar reference is supplied
    InternalException      500 when the new account cannot be read back
    """
    fields = ensure_required_fields(payload.model_dump(), REQUIRED_FIELDS)
    username = normalize_handle(fields["username"])
    email = normalize_handle(fields["email"])

    existing = await store.find_one(USERS, {"$or": [{"username": username}, {"email": email}]})
    if existing is not None:
        logger.info("Registration rejected: username or email already in use")
        raise ConflictException("User already exists on this email or username")

    avatar = (payload.avatar or "").strip()
    if not avatar:
        raise MissingAssetException("Avatar file is required")

    try:
        created = await store.insert(
            USERS,
            {
                "full_name": fields["full_name"],
                "email": email,
                "username": username,
                "password": get_password_hash(payload.password),
                "avatar": avatar,
                "cover_image": (payload.cover_image or "").strip(),
                "watch_history": [],
                "refresh_token": None,
            },
        )
    except DuplicateKeyError:
        logger.info("Registration lost a race on a unique field")
        raise ConflictException("User already exists on this email or username")

    # Re-read so the response reflects what was actually stored
    account = await store.find_by_id(USERS, created["id"])
    if account is None:
        logger.error("Newly registered account %s could not be read back", created["id"])
        raise InternalException("Something went wrong while registering the user")

    logger.info("Registered account %s", account["id"])
    return AccountPublicView.model_validate(account)


__all__ = ["register_user", "REQUIRED_FIELDS"]
