"""
Account service
===============

Profile maintenance for an authenticated account:

- `get_current_user`          public view by id
- `change_password`           verify old password, store new hash
- `update_account_details`    username/email/full_name (uniqueness enforced)
- `update_avatar`             replace avatar URL
- `update_cover_image`        replace cover image URL

Only the fields named by each operation are written.
"""

import logging
from typing import Any, Dict, Optional

from fastapi import status

from videotube.core.exceptions import (
    ConflictException,
    MissingAssetException,
    NotFoundException,
    UnauthorizedException,
    ValidationException,
)
from videotube.core.security import get_password_hash, verify_password
from videotube.db.store import USERS, Document, DocumentStore, DuplicateKeyError
from videotube.schemas.user import AccountPublicView
from videotube.services.validation import ensure_required_fields, normalize_handle

logger = logging.getLogger("videotube.auth.account")


async def _require_account(store: DocumentStore, account_id: str) -> Document:
    account = await store.find_by_id(USERS, account_id)
    if account is None:
        raise NotFoundException("User not found")
    return account


async def _update(store: DocumentStore, account_id: str, values: Dict[str, Any]) -> AccountPublicView:
    try:
        updated = await store.update_by_id(USERS, account_id, values)
    except DuplicateKeyError:
        raise ConflictException("User already exists on this email or username")
    if updated is None:
        raise NotFoundException("User not found")
    return AccountPublicView.model_validate(updated)


# ─────────────────────────────────────────────────────────────
# 👤 Read
# ─────────────────────────────────────────────────────────────
async def get_current_user(store: DocumentStore, account_id: str) -> AccountPublicView:
    return AccountPublicView.model_validate(await _require_account(store, account_id))


# ─────────────────────────────────────────────────────────────
# 🔑 Password
# ─────────────────────────────────────────────────────────────
async def change_password(
    store: DocumentStore,
    account_id: str,
    old_password: Optional[str],
    new_password: Optional[str],
) -> None:
    """Replace the password hash after checking the old password.

    A wrong old password is an auth failure reported with HTTP 400.
    """
    if not new_password or not new_password.strip():
        raise ValidationException("New password is required")

    account = await _require_account(store, account_id)
    if not verify_password(old_password or "", account.get("password")):
        logger.info("Password change rejected for account %s", account_id)
        raise UnauthorizedException("Invalid old password", status_code=status.HTTP_400_BAD_REQUEST)

    await store.update_by_id(USERS, account_id, {"password": get_password_hash(new_password)})
    logger.info("Password changed for account %s", account_id)


# ─────────────────────────────────────────────────────────────
# ✏️ Profile fields
# ─────────────────────────────────────────────────────────────
async def update_account_details(
    store: DocumentStore,
    account_id: str,
    *,
    username: Optional[str],
    email: Optional[str],
    full_name: Optional[str],
) -> AccountPublicView:
    fields = ensure_required_fields(
        {"username": username, "email": email, "full_name": full_name},
        ("username", "email", "full_name"),
    )
    username_n = normalize_handle(fields["username"])
    email_n = normalize_handle(fields["email"])

    clash = await store.find_one(
        USERS,
        {"id": {"$ne": account_id}, "$or": [{"username": username_n}, {"email": email_n}]},
    )
    if clash is not None:
        raise ConflictException("User already exists on this email or username")

    return await _update(
        store,
        account_id,
        {"username": username_n, "email": email_n, "full_name": fields["full_name"]},
    )


async def update_avatar(store: DocumentStore, account_id: str, avatar_url: Optional[str]) -> AccountPublicView:
    if not avatar_url or not avatar_url.strip():
        raise MissingAssetException("Avatar file is missing")
    return await _update(store, account_id, {"avatar": avatar_url.strip()})


async def update_cover_image(store: DocumentStore, account_id: str, cover_image_url: Optional[str]) -> AccountPublicView:
    if not cover_image_url or not cover_image_url.strip():
        raise MissingAssetException("Cover image file is missing")
    return await _update(store, account_id, {"cover_image": cover_image_url.strip()})


__all__ = [
    "get_current_user",
    "change_password",
    "update_account_details",
    "update_avatar",
    "update_cover_image",
]
