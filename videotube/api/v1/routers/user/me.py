# ╔══════════════════════════════════════════════════════════════════════════╗
# ║ VideoTube · Account API (profile, media references, history)             ║
# ╠──────────────────────────────────────────────────────────────────────────╣
# ║ Endpoints (user-authenticated):                                           ║
# ║  - GET    /current-user     → Current account                             ║
# ║  - PATCH  /update-account   → Update username, email, full name           ║
# ║  - PATCH  /avatar           → Replace avatar URL                          ║
# ║  - PATCH  /cover-image      → Replace cover image URL                     ║
# ║  - GET    /history          → Watch history (stored order)                ║
# ╠──────────────────────────────────────────────────────────────────────────╣
# ║ Security                                                                  ║
# ║  - Auth: requires an authenticated account from `get_current_user`.      ║
# ║  - Cache control: responses return `Cache-Control: no-store`.            ║
# ╚══════════════════════════════════════════════════════════════════════════╝
"""Account endpoints for the authenticated caller."""

import logging
from typing import List

from fastapi import APIRouter, Depends, Response

from videotube.core.security import get_current_user
from videotube.db.session import get_document_store
from videotube.db.store import DocumentStore
from videotube.schemas.response import ApiResponse
from videotube.schemas.user import (
    AccountPublicView,
    AvatarUpdateRequest,
    CoverImageUpdateRequest,
    UpdateAccountRequest,
    WatchHistoryItem,
)
from videotube.security_headers import set_sensitive_cache
from videotube.services import channel_service
from videotube.services.auth import account_service

logger = logging.getLogger("videotube.api.me")

router = APIRouter(tags=["User"])


@router.get("/current-user", response_model=ApiResponse[AccountPublicView], summary="Current account")
async def current_user(
    response: Response,
    user: AccountPublicView = Depends(get_current_user),
) -> ApiResponse[AccountPublicView]:
    set_sensitive_cache(response)
    return ApiResponse(data=user, message="Current user fetched successfully")


@router.patch("/update-account", response_model=ApiResponse[AccountPublicView], summary="Update account details")
async def update_account(
    payload: UpdateAccountRequest,
    response: Response,
    user: AccountPublicView = Depends(get_current_user),
    store: DocumentStore = Depends(get_document_store),
) -> ApiResponse[AccountPublicView]:
    updated = await account_service.update_account_details(
        store,
        user.id,
        username=payload.username,
        email=payload.email,
        full_name=payload.full_name,
    )
    set_sensitive_cache(response)
    return ApiResponse(data=updated, message="Account details updated successfully")


@router.patch("/avatar", response_model=ApiResponse[AccountPublicView], summary="Update avatar")
async def update_avatar(
    payload: AvatarUpdateRequest,
    response: Response,
    user: AccountPublicView = Depends(get_current_user),
    store: DocumentStore = Depends(get_document_store),
) -> ApiResponse[AccountPublicView]:
    updated = await account_service.update_avatar(store, user.id, payload.avatar)
    set_sensitive_cache(response)
    return ApiResponse(data=updated, message="Avatar image updated successfully")


@router.patch("/cover-image", response_model=ApiResponse[AccountPublicView], summary="Update cover image")
async def update_cover_image(
    payload: CoverImageUpdateRequest,
    response: Response,
    user: AccountPublicView = Depends(get_current_user),
    store: DocumentStore = Depends(get_document_store),
) -> ApiResponse[AccountPublicView]:
    updated = await account_service.update_cover_image(store, user.id, payload.cover_image)
    set_sensitive_cache(response)
    return ApiResponse(data=updated, message="Cover image updated successfully")


@router.get("/history", response_model=ApiResponse[List[WatchHistoryItem]], summary="Watch history")
async def history(
    response: Response,
    user: AccountPublicView = Depends(get_current_user),
    store: DocumentStore = Depends(get_document_store),
) -> ApiResponse[List[WatchHistoryItem]]:
    items = await channel_service.watch_history(store, user.id)
    set_sensitive_cache(response)
    return ApiResponse(data=items, message="Watch history fetched successfully")
