# videotube/api/v1/routers/auth/refresh_logout.py

"""
Refresh & Logout API
====================

Endpoints
---------
POST /refresh-token
    Rotate the refresh token. The token is read from the JSON body
    (`refresh_token`) or, when the body has none, from the `refreshToken`
    cookie. A token that is not the account's current one is rejected with
    401, which also catches replays of already-rotated tokens.

POST /logout
    Clear the caller's refresh-token slot and delete both auth cookies.

Both responses carry `Cache-Control: no-store`.
"""

import logging
from typing import Any, Dict, Optional

from fastapi import APIRouter, Body, Depends, Request, Response

from videotube.core.security import REFRESH_COOKIE, get_current_user
from videotube.db.session import get_document_store
from videotube.db.store import DocumentStore
from videotube.schemas.auth import CredentialPair, RefreshTokenRequest
from videotube.schemas.response import ApiResponse
from videotube.schemas.user import AccountPublicView
from videotube.security_headers import clear_auth_cookies, set_auth_cookies
from videotube.services.auth.logout_service import logout_user
from videotube.services.auth.refresh_service import refresh_session

router = APIRouter(tags=["Tokens & Sessions"])
logger = logging.getLogger("videotube.api.refresh_logout")


# ──────────────────────────────────────────────────────────────────────────────
# 🔄 Refresh
# ──────────────────────────────────────────────────────────────────────────────
@router.post("/refresh-token", response_model=ApiResponse[CredentialPair], summary="Rotate refresh token")
async def refresh_token(
    request: Request,
    response: Response,
    payload: Optional[RefreshTokenRequest] = Body(None),
    store: DocumentStore = Depends(get_document_store),
) -> ApiResponse[CredentialPair]:
    presented = (payload.refresh_token if payload else None) or request.cookies.get(REFRESH_COOKIE)
    pair = await refresh_session(store, presented)

    set_auth_cookies(response, access_token=pair.access_token, refresh_token=pair.refresh_token)
    return ApiResponse(data=pair, message="Access token refreshed")


# ──────────────────────────────────────────────────────────────────────────────
# 🚪 Logout
# ──────────────────────────────────────────────────────────────────────────────
@router.post("/logout", response_model=ApiResponse[Dict[str, Any]], summary="Log out")
async def logout(
    response: Response,
    current_user: AccountPublicView = Depends(get_current_user),
    store: DocumentStore = Depends(get_document_store),
) -> ApiResponse[Dict[str, Any]]:
    await logout_user(store, current_user.id)

    clear_auth_cookies(response)
    return ApiResponse(data={}, message="User logged Out")
