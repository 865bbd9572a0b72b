# videotube/api/v1/routers/auth/login.py

"""
Login API
=========

POST /login
    Authenticate with username or email plus password. On success both
    tokens are returned in the body **and** set as HTTP-only cookies; the
    response is marked `no-store`.
"""

import logging

from fastapi import APIRouter, Depends, Response

from videotube.db.session import get_document_store
from videotube.db.store import DocumentStore
from videotube.schemas.auth import LoginRequest, LoginResult
from videotube.schemas.response import ApiResponse
from videotube.security_headers import set_auth_cookies
from videotube.services.auth.login_service import login_user

router = APIRouter(tags=["Auth"])
logger = logging.getLogger("videotube.api.login")


@router.post("/login", response_model=ApiResponse[LoginResult], summary="Log in")
async def login(
    payload: LoginRequest,
    response: Response,
    store: DocumentStore = Depends(get_document_store),
) -> ApiResponse[LoginResult]:
    result = await login_user(store, payload)

    set_auth_cookies(response, access_token=result.access_token, refresh_token=result.refresh_token)
    return ApiResponse(data=result, message="User logged In Successfully")
