# videotube/api/v1/routers/auth/register.py

"""
Registration API
================

POST /register
    Create an account from a JSON body. Media references (`avatar`,
    `cover_image`) are URLs already resolved by the upload client.

Responses
---------
- 201 `ApiResponse[AccountPublicView]`
- 400 blank required field / missing avatar
- 409 username or email taken
"""

import logging

from fastapi import APIRouter, Depends, status

from videotube.db.session import get_document_store
from videotube.db.store import DocumentStore
from videotube.schemas.auth import RegisterPayload
from videotube.schemas.response import ApiResponse
from videotube.schemas.user import AccountPublicView
from videotube.services.auth.signup_service import register_user

router = APIRouter(tags=["Auth"])
logger = logging.getLogger("videotube.api.register")


@router.post(
    "/register",
    response_model=ApiResponse[AccountPublicView],
    status_code=status.HTTP_201_CREATED,
    summary="Register a new account",
)
async def register(
    payload: RegisterPayload,
    store: DocumentStore = Depends(get_document_store),
) -> ApiResponse[AccountPublicView]:
    user = await register_user(store, payload)
    return ApiResponse(
        status_code=status.HTTP_201_CREATED,
        data=user,
        message="User registered successfully",
    )
