# videotube/api/v1/routers/auth/password.py

from typing import Any, Dict

from fastapi import APIRouter, Depends

from videotube.core.security import get_current_user
from videotube.db.session import get_document_store
from videotube.db.store import DocumentStore
from videotube.schemas.auth import ChangePasswordRequest
from videotube.schemas.response import ApiResponse
from videotube.schemas.user import AccountPublicView
from videotube.services.auth.account_service import change_password

router = APIRouter(tags=["Auth"])


@router.post("/change-password", response_model=ApiResponse[Dict[str, Any]], summary="Change password")
async def change_current_password(
    payload: ChangePasswordRequest,
    current_user: AccountPublicView = Depends(get_current_user),
    store: DocumentStore = Depends(get_document_store),
) -> ApiResponse[Dict[str, Any]]:
    """Requires the current password; the refresh-token slot is left untouched."""
    await change_password(store, current_user.id, payload.old_password, payload.new_password)
    return ApiResponse(data={}, message="Password changed successfully")
