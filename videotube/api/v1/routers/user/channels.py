"""
Channel profile endpoint.

GET /c/{username}
    Public view of a channel. When the caller is authenticated,
    `is_subscribed` reflects whether they subscribe to it; anonymous callers
    always see `false`.
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Path

from videotube.core.security import get_optional_user
from videotube.db.session import get_document_store
from videotube.db.store import DocumentStore
from videotube.schemas.response import ApiResponse
from videotube.schemas.user import AccountPublicView, ChannelProfile
from videotube.services.channel_service import channel_profile

logger = logging.getLogger("videotube.api.channels")

router = APIRouter(tags=["Channels"])


@router.get("/c/{username}", response_model=ApiResponse[ChannelProfile], summary="Channel profile")
async def get_channel_profile(
    username: str = Path(..., max_length=64),
    viewer: Optional[AccountPublicView] = Depends(get_optional_user),
    store: DocumentStore = Depends(get_document_store),
) -> ApiResponse[ChannelProfile]:
    profile = await channel_profile(store, username, viewer.id if viewer else None)
    return ApiResponse(data=profile, message="User channel fetched successfully")
