from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict


class AccountPublicView(BaseModel):
    """Account as returned to callers.

    Undeclared document fields (`password`, `refresh_token`) are dropped on
    validation, so no code path can leak them.
    """

    model_config = ConfigDict(from_attributes=True, extra="ignore")

    id: str
    username: str
    email: str
    full_name: str
    avatar: str
    cover_image: str = ""
    watch_history: List[str] = []
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class UpdateAccountRequest(BaseModel):
    username: Optional[str] = None
    email: Optional[str] = None
    full_name: Optional[str] = None


class AvatarUpdateRequest(BaseModel):
    avatar: Optional[str] = None


class CoverImageUpdateRequest(BaseModel):
    cover_image: Optional[str] = None


# ─────────────────────────────────────────────────────────────
# Derived views
# ─────────────────────────────────────────────────────────────
class ChannelProfile(BaseModel):
    model_config = ConfigDict(extra="ignore")

    id: str
    username: str
    full_name: str
    avatar: str
    cover_image: str = ""
    subscribers_count: int = 0
    channels_subscribed_to_count: int = 0
    is_subscribed: bool = False


class VideoOwner(BaseModel):
    model_config = ConfigDict(extra="ignore")

    id: str
    username: str
    full_name: str
    avatar: str


class WatchHistoryItem(BaseModel):
    model_config = ConfigDict(extra="ignore")

    id: str
    title: str
    description: str = ""
    video_file: str
    thumbnail: str
    duration: float = 0
    views: int = 0
    is_published: bool = True
    owner: Optional[VideoOwner] = None
    created_at: Optional[datetime] = None
