"""
Channel & history views
=======================

Read-only views assembled with `videotube.db.pipeline`:

- `channel_profile`  subscriber counts and whether the viewer subscribes
- `watch_history`    watched videos, each with a reduced owner projection

Neither view writes to the store or keeps state between calls.
"""

import logging
from typing import List, Optional

from videotube.core.exceptions import NotFoundException, ValidationException
from videotube.db.pipeline import First, In, Pipeline, Size, aggregate
from videotube.db.store import SUBSCRIPTIONS, USERS, VIDEOS, DocumentStore
from videotube.schemas.user import ChannelProfile, WatchHistoryItem
from videotube.services.validation import normalize_handle

logger = logging.getLogger("videotube.channels")

OWNER_FIELDS = ("full_name", "username", "avatar")


# ─────────────────────────────────────────────────────────────
# 📺 Channel profile
# ─────────────────────────────────────────────────────────────
def channel_profile_pipeline(username: str, viewer_id: Optional[str] = None) -> Pipeline:
    return (
        Pipeline()
        .match({"username": username})
        .lookup(from_=SUBSCRIPTIONS, local_field="id", foreign_field="channel", as_="subscribers")
        .lookup(from_=SUBSCRIPTIONS, local_field="id", foreign_field="subscriber", as_="subscribed_to")
        .add_fields(
            subscribers_count=Size("subscribers"),
            channels_subscribed_to_count=Size("subscribed_to"),
            is_subscribed=In(viewer_id, "subscribers.subscriber"),
        )
        .project(
            "username",
            "full_name",
            "avatar",
            "cover_image",
            "subscribers_count",
            "channels_subscribed_to_count",
            "is_subscribed",
        )
    )


async def channel_profile(
    store: DocumentStore,
    username: Optional[str],
    viewer_id: Optional[str] = None,
) -> ChannelProfile:
    """Profile of the channel `username` as seen by `viewer_id` (anonymous when None)."""
    if not username or not username.strip():
        raise ValidationException("Username is missing")

    docs = await aggregate(store, USERS, channel_profile_pipeline(normalize_handle(username), viewer_id))
    if not docs:
        raise NotFoundException("Channel not found")
    return ChannelProfile.model_validate(docs[0])


# ─────────────────────────────────────────────────────────────
# 🕘 Watch history
# ─────────────────────────────────────────────────────────────
def watch_history_pipeline(account_id: str) -> Pipeline:
    owner = Pipeline().project(*OWNER_FIELDS)
    videos = (
        Pipeline()
        .lookup(from_=USERS, local_field="owner", foreign_field="id", as_="owner", pipeline=owner)
        .add_fields(owner=First("owner"))
    )
    return (
        Pipeline()
        .match({"id": account_id})
        .lookup(from_=VIDEOS, local_field="watch_history", foreign_field="id", as_="watch_history", pipeline=videos)
        .project("watch_history")
    )


async def watch_history(store: DocumentStore, account_id: str) -> List[WatchHistoryItem]:
    """Videos in the account's stored order; ids with no video are skipped."""
    docs = await aggregate(store, USERS, watch_history_pipeline(account_id))
    if not docs:
        raise NotFoundException("User not found")
    items = docs[0].get("watch_history") or []
    return [WatchHistoryItem.model_validate(item) for item in items]


__all__ = [
    "channel_profile",
    "channel_profile_pipeline",
    "watch_history",
    "watch_history_pipeline",
]
