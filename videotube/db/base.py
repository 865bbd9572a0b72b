"""
VideoTube · SQLAlchemy Base registry
====================================

Import all ORM models so their tables are registered on `Base.metadata`.
Alembic autogeneration and `SqlDocumentStore` both resolve collections
through this registry.

Tip: Keep this file import-only; no runtime logic.
"""

from videotube.db.base_class import Base

from videotube.db.models.user import User
from videotube.db.models.video import Video
from videotube.db.models.subscription import Subscription

__all__ = [
    "Base",
    "User",
    "Video",
    "Subscription",
]
