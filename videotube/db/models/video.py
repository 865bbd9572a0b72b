from __future__ import annotations

"""
🎬 VideoTube · Video (media item)
=================================

An uploaded media item owned by a channel (`users.id`). The file and
thumbnail are opaque URLs returned by the external media host.
"""

from sqlalchemy import Boolean, Column, Float, ForeignKey, Index, Integer, String, Text, Uuid, text

from videotube.db.base_class import Base, TimestampMixin, UUIDPKMixin


class Video(UUIDPKMixin, TimestampMixin, Base):
    __tablename__ = "videos"

    owner = Column(
        Uuid(as_uuid=False),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=False, server_default="")
    video_file = Column(String(2048), nullable=False)
    thumbnail = Column(String(2048), nullable=False)
    duration = Column(Float, nullable=False, server_default=text("0"))
    views = Column(Integer, nullable=False, server_default=text("0"))
    is_published = Column(Boolean, nullable=False, server_default=text("true"))

    __mapper_args__ = {"eager_defaults": True}

    __table_args__ = (
        Index("ix_videos_owner_published", "owner", "is_published"),
    )
