from __future__ import annotations

"""
👤 VideoTube · User (accounts & credentials)
============================================

Canonical account entity: identity fields, the bcrypt password hash, media
references, the watch-history sequence and the single refresh-token slot.

Design highlights
-----------------
• **Case-insensitive uniqueness**: `username` and `email` are stored lowercased
  and carry plain unique indexes.
• **Single refresh-token slot**: `refresh_token` holds the only valid
  long-lived token; rotation is a conditional UPDATE on this column.
• **Ordered watch history**: a JSON array of video ids in append order.
"""

from sqlalchemy import JSON, CheckConstraint, Column, Index, String, Text

from videotube.db.base_class import Base, TimestampMixin, UUIDPKMixin


class User(UUIDPKMixin, TimestampMixin, Base):
    __tablename__ = "users"

    # ── Identity ────────────────────────────────────────────────────────────
    username = Column(String(64), nullable=False, unique=True, doc="Channel handle (lowercased)")
    email = Column(String(320), nullable=False, unique=True, doc="Login email (lowercased)")
    full_name = Column(String(128), nullable=False)

    # ── Media references ────────────────────────────────────────────────────
    avatar = Column(String(2048), nullable=False)
    cover_image = Column(String(2048), nullable=False, server_default="")

    # ── Credentials ─────────────────────────────────────────────────────────
    password = Column(String, nullable=False, doc="BCrypt hash of the password")
    refresh_token = Column(Text, nullable=True, doc="Current refresh token; NULL when logged out")

    # ── Engagement ──────────────────────────────────────────────────────────
    watch_history = Column(JSON, nullable=False, default=list)

    __mapper_args__ = {"eager_defaults": True}

    __table_args__ = (
        CheckConstraint("length(trim(username)) > 0", name="username_not_blank"),
        CheckConstraint("length(trim(email)) > 0", name="email_not_blank"),
        Index("ix_users_full_name", "full_name"),
    )
