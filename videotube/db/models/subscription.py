from __future__ import annotations

"""
🔔 VideoTube · Subscription (subscriber → channel edge)
=======================================================

Directed edge of the follows relation. Both ends reference `users.id`.
The pair is unique, so the relation behaves as a set.
"""

from sqlalchemy import Column, ForeignKey, UniqueConstraint, Uuid

from videotube.db.base_class import Base, TimestampMixin, UUIDPKMixin


class Subscription(UUIDPKMixin, TimestampMixin, Base):
    __tablename__ = "subscriptions"

    subscriber = Column(
        Uuid(as_uuid=False),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    channel = Column(
        Uuid(as_uuid=False),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    __table_args__ = (
        UniqueConstraint("subscriber", "channel", name="uq_subscriptions_subscriber_channel"),
    )
