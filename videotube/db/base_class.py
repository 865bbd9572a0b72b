from __future__ import annotations

"""
# VideoTube · SQLAlchemy Base & Mixins

SQLAlchemy 2.0 declarative **Base** with:
- Global **naming conventions** (Alembic-friendly)
- Automatic **snake_case `__tablename__`** (models may still set their own)
- Common mixins:
  - `UUIDPKMixin`: string UUID primary key (native UUID on PostgreSQL)
  - `TimestampMixin`: `created_at` / `updated_at` (UTC, server-side)

Usage:
    from videotube.db.base_class import Base, UUIDPKMixin, TimestampMixin

    class Video(UUIDPKMixin, TimestampMixin, Base):
        __tablename__ = "videos"

Notes:
- Primary keys are exposed to Python as **strings** (`Uuid(as_uuid=False)`),
  so ids look identical whether a document came from SQL or memory.
"""

import re
import uuid

from sqlalchemy import Column, DateTime, MetaData, Uuid, func
from sqlalchemy.orm import DeclarativeBase, declared_attr

NAMING_CONVENTION = {
    "ix": "ix_%(column_0_label)s",
    "uq": "uq_%(table_name)s_%(column_0_name)s",
    "ck": "ck_%(table_name)s_%(constraint_name)s",
    "fk": "fk_%(table_name)s_%(column_0_name)s_%(referred_table_name)s",
    "pk": "pk_%(table_name)s",
}


def _to_snake(name: str) -> str:
    """Convert `CamelCase` / `PascalCase` to `snake_case` for table names."""
    s1 = re.sub("(.)([A-Z][a-z]+)", r"\1_\2", name)
    return re.sub("([a-z0-9])([A-Z])", r"\1_\2", s1).lower()


def new_id() -> str:
    return str(uuid.uuid4())


class Base(DeclarativeBase):
    """Global declarative base for VideoTube models."""

    metadata = MetaData(naming_convention=NAMING_CONVENTION)

    @declared_attr.directive
    def __tablename__(cls) -> str:  # type: ignore[override]
        return _to_snake(cls.__name__)

    def __repr__(self) -> str:  # pragma: no cover (repr convenience)
        return f"{self.__class__.__name__}(id={getattr(self, 'id', None)!r})"


class UUIDPKMixin:
    """String UUID primary key generated client-side."""

    id = Column(Uuid(as_uuid=False), primary_key=True, default=new_id)


class TimestampMixin:
    """
    Server-side timestamps (UTC).
    - `created_at`: set once at insert
    - `updated_at`: set at insert and auto-updated on change
    """

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)


__all__ = ["Base", "UUIDPKMixin", "TimestampMixin", "NAMING_CONVENTION", "new_id"]
