from __future__ import annotations

"""
VideoTube · Database Engine & Store Dependencies

- The async engine is created lazily (first use), so importing this module
  never requires a database driver.
- `get_document_store()` is the FastAPI dependency handing services their
  `DocumentStore`; the backend is chosen by `settings.STORE_BACKEND`.
"""

from typing import Optional
import logging

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine

from videotube.core.config import settings
from videotube.db.memory import MemoryDocumentStore
from videotube.db.sql_store import SqlDocumentStore
from videotube.db.store import DocumentStore

logger = logging.getLogger("videotube.db")

# Pool knobs
_POOL_PRE_PING = True
_POOL_RECYCLE = 1800

_async_engine: Optional[AsyncEngine] = None
_store: Optional[DocumentStore] = None


def get_async_engine() -> AsyncEngine:
    """Create the async engine on first use."""
    global _async_engine
    if _async_engine is None:
        _async_engine = create_async_engine(
            settings.ASYNC_DATABASE_URL,
            pool_pre_ping=_POOL_PRE_PING,
            pool_recycle=_POOL_RECYCLE,
            echo=False,
        )
    return _async_engine


def get_document_store() -> DocumentStore:
    """FastAPI dependency returning the process-wide document store."""
    global _store
    if _store is None:
        if settings.STORE_BACKEND == "memory":
            logger.warning("Using in-memory document store; data is lost on restart")
            _store = MemoryDocumentStore()
        else:
            _store = SqlDocumentStore(get_async_engine())
    return _store


async def init_models() -> None:
    """Create missing tables (dev convenience; production uses Alembic)."""
    from videotube.db.base import Base

    async with get_async_engine().begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def db_healthcheck() -> bool:
    """Quick SELECT 1 to verify DB connectivity."""
    if settings.STORE_BACKEND == "memory":
        return True
    try:
        async with get_async_engine().connect() as conn:
            await conn.execute(text("SELECT 1"))
        return True
    except Exception:
        logger.exception("DB healthcheck failed")
        return False


async def dispose_engine() -> None:
    global _async_engine
    if _async_engine is not None:
        await _async_engine.dispose()
        _async_engine = None


__all__ = [
    "get_async_engine",
    "get_document_store",
    "init_models",
    "db_healthcheck",
    "dispose_engine",
]
