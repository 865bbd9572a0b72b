# tests/fixtures/db.py
"""
Store fixtures for tests:
- `store`: fresh `MemoryDocumentStore` per test
- `sql_store`: `SqlDocumentStore` over an in-memory SQLite database (aiosqlite),
  tables built from the ORM metadata, one database per test
"""

from typing import AsyncGenerator

import pytest
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.pool import StaticPool

from videotube.db import base
from videotube.db.memory import MemoryDocumentStore
from videotube.db.sql_store import SqlDocumentStore

SQLITE_URL = "sqlite+aiosqlite://"


@pytest.fixture(scope="session", autouse=True)
def anyio_backend():
    return "asyncio"


@pytest.fixture()
def store() -> MemoryDocumentStore:
    return MemoryDocumentStore()


@pytest.fixture()
async def sql_store() -> AsyncGenerator[SqlDocumentStore, None]:
    # StaticPool keeps the single in-memory database alive across connections
    engine = create_async_engine(
        SQLITE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(base.Base.metadata.create_all)

    yield SqlDocumentStore(engine)

    await engine.dispose()
