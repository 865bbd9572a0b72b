from __future__ import annotations

"""
SQL-backed document store (SQLAlchemy 2.0 async Core).

Collections map 1:1 to tables registered on `Base.metadata`; documents are the
row mappings keyed by column name. Filters compile to SQL `WHERE` clauses, so
`update_one` runs as one conditional `UPDATE` and doubles as compare-and-swap.
"""

import logging
from typing import Any, List, Mapping, Optional

from sqlalchemy import MetaData, Table, and_, func, insert, or_, select, true, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncEngine
from sqlalchemy.sql.elements import ColumnElement

from videotube.db.base import Base
from videotube.db.base_class import new_id
from videotube.db.store import Document, DuplicateKeyError, Filter

logger = logging.getLogger("videotube.db")


class SqlDocumentStore:
    """`DocumentStore` over an `AsyncEngine`; one short transaction per call."""

    def __init__(self, engine: AsyncEngine, metadata: Optional[MetaData] = None) -> None:
        self._engine = engine
        self._metadata = metadata or Base.metadata

    # ─────────────────────────────────────────────────────────────
    # 🔧 Internal helpers
    # ─────────────────────────────────────────────────────────────
    def _table(self, collection: str) -> Table:
        try:
            return self._metadata.tables[collection]
        except KeyError:
            raise ValueError(f"Unknown collection: {collection}") from None

    def _where(self, table: Table, filter: Filter) -> ColumnElement[bool]:
        clauses: list[ColumnElement[bool]] = []
        for key, cond in filter.items():
            if key == "$or":
                clauses.append(or_(*(self._where(table, sub) for sub in cond)))
                continue

            column = table.c[key]
            if isinstance(cond, Mapping):
                for op, expected in cond.items():
                    if op == "$in":
                        clauses.append(column.in_(list(expected)))
                    elif op == "$ne":
                        if expected is None:
                            clauses.append(column.is_not(None))
                        else:
                            clauses.append(or_(column != expected, column.is_(None)))
                    else:
                        raise ValueError(f"Unsupported filter operator: {op}")
            elif cond is None:
                clauses.append(column.is_(None))
            else:
                clauses.append(column == cond)
        return and_(true(), *clauses)

    def _values(self, table: Table, values: Mapping[str, Any]) -> dict[str, Any]:
        unknown = set(values) - set(table.c.keys())
        if unknown:
            raise ValueError(f"Unknown fields for '{table.name}': {sorted(unknown)}")
        return dict(values)

    @staticmethod
    def _ordered(table: Table):
        return table.c.created_at if "created_at" in table.c else table.c.id

    # ─────────────────────────────────────────────────────────────
    # 📖 Reads
    # ─────────────────────────────────────────────────────────────
    async def find(self, collection: str, filter: Filter) -> List[Document]:
        table = self._table(collection)
        stmt = select(table).where(self._where(table, filter)).order_by(self._ordered(table))
        async with self._engine.connect() as conn:
            result = await conn.execute(stmt)
            return [dict(row._mapping) for row in result]

    async def find_one(self, collection: str, filter: Filter) -> Optional[Document]:
        table = self._table(collection)
        stmt = select(table).where(self._where(table, filter)).order_by(self._ordered(table)).limit(1)
        async with self._engine.connect() as conn:
            row = (await conn.execute(stmt)).first()
        return dict(row._mapping) if row is not None else None

    async def find_by_id(self, collection: str, id: str) -> Optional[Document]:
        return await self.find_one(collection, {"id": str(id)})

    async def count(self, collection: str, filter: Filter) -> int:
        table = self._table(collection)
        stmt = select(func.count()).select_from(table).where(self._where(table, filter))
        async with self._engine.connect() as conn:
            return int((await conn.execute(stmt)).scalar_one())

    # ─────────────────────────────────────────────────────────────
    # ✍️ Writes
    # ─────────────────────────────────────────────────────────────
    async def insert(self, collection: str, document: Mapping[str, Any]) -> Document:
        table = self._table(collection)
        values = self._values(table, document)
        values.setdefault("id", new_id())
        try:
            async with self._engine.begin() as conn:
                await conn.execute(insert(table).values(**values))
        except IntegrityError as e:
            logger.info(f"Insert into '{collection}' rejected by constraint")
            raise DuplicateKeyError(collection) from e

        created = await self.find_by_id(collection, values["id"])
        if created is None:  # pragma: no cover; row vanished between commit and read
            raise RuntimeError(f"Inserted document missing from '{collection}'")
        return created

    async def update_by_id(self, collection: str, id: str, values: Mapping[str, Any]) -> Optional[Document]:
        matched = await self.update_one(collection, {"id": str(id)}, values)
        if not matched:
            return None
        return await self.find_by_id(collection, id)

    async def update_one(self, collection: str, filter: Filter, values: Mapping[str, Any]) -> int:
        table = self._table(collection)
        where = self._where(table, filter)
        payload = self._values(table, values)
        try:
            async with self._engine.begin() as conn:
                target = (await conn.execute(select(table.c.id).where(where).limit(1))).scalar_one_or_none()
                if target is None:
                    return 0
                # The filter is re-applied so a concurrent writer that changed
                # the row first makes this UPDATE match nothing.
                result = await conn.execute(
                    update(table).where(table.c.id == target, where).values(**payload)
                )
                return int(result.rowcount or 0)
        except IntegrityError as e:
            logger.info(f"Update on '{collection}' rejected by constraint")
            raise DuplicateKeyError(collection) from e


__all__ = ["SqlDocumentStore"]
