from __future__ import annotations

import copy
import uuid
from datetime import datetime, timezone
from typing import Any, Dict, List, Mapping, Optional, Sequence

from videotube.db.store import (
    SUBSCRIPTIONS,
    USERS,
    Document,
    DuplicateKeyError,
    Filter,
    matches,
)

# Unique indexes mirrored from the SQL schema.
DEFAULT_UNIQUE_FIELDS: Dict[str, Sequence[tuple[str, ...]]] = {
    USERS: (("username",), ("email",)),
    SUBSCRIPTIONS: (("subscriber", "channel"),),
}


def _now() -> datetime:
    return datetime.now(timezone.utc)


class MemoryDocumentStore:
    """Dict-backed document store.

    Every read returns deep copies so callers can never mutate stored state.
    There is no `await` between the check and the write in `update_one`, so
    conditional updates are atomic on a single event loop.
    """

    def __init__(self, unique_fields: Optional[Mapping[str, Sequence[tuple[str, ...]]]] = None) -> None:
        self._collections: Dict[str, Dict[str, Document]] = {}
        self._unique = dict(DEFAULT_UNIQUE_FIELDS if unique_fields is None else unique_fields)

    def _docs(self, collection: str) -> Dict[str, Document]:
        return self._collections.setdefault(collection, {})

    def _check_unique(self, collection: str, candidate: Mapping[str, Any], *, skip_id: Optional[str] = None) -> None:
        for fields in self._unique.get(collection, ()):
            key = tuple(candidate.get(f) for f in fields)
            if any(v is None for v in key):
                continue
            for doc_id, doc in self._docs(collection).items():
                if doc_id != skip_id and tuple(doc.get(f) for f in fields) == key:
                    raise DuplicateKeyError(collection, fields)

    async def find(self, collection: str, filter: Filter) -> List[Document]:
        return [copy.deepcopy(d) for d in self._docs(collection).values() if matches(d, filter)]

    async def find_one(self, collection: str, filter: Filter) -> Optional[Document]:
        for doc in self._docs(collection).values():
            if matches(doc, filter):
                return copy.deepcopy(doc)
        return None

    async def find_by_id(self, collection: str, id: str) -> Optional[Document]:
        doc = self._docs(collection).get(str(id))
        return copy.deepcopy(doc) if doc is not None else None

    async def insert(self, collection: str, document: Mapping[str, Any]) -> Document:
        doc = copy.deepcopy(dict(document))
        doc.setdefault("id", str(uuid.uuid4()))
        doc.setdefault("created_at", _now())
        doc.setdefault("updated_at", doc["created_at"])
        if doc["id"] in self._docs(collection):
            raise DuplicateKeyError(collection, ("id",))
        self._check_unique(collection, doc)
        self._docs(collection)[doc["id"]] = doc
        return copy.deepcopy(doc)

    def _apply(self, collection: str, doc: Document, values: Mapping[str, Any]) -> None:
        merged = {**doc, **copy.deepcopy(dict(values))}
        self._check_unique(collection, merged, skip_id=doc["id"])
        doc.update(copy.deepcopy(dict(values)))
        doc["updated_at"] = _now()

    async def update_by_id(self, collection: str, id: str, values: Mapping[str, Any]) -> Optional[Document]:
        doc = self._docs(collection).get(str(id))
        if doc is None:
            return None
        self._apply(collection, doc, values)
        return copy.deepcopy(doc)

    async def update_one(self, collection: str, filter: Filter, values: Mapping[str, Any]) -> int:
        for doc in self._docs(collection).values():
            if matches(doc, filter):
                self._apply(collection, doc, values)
                return 1
        return 0

    async def count(self, collection: str, filter: Filter) -> int:
        return sum(1 for d in self._docs(collection).values() if matches(d, filter))


__all__ = ["MemoryDocumentStore", "DEFAULT_UNIQUE_FIELDS"]
