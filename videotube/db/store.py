from __future__ import annotations

"""
Document store interface.

Every persistence call made by the services goes through `DocumentStore`:
plain-dict documents with a string `id`, grouped into named collections.

Filters
-------
- `{"field": value}`              equality (`None` matches null/missing)
- `{"field": {"$in": [...]}}`     membership
- `{"field": {"$ne": value}}`     inequality
- `{"$or": [filter, ...]}`        any sub-filter matches

Several keys in one filter are AND-ed.

Implementations: `videotube.db.memory.MemoryDocumentStore` and
`videotube.db.sql_store.SqlDocumentStore`. Pick one at runtime with
`get_document_store()` (driven by `settings.STORE_BACKEND`).
"""

from typing import Any, Dict, List, Mapping, Optional, Protocol

Document = Dict[str, Any]
Filter = Mapping[str, Any]

USERS = "users"
VIDEOS = "videos"
SUBSCRIPTIONS = "subscriptions"


class DuplicateKeyError(Exception):
    """A write would violate a unique index."""

    def __init__(self, collection: str, fields: tuple[str, ...] = ()) -> None:
        self.collection = collection
        self.fields = fields
        label = ", ".join(fields) if fields else "unique key"
        super().__init__(f"duplicate {label} in '{collection}'")


class DocumentStore(Protocol):
    async def find(self, collection: str, filter: Filter) -> List[Document]:
        ...

    async def find_one(self, collection: str, filter: Filter) -> Optional[Document]:
        ...

    async def find_by_id(self, collection: str, id: str) -> Optional[Document]:
        ...

    async def insert(self, collection: str, document: Mapping[str, Any]) -> Document:
        ...

    async def update_by_id(self, collection: str, id: str, values: Mapping[str, Any]) -> Optional[Document]:
        ...

    async def update_one(self, collection: str, filter: Filter, values: Mapping[str, Any]) -> int:
        """Atomically apply `values` to the first match; return how many matched (0 or 1)."""
        ...

    async def count(self, collection: str, filter: Filter) -> int:
        ...


def _equals(actual: Any, expected: Any) -> bool:
    if expected is None:
        return actual is None
    return actual == expected


def matches(document: Mapping[str, Any], filter: Filter) -> bool:
    """Evaluate a store filter against a single in-memory document."""
    for key, cond in filter.items():
        if key == "$or":
            if not any(matches(document, sub) for sub in cond):
                return False
            continue

        actual = document.get(key)
        if isinstance(cond, Mapping):
            for op, expected in cond.items():
                if op == "$in":
                    if actual not in list(expected):
                        return False
                elif op == "$ne":
                    if _equals(actual, expected):
                        return False
                else:
                    raise ValueError(f"Unsupported filter operator: {op}")
        elif not _equals(actual, cond):
            return False
    return True


__all__ = [
    "Document",
    "Filter",
    "DocumentStore",
    "DuplicateKeyError",
    "matches",
    "USERS",
    "VIDEOS",
    "SUBSCRIPTIONS",
]
