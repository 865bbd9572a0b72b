from __future__ import annotations

"""
Aggregation pipeline: composable stages over any `DocumentStore`.

Derived views are declared as a list of stages and run by `aggregate()`:

    pipeline = (
        Pipeline()
        .match({"username": "alice"})
        .lookup(from_="subscriptions", local_field="id", foreign_field="channel", as_="subscribers")
        .add_fields(subscribers_count=Size("subscribers"))
        .project("username", "subscribers_count")
    )
    docs = await aggregate(store, "users", pipeline)

Stages
------
- `Match`     filter documents (a leading match is pushed down to the store)
- `Lookup`    left-outer join into another collection, optionally running a
              nested pipeline over the joined documents
- `AddFields` derive fields from expressions (`Field`, `Literal`, `Size`,
              `In`, `First`)
- `Project`   keep only the listed fields (plus `id`)

Joins batch every local key of a stage into one `$in` query. When the local
field holds an array, joined documents follow the order of that array and
keys with no foreign match are simply absent.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence, Union

from videotube.db.store import Document, DocumentStore, Filter, matches


# ─────────────────────────────────────────────────────────────
# 🧮 Expressions
# ─────────────────────────────────────────────────────────────
def resolve_path(document: Mapping[str, Any], path: str) -> Any:
    """Read a dotted path; arrays of sub-documents fan out into a list."""
    value: Any = document
    for part in path.split("."):
        if isinstance(value, Mapping):
            value = value.get(part)
        elif isinstance(value, list):
            value = [item.get(part) for item in value if isinstance(item, Mapping)]
        else:
            return None
    return value


@dataclass(frozen=True)
class Field:
    path: str

    def evaluate(self, document: Mapping[str, Any]) -> Any:
        return resolve_path(document, self.path)


@dataclass(frozen=True)
class Literal:
    value: Any

    def evaluate(self, document: Mapping[str, Any]) -> Any:
        return self.value


@dataclass(frozen=True)
class Size:
    """Length of an array field; missing or non-array counts as 0."""

    path: str

    def evaluate(self, document: Mapping[str, Any]) -> int:
        value = resolve_path(document, self.path)
        return len(value) if isinstance(value, list) else 0


@dataclass(frozen=True)
class In:
    """True when `value` is a member of the array at `path`."""

    value: Any
    path: str

    def evaluate(self, document: Mapping[str, Any]) -> bool:
        if self.value is None:
            return False
        members = resolve_path(document, self.path)
        return isinstance(members, list) and self.value in members


@dataclass(frozen=True)
class First:
    """First element of the array at `path`, or None when empty."""

    path: str

    def evaluate(self, document: Mapping[str, Any]) -> Any:
        value = resolve_path(document, self.path)
        if isinstance(value, list):
            return value[0] if value else None
        return value


Expression = Union[Field, Literal, Size, In, First]


# ─────────────────────────────────────────────────────────────
# 🧱 Stages
# ─────────────────────────────────────────────────────────────
@dataclass(frozen=True)
class Match:
    filter: Filter


@dataclass(frozen=True)
class Lookup:
    from_: str
    local_field: str
    foreign_field: str
    as_: str
    pipeline: Optional["Pipeline"] = None


@dataclass(frozen=True)
class AddFields:
    fields: Mapping[str, Expression]


@dataclass(frozen=True)
class Project:
    fields: Sequence[str]


Stage = Union[Match, Lookup, AddFields, Project]


@dataclass
class Pipeline:
    """Ordered list of stages; builder methods return `self` for chaining."""

    stages: List[Stage] = field(default_factory=list)

    def match(self, filter: Filter) -> "Pipeline":
        self.stages.append(Match(dict(filter)))
        return self

    def lookup(
        self,
        *,
        from_: str,
        local_field: str,
        foreign_field: str,
        as_: str,
        pipeline: Optional["Pipeline"] = None,
    ) -> "Pipeline":
        self.stages.append(Lookup(from_, local_field, foreign_field, as_, pipeline))
        return self

    def add_fields(self, **fields: Expression) -> "Pipeline":
        self.stages.append(AddFields(fields))
        return self

    def project(self, *fields: str) -> "Pipeline":
        self.stages.append(Project(tuple(fields)))
        return self

    def extend(self, other: "Pipeline") -> "Pipeline":
        self.stages.extend(other.stages)
        return self

    def __len__(self) -> int:
        return len(self.stages)


# ─────────────────────────────────────────────────────────────
# ▶️ Executor
# ─────────────────────────────────────────────────────────────
def _as_keys(value: Any) -> List[Any]:
    if value is None:
        return []
    if isinstance(value, list):
        return [v for v in value if v is not None]
    return [value]


async def _run_lookup(store: DocumentStore, documents: List[Document], stage: Lookup) -> List[Document]:
    keys: List[Any] = []
    for doc in documents:
        for key in _as_keys(resolve_path(doc, stage.local_field)):
            if key not in keys:
                keys.append(key)

    foreign: List[Document] = []
    if keys:
        foreign = await store.find(stage.from_, {stage.foreign_field: {"$in": keys}})
        if stage.pipeline is not None and foreign:
            foreign = await run_stages(store, foreign, stage.pipeline.stages)

    by_key: Dict[Any, List[Document]] = {}
    for item in foreign:
        by_key.setdefault(item.get(stage.foreign_field), []).append(item)

    joined: List[Document] = []
    for doc in documents:
        local = resolve_path(doc, stage.local_field)
        related: List[Document] = []
        for key in _as_keys(local):
            related.extend(dict(item) for item in by_key.get(key, ()))
        joined.append({**doc, stage.as_: related})
    return joined


def _project(document: Document, fields: Iterable[str]) -> Document:
    keep = ["id", *fields]
    return {name: document[name] for name in keep if name in document}


async def run_stages(store: DocumentStore, documents: List[Document], stages: Sequence[Stage]) -> List[Document]:
    """Apply `stages` to already-loaded documents."""
    for stage in stages:
        if isinstance(stage, Match):
            documents = [d for d in documents if matches(d, stage.filter)]
        elif isinstance(stage, Lookup):
            documents = await _run_lookup(store, documents, stage)
        elif isinstance(stage, AddFields):
            documents = [
                {**d, **{name: expr.evaluate(d) for name, expr in stage.fields.items()}}
                for d in documents
            ]
        elif isinstance(stage, Project):
            documents = [_project(d, stage.fields) for d in documents]
        else:
            raise TypeError(f"Unsupported pipeline stage: {stage!r}")
    return documents


async def aggregate(store: DocumentStore, collection: str, pipeline: Pipeline) -> List[Document]:
    """Run `pipeline` over `collection`, pushing a leading `Match` to the store."""
    stages = list(pipeline.stages)
    initial: Filter = {}
    if stages and isinstance(stages[0], Match):
        initial = stages.pop(0).filter
    documents = await store.find(collection, initial)
    return await run_stages(store, documents, stages)


__all__ = [
    "Pipeline",
    "Match",
    "Lookup",
    "AddFields",
    "Project",
    "Field",
    "Literal",
    "Size",
    "In",
    "First",
    "aggregate",
    "run_stages",
    "resolve_path",
]
