import pytest

from videotube.db.memory import MemoryDocumentStore
from videotube.db.pipeline import (
    AddFields,
    Field,
    First,
    In,
    Literal,
    Pipeline,
    Size,
    aggregate,
    resolve_path,
    run_stages,
)


# ─────────────────────────────────────────────────────────────
# Expressions
# ─────────────────────────────────────────────────────────────
def test_resolve_path_fans_out_over_arrays():
    doc = {"a": {"b": 1}, "subs": [{"who": "x"}, {"who": "y"}, "junk"]}

    assert resolve_path(doc, "a.b") == 1
    assert resolve_path(doc, "subs.who") == ["x", "y"]
    assert resolve_path(doc, "a.b.c") is None
    assert resolve_path(doc, "nope") is None


def test_expressions():
    doc = {"items": [{"k": 1}, {"k": 2}], "empty": [], "name": "n"}

    assert Field("name").evaluate(doc) == "n"
    assert Literal(7).evaluate(doc) == 7
    assert Size("items").evaluate(doc) == 2
    assert Size("missing").evaluate(doc) == 0
    assert In(2, "items.k").evaluate(doc) is True
    assert In(3, "items.k").evaluate(doc) is False
    assert In(None, "items.k").evaluate(doc) is False
    assert First("items").evaluate(doc) == {"k": 1}
    assert First("empty").evaluate(doc) is None
    assert First("name").evaluate(doc) == "n"


# ─────────────────────────────────────────────────────────────
# Stages
# ─────────────────────────────────────────────────────────────
@pytest.fixture
async def seeded(store: MemoryDocumentStore):
    await store.insert("authors", {"id": "a1", "name": "Ann", "secret": "x"})
    await store.insert("authors", {"id": "a2", "name": "Ben", "secret": "y"})
    await store.insert("books", {"id": "b1", "title": "One", "author": "a1"})
    await store.insert("books", {"id": "b2", "title": "Two", "author": "a2"})
    await store.insert("books", {"id": "b3", "title": "Three", "author": "ghost"})
    await store.insert("shelves", {"id": "s1", "books": ["b3", "missing", "b1", "b2", "b1"]})
    return store


@pytest.mark.anyio
async def test_lookup_over_array_keeps_local_order_and_drops_dangling(seeded):
    docs = await aggregate(
        seeded,
        "shelves",
        Pipeline().lookup(from_="books", local_field="books", foreign_field="id", as_="books"),
    )

    assert [b["id"] for b in docs[0]["books"]] == ["b3", "b1", "b2", "b1"]


@pytest.mark.anyio
async def test_nested_lookup_with_projection_and_first(seeded):
    author = Pipeline().project("name")
    books = (
        Pipeline()
        .lookup(from_="authors", local_field="author", foreign_field="id", as_="author", pipeline=author)
        .add_fields(author=First("author"))
    )
    docs = await aggregate(
        seeded,
        "shelves",
        Pipeline().lookup(from_="books", local_field="books", foreign_field="id", as_="books", pipeline=books),
    )

    resolved = docs[0]["books"]
    assert resolved[1]["author"] == {"id": "a1", "name": "Ann"}
    assert resolved[2]["author"] == {"id": "a2", "name": "Ben"}
    # Book whose author no longer exists keeps a null author
    assert resolved[0]["author"] is None


@pytest.mark.anyio
async def test_scalar_lookup_counts_and_membership(seeded):
    pipeline = (
        Pipeline()
        .match({"id": {"$in": ["a1", "a2"]}})
        .lookup(from_="books", local_field="id", foreign_field="author", as_="books")
        .add_fields(n=Size("books"), wrote_one=In("b1", "books.id"))
        .project("name", "n", "wrote_one")
    )
    docs = await aggregate(seeded, "authors", pipeline)

    by_id = {d["id"]: d for d in docs}
    assert by_id["a1"] == {"id": "a1", "name": "Ann", "n": 1, "wrote_one": True}
    assert by_id["a2"] == {"id": "a2", "name": "Ben", "n": 1, "wrote_one": False}


@pytest.mark.anyio
async def test_match_after_first_stage_filters_in_memory(seeded):
    pipeline = (
        Pipeline()
        .add_fields(tag=Literal("t"))
        .match({"name": "Ben"})
        .project("tag")
    )
    assert await aggregate(seeded, "authors", pipeline) == [{"id": "a2", "tag": "t"}]


@pytest.mark.anyio
async def test_empty_input_skips_lookup_queries(store: MemoryDocumentStore):
    docs = await run_stages(
        store,
        [],
        Pipeline().lookup(from_="x", local_field="y", foreign_field="id", as_="z").stages,
    )
    assert docs == []


@pytest.mark.anyio
async def test_unsupported_stage_raises(store: MemoryDocumentStore):
    with pytest.raises(TypeError):
        await run_stages(store, [{"id": "1"}], [object()])


def test_builder_chains_and_extends():
    base = Pipeline().match({"a": 1})
    extra = Pipeline().add_fields(b=Literal(2))

    combined = base.extend(extra)

    assert combined is base
    assert len(combined) == 2
    assert isinstance(combined.stages[1], AddFields)
