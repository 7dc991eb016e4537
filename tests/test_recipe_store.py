"""Tests for recipe stores and their helpers."""

from datetime import datetime, timezone
from unittest.mock import MagicMock

import pytest
from google.api_core import exceptions as gcp_exceptions

from app.models.recipe import DEFAULT_TITLE, RecipeDraft
from app.services.firestore_store import FirestoreRecipeStore, write_new_recipe
from app.services.recipe_store import (
    InMemoryRecipeStore,
    doc_id_for,
    parse_recipe_id,
    record_from_dict,
)
from app.utils.exceptions import NotFoundError, PersistenceError


def make_draft(title="Receta"):
    return RecipeDraft(title=title, ingredients=["a"], instructions=["b"])


async def fill(store, count):
    for n in range(count):
        await store.create(make_draft(f"Receta {n + 1}"), [f"ing {n + 1}"])


@pytest.mark.parametrize(
    "value,expected",
    (
        ("receta12", 12),
        ("RECETA7", 7),
        ("12", 12),
        (" 3 ", 3),
        (5, 5),
        ("0", None),
        (0, None),
        ("receta", None),
        ("abc", None),
        ("-4", None),
        ("", None),
        (None, None),
        (True, None),
    ),
)
def test_parse_recipe_id(value, expected):
    assert parse_recipe_id(value) == expected


def test_doc_id_for():
    assert doc_id_for(42) == "receta42"


def test_record_from_dict_reads_legacy_documents():
    record = record_from_dict(
        {
            "Nombre": "Sopa",
            "Ingredientes": ["agua", "sal"],
            "Instrucciones": "1. Hervir\n\n2. Salar",
            "id": 3,
        },
        "receta3",
    )
    assert record.id == 3
    assert record.title == "Sopa"
    assert record.ingredients == ["agua", "sal"]
    assert record.instructions == ["1. Hervir", "2. Salar"]
    assert record.likes == 0
    assert record.originalIngredients == []


def test_record_from_dict_falls_back_to_document_key():
    record = record_from_dict({}, "receta9")
    assert record.id == 9
    assert record.title == DEFAULT_TITLE


@pytest.mark.asyncio
async def test_memory_store_assigns_sequential_ids():
    store = InMemoryRecipeStore()
    first = await store.create(make_draft(), ["x"])
    second = await store.create(make_draft(), ["y"], ["vegano"], "rápido")

    assert (first.id, second.id) == (1, 2)
    assert second.dietaryRestrictions == ["vegano"]
    assert second.preferences == "rápido"
    assert second.createdAt >= first.createdAt


@pytest.mark.asyncio
async def test_memory_store_pages_newest_first_with_cursor():
    store = InMemoryRecipeStore()
    await fill(store, 5)

    first = await store.list(2)
    assert [r.id for r in first.data] == [5, 4]
    assert first.hasMore is True
    assert first.nextCursor == "receta4"

    second = await store.list(2, first.nextCursor)
    assert [r.id for r in second.data] == [3, 2]
    assert second.hasMore is True

    third = await store.list(2, second.nextCursor)
    assert [r.id for r in third.data] == [1]
    assert third.hasMore is False
    assert third.nextCursor is None


@pytest.mark.asyncio
@pytest.mark.parametrize("cursor", ("receta99", "garbage", "4"))
async def test_memory_store_cursor_handling(cursor):
    store = InMemoryRecipeStore()
    await fill(store, 5)

    page = await store.list(10, cursor)

    if cursor == "4":
        assert [r.id for r in page.data] == [3, 2, 1]
    else:
        # Unknown cursors restart from the beginning
        assert [r.id for r in page.data] == [5, 4, 3, 2, 1]


@pytest.mark.asyncio
async def test_memory_store_get_and_like():
    store = InMemoryRecipeStore()
    await fill(store, 1)

    liked = await store.like(1)
    assert liked.likes == 1
    assert (await store.get(1)).likes == 1

    with pytest.raises(NotFoundError):
        await store.get(2)
    with pytest.raises(NotFoundError):
        await store.like(2)


@pytest.mark.asyncio
async def test_memory_store_returns_copies():
    store = InMemoryRecipeStore()
    created = await store.create(make_draft(), ["x"])
    created.likes = 100
    created.ingredients.append("mutated")

    stored = await store.get(created.id)
    assert stored.likes == 0
    assert stored.ingredients == ["a"]


# ---------------------------------------------------------------------
# Firestore store (SDK objects mocked)
# ---------------------------------------------------------------------

def _counter_snapshot(last_id=None):
    snapshot = MagicMock()
    snapshot.exists = last_id is not None
    snapshot.to_dict.return_value = {"lastId": last_id} if last_id is not None else None
    return snapshot


def test_write_new_recipe_increments_counter_in_transaction():
    transaction = MagicMock()
    counter_ref = MagicMock()
    counter_ref.get.return_value = _counter_snapshot(4)
    recipes_ref = MagicMock()
    payload = {"title": "Sopa", "ingredients": ["agua"], "instructions": ["Hervir"]}

    new_id, doc_ref = write_new_recipe(transaction, counter_ref, recipes_ref, payload)

    assert new_id == 5
    counter_ref.get.assert_called_once_with(transaction=transaction)
    recipes_ref.document.assert_called_once_with("receta5")
    assert doc_ref is recipes_ref.document.return_value

    created_ref, created_data = transaction.create.call_args[0]
    assert created_ref is doc_ref
    assert created_data["id"] == 5
    assert created_data["likes"] == 0
    assert created_data["title"] == "Sopa"
    assert "createdAt" in created_data
    transaction.set.assert_called_once_with(counter_ref, {"lastId": 5}, merge=True)


def test_write_new_recipe_starts_at_one_without_counter():
    transaction = MagicMock()
    counter_ref = MagicMock()
    counter_ref.get.return_value = _counter_snapshot(None)
    recipes_ref = MagicMock()

    new_id, _ = write_new_recipe(transaction, counter_ref, recipes_ref, {})

    assert new_id == 1
    recipes_ref.document.assert_called_once_with("receta1")
    transaction.set.assert_called_once_with(counter_ref, {"lastId": 1}, merge=True)


@pytest.mark.asyncio
async def test_firestore_create_failure_becomes_persistence_error():
    db = MagicMock()
    db.transaction.side_effect = RuntimeError("deadline exceeded")
    store = FirestoreRecipeStore(db=db)

    with pytest.raises(PersistenceError):
        await store.create(make_draft(), ["x"])


@pytest.mark.asyncio
async def test_firestore_get_missing_document():
    db = MagicMock()
    snapshot = MagicMock()
    snapshot.exists = False
    db.collection.return_value.document.return_value.get.return_value = snapshot
    store = FirestoreRecipeStore(db=db)

    with pytest.raises(NotFoundError):
        await store.get(7)
    db.collection.return_value.document.assert_called_with("receta7")


@pytest.mark.asyncio
async def test_firestore_get_existing_document():
    db = MagicMock()
    snapshot = MagicMock()
    snapshot.exists = True
    snapshot.id = "receta7"
    snapshot.to_dict.return_value = {
        "id": 7,
        "title": "Gazpacho",
        "ingredients": ["tomate"],
        "instructions": ["Triturar"],
        "originalIngredients": ["tomate"],
        "createdAt": datetime(2025, 1, 1, tzinfo=timezone.utc),
        "likes": 3,
    }
    db.collection.return_value.document.return_value.get.return_value = snapshot
    store = FirestoreRecipeStore(db=db)

    recipe = await store.get(7)

    assert recipe.id == 7
    assert recipe.title == "Gazpacho"
    assert recipe.likes == 3


@pytest.mark.asyncio
async def test_firestore_like_missing_document():
    db = MagicMock()
    db.collection.return_value.document.return_value.update.side_effect = gcp_exceptions.NotFound("missing")
    store = FirestoreRecipeStore(db=db)

    with pytest.raises(NotFoundError):
        await store.like(3)


@pytest.mark.asyncio
async def test_firestore_list_failure_becomes_persistence_error():
    db = MagicMock()
    db.collection.side_effect = RuntimeError("unavailable")
    store = FirestoreRecipeStore(db=db)

    with pytest.raises(PersistenceError):
        await store.list(10)


def _listing_db(cursor_data):
    db = MagicMock()
    recipes_ref = db.collection.return_value
    cursor_snapshot = MagicMock()
    cursor_snapshot.exists = cursor_data is not None
    cursor_snapshot.to_dict.return_value = cursor_data
    recipes_ref.document.return_value.get.return_value = cursor_snapshot

    query = recipes_ref.order_by.return_value.order_by.return_value
    query.limit.return_value.stream.return_value = []
    query.start_after.return_value.limit.return_value.stream.return_value = []
    return db, query, cursor_snapshot


@pytest.mark.asyncio
async def test_firestore_list_starts_after_cursor_document():
    db, query, cursor_snapshot = _listing_db(
        {"id": 4, "createdAt": datetime(2025, 1, 1, tzinfo=timezone.utc)}
    )
    store = FirestoreRecipeStore(db=db)

    page = await store.list(2, "receta4")

    query.start_after.assert_called_once_with(cursor_snapshot)
    query.start_after.return_value.limit.assert_called_once_with(3)
    assert page.data == []
    assert page.hasMore is False


@pytest.mark.asyncio
@pytest.mark.parametrize("cursor_data", ({"Nombre": "Sopa", "Ingredientes": ["agua"]}, None))
async def test_firestore_list_ignores_cursor_without_created_at(cursor_data):
    db, query, _ = _listing_db(cursor_data)
    store = FirestoreRecipeStore(db=db)

    page = await store.list(2, "receta3")

    query.start_after.assert_not_called()
    query.limit.assert_called_once_with(3)
    assert page.hasMore is False
