from __future__ import annotations

import time
from datetime import datetime, timezone
from unittest.mock import MagicMock

import pytest
from google.api_core import exceptions as gcloud_exceptions

from recipeshare.errors import StorageError
from recipeshare.gcp_storage import FirestoreRecipeStorage
from recipeshare.models import Recipe


STAMP = datetime(2024, 3, 1, 9, 30, tzinfo=timezone.utc)


def make_recipe(recipe_id: str = "abc", *, minutes: int = 10, tags=("vegan",)) -> Recipe:
    return Recipe(
        id=recipe_id,
        title="Soup",
        ingredients="water",
        steps="boil",
        cooking_time_minutes=minutes,
        dietary_tags=list(tags),
        created_at=STAMP,
        last_updated=STAMP,
    )


def make_snapshot(recipe: Recipe) -> MagicMock:
    snapshot = MagicMock()
    snapshot.id = recipe.id
    snapshot.exists = True
    snapshot.to_dict.return_value = FirestoreRecipeStorage._recipe_to_doc(recipe)
    return snapshot


def make_storage():
    client = MagicMock()
    storage = FirestoreRecipeStorage(client=client, timeout=1)
    return storage, client.collection.return_value


@pytest.mark.asyncio
async def test_insert_creates_document_with_native_tag_array() -> None:
    storage, collection = make_storage()
    recipe = make_recipe(tags=("vegan", "quick"))

    await storage.insert(recipe)

    collection.document.assert_called_with("abc")
    doc = collection.document.return_value.create.call_args.args[0]
    assert doc["dietary_tags"] == ["vegan", "quick"]
    assert doc["cooking_time_minutes"] == 10


@pytest.mark.asyncio
async def test_insert_existing_document_is_a_storage_error() -> None:
    storage, collection = make_storage()
    collection.document.return_value.create.side_effect = gcloud_exceptions.AlreadyExists("exists")

    with pytest.raises(StorageError):
        await storage.insert(make_recipe())


@pytest.mark.asyncio
async def test_find_by_id_maps_documents() -> None:
    storage, collection = make_storage()
    recipe = make_recipe()
    collection.document.return_value.get.return_value = make_snapshot(recipe)

    assert await storage.find_by_id("abc") == recipe


@pytest.mark.asyncio
async def test_find_by_id_returns_none_for_missing_document() -> None:
    storage, collection = make_storage()
    collection.document.return_value.get.return_value.exists = False

    assert await storage.find_by_id("abc") is None


@pytest.mark.asyncio
async def test_replace_missing_document_is_a_storage_error() -> None:
    storage, collection = make_storage()
    collection.document.return_value.update.side_effect = gcloud_exceptions.NotFound("gone")

    with pytest.raises(StorageError):
        await storage.replace(make_recipe())


@pytest.mark.asyncio
async def test_remove_reports_missing_documents() -> None:
    storage, collection = make_storage()

    assert await storage.remove("abc") is True

    collection.document.return_value.delete.side_effect = gcloud_exceptions.NotFound("gone")
    assert await storage.remove("abc") is False


@pytest.mark.asyncio
async def test_find_matching_applies_tag_filter_to_query_results() -> None:
    storage, collection = make_storage()
    query = collection.where.return_value
    query.stream.return_value = [
        make_snapshot(make_recipe("soup", tags=("vegan",))),
        make_snapshot(make_recipe("stew", tags=("hearty",))),
    ]

    matches = await storage.find_matching(frozenset({"vegan"}), 20)

    assert [recipe.id for recipe in matches] == ["soup"]
    collection.where.assert_called_once()


@pytest.mark.asyncio
async def test_api_errors_become_storage_errors() -> None:
    storage, collection = make_storage()
    collection.document.return_value.get.side_effect = gcloud_exceptions.ServiceUnavailable("down")

    with pytest.raises(StorageError, match="Firestore request failed"):
        await storage.find_by_id("abc")


@pytest.mark.asyncio
async def test_slow_firestore_calls_time_out_as_storage_errors() -> None:
    client = MagicMock()
    storage = FirestoreRecipeStorage(client=client, timeout=0.05)
    client.collection.return_value.document.return_value.update.side_effect = (
        lambda *args, **kwargs: time.sleep(0.5)
    )

    with pytest.raises(StorageError, match="timed out"):
        await storage.replace(make_recipe())
