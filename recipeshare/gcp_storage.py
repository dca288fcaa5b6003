from __future__ import annotations

import asyncio
import os
from datetime import datetime, timezone
from typing import AbstractSet, Callable, List, Optional, TypeVar

from google.api_core import exceptions as gcloud_exceptions
from google.cloud import firestore
from google.cloud.firestore_v1.base_query import FieldFilter

from .errors import StorageError
from .models import Recipe
from .storage import filter_recipes

T = TypeVar("T")

DEFAULT_TIMEOUT = 10.0


class FirestoreRecipeStorage:
    """GCP backed recipe storage using Firestore.

    The Firestore client is synchronous, so each call runs in a worker thread.
    Dietary tags are stored as a native Firestore array.
    """

    def __init__(
        self,
        *,
        project: Optional[str] = None,
        collection_name: str = "recipes",
        timeout: float = DEFAULT_TIMEOUT,
        client: Optional[firestore.Client] = None,
    ) -> None:
        self._project = project
        self._collection_name = collection_name
        self._timeout = timeout

        self._firestore_client = client or firestore.Client(project=project)
        self._collection = self._firestore_client.collection(collection_name)

    @classmethod
    def from_env(cls) -> "FirestoreRecipeStorage":
        """Build a storage instance from environment variables."""

        project = os.environ.get("GCP_PROJECT")
        collection_name = os.environ.get("RECIPES_COLLECTION", "recipes")
        timeout = float(os.environ.get("RECIPE_STORAGE_TIMEOUT", DEFAULT_TIMEOUT))
        return cls(project=project, collection_name=collection_name, timeout=timeout)

    async def insert(self, recipe: Recipe) -> Recipe:
        doc_ref = self._collection.document(recipe.id)
        try:
            await self._run(doc_ref.create, self._recipe_to_doc(recipe), timeout=self._timeout)
        except gcloud_exceptions.Conflict as exc:
            raise StorageError(f"Recipe '{recipe.id}' already exists.") from exc
        return recipe

    async def find_by_id(self, recipe_id: str) -> Optional[Recipe]:
        doc_ref = self._collection.document(recipe_id)
        snapshot = await self._run(doc_ref.get, timeout=self._timeout)

        if not snapshot.exists:
            return None

        return self._doc_to_recipe(snapshot.id, snapshot.to_dict() or {})

    async def find_all(self) -> List[Recipe]:
        query = self._collection.order_by("created_at")
        return await self._run(self._fetch, query)

    async def replace(self, recipe: Recipe) -> Recipe:
        doc_ref = self._collection.document(recipe.id)
        try:
            # ``update`` refuses to create missing documents.
            await self._run(doc_ref.update, self._recipe_to_doc(recipe), timeout=self._timeout)
        except gcloud_exceptions.NotFound as exc:
            raise StorageError(f"Recipe '{recipe.id}' does not exist.") from exc
        return recipe

    async def remove(self, recipe_id: str) -> bool:
        doc_ref = self._collection.document(recipe_id)
        option = self._firestore_client.write_option(exists=True)
        try:
            await self._run(doc_ref.delete, option=option, timeout=self._timeout)
        except gcloud_exceptions.NotFound:
            return False
        return True

    async def find_matching(
        self,
        tags: Optional[AbstractSet[str]],
        max_minutes: Optional[int],
    ) -> List[Recipe]:
        query = self._collection
        if max_minutes is not None:
            query = query.where(filter=FieldFilter("cooking_time_minutes", "<=", max_minutes))
        recipes = await self._run(self._fetch, query)
        recipes.sort(key=lambda recipe: recipe.created_at)
        return filter_recipes(recipes, tags, None)

    async def count(self) -> int:
        results = await self._run(self._collection.count().get, timeout=self._timeout)
        return int(results[0][0].value)

    def _fetch(self, query) -> List[Recipe]:
        return [
            self._doc_to_recipe(doc.id, doc.to_dict() or {})
            for doc in query.stream(timeout=self._timeout)
        ]

    async def _run(self, func: Callable[..., T], *args, **kwargs) -> T:
        try:
            return await asyncio.wait_for(
                asyncio.to_thread(func, *args, **kwargs), timeout=self._timeout
            )
        except (gcloud_exceptions.Conflict, gcloud_exceptions.NotFound):
            raise
        except asyncio.TimeoutError as exc:
            raise StorageError(f"Firestore timed out after {self._timeout} seconds.") from exc
        except gcloud_exceptions.GoogleAPIError as exc:
            raise StorageError(f"Firestore request failed: {exc}") from exc

    @staticmethod
    def _recipe_to_doc(recipe: Recipe) -> dict:
        return {
            "title": recipe.title,
            "ingredients": recipe.ingredients,
            "steps": recipe.steps,
            "cooking_time_minutes": recipe.cooking_time_minutes,
            "dietary_tags": list(recipe.dietary_tags),
            "created_at": recipe.created_at,
            "last_updated": recipe.last_updated,
        }

    @staticmethod
    def _doc_to_recipe(doc_id: str, data: dict) -> Recipe:
        tags = data.get("dietary_tags")
        created_at = _as_utc(data.get("created_at"))
        last_updated = _as_utc(data.get("last_updated")) or created_at

        return Recipe(
            id=doc_id,
            title=data.get("title", ""),
            ingredients=data.get("ingredients", ""),
            steps=data.get("steps", ""),
            cooking_time_minutes=int(data.get("cooking_time_minutes", 0)),
            dietary_tags=list(tags) if isinstance(tags, list) else [],
            created_at=created_at,
            last_updated=last_updated,
        )


def _as_utc(value: object) -> Optional[datetime]:
    if not isinstance(value, datetime):
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


__all__ = ["FirestoreRecipeStorage"]
