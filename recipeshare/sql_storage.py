from __future__ import annotations

import asyncio
import json
import os
from contextlib import asynccontextmanager
from datetime import datetime
from typing import (
    AbstractSet,
    Any,
    AsyncIterator,
    Awaitable,
    Callable,
    Dict,
    Iterable,
    List,
    Optional,
    TypeVar,
)

from databases import Database
from databases.interfaces import Record

from .errors import StorageError
from .models import Recipe
from .storage import filter_recipes

T = TypeVar("T")

DEFAULT_DATABASE_URL = "sqlite+aiosqlite:///recipeshare.db"
DEFAULT_TIMEOUT = 10.0


CREATE_RECIPES_TABLE = """
CREATE TABLE IF NOT EXISTS recipes (
    id VARCHAR(36) PRIMARY KEY,
    title VARCHAR(200) NOT NULL,
    ingredients TEXT NOT NULL,
    steps TEXT NOT NULL,
    cooking_time_minutes INTEGER NOT NULL,
    dietary_tags TEXT NOT NULL,
    created_at VARCHAR(32) NOT NULL,
    last_updated VARCHAR(32) NOT NULL
)
"""


INSERT_RECIPE = """
INSERT INTO recipes (
    id, title, ingredients, steps, cooking_time_minutes,
    dietary_tags, created_at, last_updated
) VALUES (
    :id, :title, :ingredients, :steps, :cooking_time_minutes,
    :dietary_tags, :created_at, :last_updated
)
"""


UPDATE_RECIPE = """
UPDATE recipes SET
    title = :title,
    ingredients = :ingredients,
    steps = :steps,
    cooking_time_minutes = :cooking_time_minutes,
    dietary_tags = :dietary_tags,
    created_at = :created_at,
    last_updated = :last_updated
WHERE id = :id
"""


GET_RECIPE = "SELECT * FROM recipes WHERE id = :id"


LIST_RECIPES = "SELECT * FROM recipes ORDER BY created_at"


LIST_RECIPES_UP_TO = (
    "SELECT * FROM recipes WHERE cooking_time_minutes <= :max_minutes ORDER BY created_at"
)


DELETE_RECIPE = "DELETE FROM recipes WHERE id = :id"


COUNT_RECIPES = "SELECT COUNT(*) FROM recipes"


def encode_tags(tags: Iterable[str]) -> str:
    """Serialise dietary tags to the JSON array stored in the text column."""

    return json.dumps(list(tags))


def decode_tags(value: Optional[str]) -> List[str]:
    if not value:
        return []
    tags = json.loads(value)
    if not isinstance(tags, list):
        raise StorageError(f"Stored dietary tags are not a list: {value!r}")
    return [str(tag) for tag in tags]


class SqlRecipeStorage:
    """Recipe storage backed by a SQL database through ``databases``.

    Every operation opens its own connection and is bounded by ``timeout``
    seconds. Mutations run inside a transaction so a failed or timed out call
    leaves the table untouched.
    """

    def __init__(self, url: str = DEFAULT_DATABASE_URL, *, timeout: float = DEFAULT_TIMEOUT) -> None:
        self._url = url
        self._timeout = timeout
        self._schema_ready = False

    @classmethod
    def from_env(cls) -> "SqlRecipeStorage":
        """Build a storage instance from environment variables."""

        url = os.environ.get("DATABASE_URL", DEFAULT_DATABASE_URL)
        timeout = float(os.environ.get("RECIPE_STORAGE_TIMEOUT", DEFAULT_TIMEOUT))
        return cls(url, timeout=timeout)

    async def insert(self, recipe: Recipe) -> Recipe:
        async def insert() -> Recipe:
            async with self._connect() as database:
                async with database.transaction():
                    if await database.fetch_one(query=GET_RECIPE, values={"id": recipe.id}):
                        raise StorageError(f"Recipe '{recipe.id}' already exists.")
                    await database.execute(query=INSERT_RECIPE, values=_recipe_to_row(recipe))
            return recipe

        return await self._run(insert)

    async def find_by_id(self, recipe_id: str) -> Optional[Recipe]:
        async def find() -> Optional[Recipe]:
            async with self._connect() as database:
                row = await database.fetch_one(query=GET_RECIPE, values={"id": recipe_id})
            return _row_to_recipe(row) if row is not None else None

        return await self._run(find)

    async def find_all(self) -> List[Recipe]:
        async def find() -> List[Recipe]:
            async with self._connect() as database:
                rows = await database.fetch_all(query=LIST_RECIPES)
            return [_row_to_recipe(row) for row in rows]

        return await self._run(find)

    async def replace(self, recipe: Recipe) -> Recipe:
        async def replace() -> Recipe:
            async with self._connect() as database:
                async with database.transaction():
                    if not await database.fetch_one(query=GET_RECIPE, values={"id": recipe.id}):
                        raise StorageError(f"Recipe '{recipe.id}' does not exist.")
                    await database.execute(query=UPDATE_RECIPE, values=_recipe_to_row(recipe))
            return recipe

        return await self._run(replace)

    async def remove(self, recipe_id: str) -> bool:
        async def remove() -> bool:
            async with self._connect() as database:
                async with database.transaction():
                    if not await database.fetch_one(query=GET_RECIPE, values={"id": recipe_id}):
                        return False
                    await database.execute(query=DELETE_RECIPE, values={"id": recipe_id})
            return True

        return await self._run(remove)

    async def find_matching(
        self,
        tags: Optional[AbstractSet[str]],
        max_minutes: Optional[int],
    ) -> List[Recipe]:
        async def find() -> List[Recipe]:
            async with self._connect() as database:
                if max_minutes is None:
                    rows = await database.fetch_all(query=LIST_RECIPES)
                else:
                    rows = await database.fetch_all(
                        query=LIST_RECIPES_UP_TO, values={"max_minutes": max_minutes}
                    )
            # Tags live in a JSON text column, so that criterion is checked here.
            return filter_recipes((_row_to_recipe(row) for row in rows), tags, None)

        return await self._run(find)

    async def count(self) -> int:
        async def count() -> int:
            async with self._connect() as database:
                return int(await database.fetch_val(query=COUNT_RECIPES))

        return await self._run(count)

    @asynccontextmanager
    async def _connect(self) -> AsyncIterator[Database]:
        async with Database(self._url) as database:
            if not self._schema_ready:
                await database.execute(query=CREATE_RECIPES_TABLE)
                self._schema_ready = True
            yield database

    async def _run(self, operation: Callable[[], Awaitable[T]]) -> T:
        try:
            return await asyncio.wait_for(operation(), timeout=self._timeout)
        except StorageError:
            raise
        except asyncio.TimeoutError as exc:
            raise StorageError(f"Recipe storage timed out after {self._timeout} seconds.") from exc
        except Exception as exc:
            raise StorageError(f"Recipe storage failed: {exc}") from exc


def _recipe_to_row(recipe: Recipe) -> Dict[str, Any]:
    return {
        "id": recipe.id,
        "title": recipe.title,
        "ingredients": recipe.ingredients,
        "steps": recipe.steps,
        "cooking_time_minutes": recipe.cooking_time_minutes,
        "dietary_tags": encode_tags(recipe.dietary_tags),
        # Fixed width keeps ORDER BY created_at chronological.
        "created_at": recipe.created_at.isoformat(timespec="microseconds"),
        "last_updated": recipe.last_updated.isoformat(timespec="microseconds"),
    }


def _row_to_recipe(row: Record) -> Recipe:
    return Recipe(
        id=row["id"],
        title=row["title"],
        ingredients=row["ingredients"],
        steps=row["steps"],
        cooking_time_minutes=int(row["cooking_time_minutes"]),
        dietary_tags=decode_tags(row["dietary_tags"]),
        created_at=datetime.fromisoformat(row["created_at"]),
        last_updated=datetime.fromisoformat(row["last_updated"]),
    )


__all__ = ["SqlRecipeStorage", "decode_tags", "encode_tags"]
