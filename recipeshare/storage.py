from __future__ import annotations

import copy
from typing import AbstractSet, Dict, Iterable, List, Optional, Protocol

from .errors import StorageError
from .models import Recipe


class RecipeRepository(Protocol):
    """Protocol describing the persistence operations used by the service."""

    async def insert(self, recipe: Recipe) -> Recipe:
        """Persist a new recipe or raise :class:`StorageError` if the id is taken."""

    async def find_by_id(self, recipe_id: str) -> Optional[Recipe]:
        """Return the recipe or ``None`` when it does not exist."""

    async def find_all(self) -> List[Recipe]:
        """Return every stored recipe, oldest first."""

    async def replace(self, recipe: Recipe) -> Recipe:
        """Overwrite an existing recipe or raise :class:`StorageError` if missing."""

    async def remove(self, recipe_id: str) -> bool:
        """Delete a recipe and report whether anything was removed."""

    async def find_matching(
        self,
        tags: Optional[AbstractSet[str]],
        max_minutes: Optional[int],
    ) -> List[Recipe]:
        """Return recipes that pass :func:`recipe_matches`."""

    async def count(self) -> int:
        """Return the number of stored recipes."""


def recipe_matches(
    recipe: Recipe,
    tags: Optional[AbstractSet[str]],
    max_minutes: Optional[int],
) -> bool:
    """Search predicate shared by the stores.

    A recipe matches when it shares at least one tag with ``tags`` and its
    cooking time does not exceed ``max_minutes``. A missing or empty tag set
    and a missing bound do not restrict anything.
    """

    if tags and tags.isdisjoint(recipe.dietary_tags):
        return False
    if max_minutes is not None and recipe.cooking_time_minutes > max_minutes:
        return False
    return True


def filter_recipes(
    recipes: Iterable[Recipe],
    tags: Optional[AbstractSet[str]],
    max_minutes: Optional[int],
) -> List[Recipe]:
    return [recipe for recipe in recipes if recipe_matches(recipe, tags, max_minutes)]


class InMemoryRecipeStorage:
    """Process local storage backend, used for development and tests."""

    def __init__(self) -> None:
        self._recipes: Dict[str, Recipe] = {}

    async def insert(self, recipe: Recipe) -> Recipe:
        if recipe.id in self._recipes:
            raise StorageError(f"Recipe '{recipe.id}' already exists.")
        self._recipes[recipe.id] = copy.deepcopy(recipe)
        return recipe

    async def find_by_id(self, recipe_id: str) -> Optional[Recipe]:
        recipe = self._recipes.get(recipe_id)
        return copy.deepcopy(recipe) if recipe is not None else None

    async def find_all(self) -> List[Recipe]:
        return [copy.deepcopy(recipe) for recipe in self._recipes.values()]

    async def replace(self, recipe: Recipe) -> Recipe:
        if recipe.id not in self._recipes:
            raise StorageError(f"Recipe '{recipe.id}' does not exist.")
        self._recipes[recipe.id] = copy.deepcopy(recipe)
        return recipe

    async def remove(self, recipe_id: str) -> bool:
        return self._recipes.pop(recipe_id, None) is not None

    async def find_matching(
        self,
        tags: Optional[AbstractSet[str]],
        max_minutes: Optional[int],
    ) -> List[Recipe]:
        return filter_recipes(await self.find_all(), tags, max_minutes)

    async def count(self) -> int:
        return len(self._recipes)


__all__ = [
    "InMemoryRecipeStorage",
    "RecipeRepository",
    "filter_recipes",
    "recipe_matches",
]
