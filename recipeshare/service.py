from __future__ import annotations

import logging
import uuid
from dataclasses import replace
from datetime import datetime, timedelta, timezone
from typing import Any, Callable, Iterable, List, Mapping, Optional, Sequence

from .errors import RecipeNotFound, ValidationError
from .events import EventListener, RecipeCreated, RecipeDeleted, RecipeEvent, RecipeUpdated, log_recipe_event
from .models import Recipe
from .storage import RecipeRepository
from .validation import clean_draft, group_by_field, validate_draft

logger = logging.getLogger(__name__)


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class RecipeService:
    """Validates drafts, stamps identities and timestamps, and drives the store.

    The service keeps no recipe state of its own; every call goes back to the
    repository. Storage errors propagate unchanged.
    """

    def __init__(
        self,
        storage: RecipeRepository,
        *,
        listeners: Optional[Sequence[EventListener]] = None,
        clock: Callable[[], datetime] = utcnow,
    ) -> None:
        self._storage = storage
        self._listeners = list(listeners) if listeners is not None else [log_recipe_event]
        self._clock = clock

    @property
    def storage(self) -> RecipeRepository:
        return self._storage

    async def list_all(self) -> List[Recipe]:
        return await self._storage.find_all()

    async def get_by_id(self, recipe_id: str) -> Recipe:
        recipe = await self._storage.find_by_id(recipe_id)
        if recipe is None:
            raise RecipeNotFound(recipe_id)
        return recipe

    async def create(self, draft: Mapping[str, Any]) -> Recipe:
        fields = _validated(draft)
        now = self._clock()
        recipe = Recipe(
            id=str(uuid.uuid4()),
            title=fields.title,
            ingredients=fields.ingredients,
            steps=fields.steps,
            cooking_time_minutes=fields.cooking_time_minutes,
            dietary_tags=fields.dietary_tags,
            created_at=now,
            last_updated=now,
        )
        created = await self._storage.insert(recipe)
        self._emit(RecipeCreated(id=created.id, title=created.title))
        return created

    async def update(self, recipe_id: str, draft: Mapping[str, Any]) -> Recipe:
        fields = _validated(draft)
        existing = await self.get_by_id(recipe_id)

        now = self._clock()
        if now <= existing.last_updated:
            # Each mutation must move last_updated forward.
            now = existing.last_updated + timedelta(microseconds=1)

        updated = replace(
            existing,
            title=fields.title,
            ingredients=fields.ingredients,
            steps=fields.steps,
            cooking_time_minutes=fields.cooking_time_minutes,
            dietary_tags=fields.dietary_tags,
            last_updated=now,
        )
        updated = await self._storage.replace(updated)
        self._emit(RecipeUpdated(id=recipe_id))
        return updated

    async def delete(self, recipe_id: str) -> None:
        if not await self._storage.remove(recipe_id):
            raise RecipeNotFound(recipe_id)
        self._emit(RecipeDeleted(id=recipe_id))

    async def search(
        self,
        dietary_tags: Optional[Iterable[str]] = None,
        max_cooking_time: Optional[int] = None,
    ) -> List[Recipe]:
        """Return recipes sharing any of ``dietary_tags`` and no longer than
        ``max_cooking_time`` minutes. Omitted criteria do not filter."""

        tags = frozenset(tag.strip() for tag in dietary_tags or () if tag.strip()) or None
        if tags is None and max_cooking_time is None:
            return await self.list_all()
        return await self._storage.find_matching(tags, max_cooking_time)

    def _emit(self, event: RecipeEvent) -> None:
        # The write is already stored; listener failures are only logged.
        for listener in self._listeners:
            try:
                listener(event)
            except Exception:
                logger.exception("Recipe event listener failed for %r", event)


def _validated(draft: Mapping[str, Any]):
    problems = validate_draft(draft)
    if problems:
        raise ValidationError(group_by_field(problems))
    return clean_draft(draft)


__all__ = ["RecipeService", "utcnow"]
