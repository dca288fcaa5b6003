from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Union

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RecipeCreated:
    id: str
    title: str


@dataclass(frozen=True)
class RecipeUpdated:
    id: str


@dataclass(frozen=True)
class RecipeDeleted:
    id: str


RecipeEvent = Union[RecipeCreated, RecipeUpdated, RecipeDeleted]
EventListener = Callable[[RecipeEvent], None]


def log_recipe_event(event: RecipeEvent) -> None:
    """Default listener: write each domain event to the application log."""

    if isinstance(event, RecipeCreated):
        logger.info("Created recipe %s - %s", event.id, event.title)
    elif isinstance(event, RecipeUpdated):
        logger.info("Updated recipe %s", event.id)
    elif isinstance(event, RecipeDeleted):
        logger.info("Deleted recipe %s", event.id)


__all__ = [
    "EventListener",
    "RecipeCreated",
    "RecipeDeleted",
    "RecipeEvent",
    "RecipeUpdated",
    "log_recipe_event",
]
