from __future__ import annotations

from typing import Dict, List


class ValidationError(ValueError):
    """Raised when a draft violates one or more recipe constraints.

    ``errors`` maps each offending field name to the list of messages for
    that field, so callers can report every problem at once.
    """

    def __init__(self, errors: Dict[str, List[str]]) -> None:
        self.errors = errors
        fields = ", ".join(sorted(errors))
        super().__init__(f"Invalid recipe data: {fields}")


class RecipeNotFound(KeyError):
    """Raised when no recipe exists for the requested id."""

    def __init__(self, recipe_id: str) -> None:
        self.recipe_id = recipe_id
        super().__init__(f"Recipe '{recipe_id}' does not exist.")

    def __str__(self) -> str:
        return self.args[0]


class StorageError(RuntimeError):
    """The backing store failed or rejected an operation."""


__all__ = ["RecipeNotFound", "StorageError", "ValidationError"]
