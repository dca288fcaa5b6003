from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List


@dataclass
class Recipe:
    """Domain object representing a stored recipe."""

    id: str
    title: str
    ingredients: str
    steps: str
    cooking_time_minutes: int
    created_at: datetime
    last_updated: datetime
    dietary_tags: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        """Return the JSON representation used by the HTTP API."""

        return {
            "id": self.id,
            "title": self.title,
            "ingredients": self.ingredients,
            "steps": self.steps,
            "cookingTimeMinutes": self.cooking_time_minutes,
            "dietaryTags": list(self.dietary_tags),
            "createdAt": self.created_at.isoformat(timespec="microseconds"),
            "lastUpdated": self.last_updated.isoformat(timespec="microseconds"),
        }


__all__ = ["Recipe"]
