from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List, Mapping

TITLE_MIN_LENGTH = 3
TITLE_MAX_LENGTH = 200
MIN_COOKING_TIME = 1
MAX_COOKING_TIME = 1440


@dataclass(frozen=True)
class FieldError:
    field: str
    message: str


@dataclass(frozen=True)
class CleanDraft:
    """Validated recipe fields ready to be stored."""

    title: str
    ingredients: str
    steps: str
    cooking_time_minutes: int
    dietary_tags: List[str]


def validate_draft(draft: Mapping[str, Any]) -> List[FieldError]:
    """Return every constraint the draft violates, in field order.

    An empty list means the draft can be passed to :func:`clean_draft`.
    """

    problems: List[FieldError] = []

    title = draft.get("title")
    if not _is_filled(title):
        problems.append(FieldError("title", "The title field is required."))
    elif not TITLE_MIN_LENGTH <= len(title) <= TITLE_MAX_LENGTH:
        problems.append(
            FieldError(
                "title",
                f"The title must be between {TITLE_MIN_LENGTH} and "
                f"{TITLE_MAX_LENGTH} characters long.",
            )
        )

    for name in ("ingredients", "steps"):
        if not _is_filled(draft.get(name)):
            problems.append(FieldError(name, f"The {name} field is required."))

    minutes = draft.get("cookingTimeMinutes")
    if minutes is None:
        problems.append(
            FieldError("cookingTimeMinutes", "The cookingTimeMinutes field is required.")
        )
    elif isinstance(minutes, bool) or not isinstance(minutes, int):
        problems.append(
            FieldError("cookingTimeMinutes", "The cookingTimeMinutes field must be an integer.")
        )
    elif not MIN_COOKING_TIME <= minutes <= MAX_COOKING_TIME:
        problems.append(
            FieldError(
                "cookingTimeMinutes",
                f"The cookingTimeMinutes field must be between {MIN_COOKING_TIME} "
                f"and {MAX_COOKING_TIME}.",
            )
        )

    tags = draft.get("dietaryTags")
    if tags is not None:
        if isinstance(tags, (str, bytes)) or not isinstance(tags, (list, tuple, set, frozenset)):
            problems.append(FieldError("dietaryTags", "The dietaryTags field must be a list of strings."))
        elif not all(_is_filled(tag) for tag in tags):
            problems.append(FieldError("dietaryTags", "Dietary tags must be non-empty strings."))

    return problems


def clean_draft(draft: Mapping[str, Any]) -> CleanDraft:
    """Convert a draft that passed :func:`validate_draft` into stored values."""

    tags = draft.get("dietaryTags") or []
    return CleanDraft(
        title=draft["title"],
        ingredients=draft["ingredients"],
        steps=draft["steps"],
        cooking_time_minutes=draft["cookingTimeMinutes"],
        # Duplicates carry no meaning; keep the first occurrence.
        dietary_tags=list(dict.fromkeys(tag.strip() for tag in tags)),
    )


def group_by_field(problems: List[FieldError]) -> Dict[str, List[str]]:
    grouped: Dict[str, List[str]] = {}
    for problem in problems:
        grouped.setdefault(problem.field, []).append(problem.message)
    return grouped


def _is_filled(value: Any) -> bool:
    return isinstance(value, str) and bool(value.strip())


__all__ = [
    "CleanDraft",
    "FieldError",
    "clean_draft",
    "group_by_field",
    "validate_draft",
]
