from __future__ import annotations

import pytest

from recipeshare.validation import clean_draft, group_by_field, validate_draft


VALID = {
    "title": "Pancakes",
    "ingredients": "flour, milk, eggs",
    "steps": "mix and fry",
    "cookingTimeMinutes": 20,
    "dietaryTags": ["vegetarian"],
}


def fields(draft: dict) -> set:
    return {problem.field for problem in validate_draft(draft)}


def test_valid_draft_has_no_problems():
    assert validate_draft(VALID) == []


def test_empty_draft_reports_every_required_field():
    assert fields({}) == {"title", "ingredients", "steps", "cookingTimeMinutes"}


@pytest.mark.parametrize("title", ("abc", "x" * 200))
def test_title_length_bounds_are_inclusive(title: str):
    assert fields({**VALID, "title": title}) == set()


@pytest.mark.parametrize("title", ("ab", "x" * 201))
def test_title_outside_bounds_is_rejected(title: str):
    assert fields({**VALID, "title": title}) == {"title"}


@pytest.mark.parametrize("minutes", (1, 1440))
def test_cooking_time_bounds_are_inclusive(minutes: int):
    assert fields({**VALID, "cookingTimeMinutes": minutes}) == set()


@pytest.mark.parametrize("minutes", (0, 1441, -5, "10", 12.5, True))
def test_cooking_time_must_be_an_integer_in_range(minutes):
    assert fields({**VALID, "cookingTimeMinutes": minutes}) == {"cookingTimeMinutes"}


@pytest.mark.parametrize("tags", ("vegan", ["vegan", ""], [1, 2], {"tag": "vegan"}))
def test_dietary_tags_must_be_a_list_of_strings(tags):
    assert fields({**VALID, "dietaryTags": tags}) == {"dietaryTags"}


def test_group_by_field_keeps_every_message():
    grouped = group_by_field(validate_draft({"title": "ab", "cookingTimeMinutes": 0}))

    assert set(grouped) == {"title", "ingredients", "steps", "cookingTimeMinutes"}
    assert all(len(messages) == 1 for messages in grouped.values())


def test_clean_draft_strips_and_deduplicates_tags():
    cleaned = clean_draft({**VALID, "dietaryTags": [" vegan", "vegan ", "quick"]})

    assert cleaned.dietary_tags == ["vegan", "quick"]
    assert cleaned.cooking_time_minutes == 20
