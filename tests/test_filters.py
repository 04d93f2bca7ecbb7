"""Tests for ``ResourceFilter`` and text sanitisation."""
import pytest
from werkzeug.datastructures import MultiDict

from reliefhub.errors import ValidationError
from reliefhub.models import Resource
from reliefhub.services.filters import ResourceFilter
from reliefhub.util.sanitization import strip_tags


def make(**values):
    defaults = {
        "types": ["food"],
        "title": "Soup kitchen",
        "description": "Hot meals daily",
        "location": "Elm Street",
        "available": True,
    }
    defaults.update(values)
    return Resource(**defaults)


def test_empty_filter_matches_everything() -> None:
    assert ResourceFilter().matches(make(available=False))


def test_type_match_is_any_of_selected() -> None:
    resource = make(types=["shelter", "water"])
    assert ResourceFilter(types=("water", "medical")).matches(resource)
    assert not ResourceFilter(types=("medical",)).matches(resource)


@pytest.mark.parametrize("query", ["SOUP", "meals", "elm st"])
def test_query_is_case_insensitive_substring(query) -> None:
    assert ResourceFilter(query=query).matches(make())


def test_query_misses() -> None:
    assert not ResourceFilter(query="blankets").matches(make())


def test_available_only() -> None:
    assert not ResourceFilter(available_only=True).matches(make(available=False))
    assert ResourceFilter(available_only=False).matches(make(available=False))


def test_from_args_parses_repeated_and_comma_types() -> None:
    args = MultiDict([("type", "food,Water"), ("type", "food"), ("q", " gym "), ("available", "true")])
    resource_filter = ResourceFilter.from_args(args)
    assert resource_filter.types == ("food", "water")
    assert resource_filter.query == "gym"
    assert resource_filter.available_only is True


def test_from_args_without_criteria_is_none() -> None:
    assert ResourceFilter.from_args(MultiDict([("available", "false")])) is None


@pytest.mark.parametrize("args", [[("type", "spaceship")], [("available", "sometimes")]])
def test_from_args_rejects_bad_values(args) -> None:
    with pytest.raises(ValidationError):
        ResourceFilter.from_args(MultiDict(args))


@pytest.mark.parametrize(
    "text, expected",
    [
        ("<b>Cots</b> and blankets ", "Cots and blankets"),
        ("  <script>alert(1)</script>Gym", "alert(1)Gym"),
        ("", ""),
        (None, ""),
    ],
)
def test_strip_tags_removes_markup_and_trims(text, expected) -> None:
    assert strip_tags(text) == expected
