"""Unit tests for terminal collectors."""

from __future__ import annotations

import itertools
from operator import attrgetter

import pytest

from core.errors import DrillCompositionError, DrillDuplicateKeyError
from core.types import Person
from drills.people import PEOPLE
from pipeline.collectors import group_by, joining, mapping, summing, to_dict
from pipeline.stream import Stream

first_name = attrgetter("first_name")
last_name = attrgetter("last_name")


@pytest.mark.parametrize("people", list(itertools.permutations(PEOPLE[4:])))
def test_to_dict_has_one_entry_per_distinct_key(people: tuple[Person, ...]) -> None:
    """Non-colliding keys should map one to one onto values in any input order."""
    result = Stream.from_iterable(people).to_dict(first_name, last_name)

    assert result == {
        "Daphne": "Sawrey",
        "Gerald": "Hawkshead",
        "Eustace": "Hawkshead",
        "Felicity": "Coniston",
    }


def test_to_dict_fails_fast_on_duplicate_keys() -> None:
    """Colliding keys without a merge function should raise."""
    people = [Person("Gerald", "Hawkshead"), Person("Eustace", "Hawkshead")]

    with pytest.raises(DrillDuplicateKeyError):
        Stream.from_iterable(people).to_dict(last_name, first_name)


def test_to_dict_merge_resolves_duplicate_keys() -> None:
    """A merge function should combine colliding values."""
    people = [Person("Gerald", "Hawkshead"), Person("Eustace", "Hawkshead")]

    result = Stream.from_iterable(people).to_dict(
        last_name, first_name, merge=lambda existing, incoming: f"{existing}+{incoming}"
    )

    assert result == {"Hawkshead": "Gerald+Eustace"}


def test_group_by_preserves_group_order() -> None:
    """Groups should list members in input order."""
    collect = group_by(len)

    assert collect(["bb", "a", "cc", "d"]) == {2: ["bb", "cc"], 1: ["a", "d"]}


def test_group_by_with_mapping_downstream() -> None:
    """Downstream mapping should project each group member."""
    collect = group_by(len, mapping(str.upper))

    assert collect(["bb", "a"]) == {2: ["BB"], 1: ["A"]}


def test_joining_rejects_non_string_items() -> None:
    """Joining numbers without mapping them should fail clearly."""
    with pytest.raises(DrillCompositionError):
        joining(",")([1, 2])


def test_summing_with_and_without_extractor() -> None:
    """Summing should default to the items themselves."""
    assert summing()([1, 2, 3]) == 6
    assert summing(len)(["ab", "c"]) == 3


def test_to_dict_rejects_non_callable_projection() -> None:
    """Collector projections should be validated when built."""
    with pytest.raises(DrillCompositionError):
        to_dict("first_name", last_name)  # type: ignore[arg-type]
