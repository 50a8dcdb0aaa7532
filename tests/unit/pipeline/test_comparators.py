"""Unit tests for composite comparators."""

from __future__ import annotations

from operator import itemgetter

import pytest

from core.errors import DrillCompositionError
from pipeline.comparators import comparing, sort_items


def test_reversed_flips_every_key() -> None:
    """Reversed comparator should order descending on all keys."""
    rows = [("a", 1), ("b", 1), ("a", 2)]
    comparator = comparing(itemgetter(1)).then_comparing(itemgetter(0)).reversed()

    assert comparator.sort(rows) == [("a", 2), ("b", 1), ("a", 1)]


def test_mixed_directions_keep_secondary_ascending() -> None:
    """Keys added after reversing should keep their own direction."""
    rows = [("b", 1), ("a", 1), ("c", 2)]
    comparator = comparing(itemgetter(1)).reversed().then_comparing(itemgetter(0))

    assert comparator.sort(rows) == [("c", 2), ("a", 1), ("b", 1)]


def test_sort_items_defaults_to_natural_order() -> None:
    """Without a comparator items should sort naturally."""
    assert sort_items(["Duncan", "Anastasia", "Bernard"]) == ["Anastasia", "Bernard", "Duncan"]


def test_comparing_rejects_non_callable_key() -> None:
    """Comparator keys must be callables."""
    with pytest.raises(DrillCompositionError):
        comparing("last_name")  # type: ignore[arg-type]
