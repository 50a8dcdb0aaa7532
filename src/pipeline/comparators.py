"""Composite sort comparators.

A comparator is an ordered list of key functions, each with its own
direction. Sorting applies one stable pass per key, least significant
first, so ties on the primary key keep the secondary order.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Iterable

from core.errors import DrillCompositionError

KeyFunction = Callable[[Any], Any]


@dataclass(frozen=True)
class SortKey:
    """One comparator key and its direction."""

    key: KeyFunction
    descending: bool = False


@dataclass(frozen=True)
class Comparator:
    """Immutable composite comparator.

    Attributes:
        keys: Sort keys from most to least significant.
    """

    keys: tuple[SortKey, ...]

    def then_comparing(self, key: KeyFunction) -> "Comparator":
        """Return a comparator that breaks ties with ``key``."""
        return Comparator(keys=self.keys + (SortKey(key=_require_callable(key)),))

    def reversed(self) -> "Comparator":
        """Return a comparator with every key direction flipped."""
        flipped = tuple(SortKey(key=item.key, descending=not item.descending) for item in self.keys)
        return Comparator(keys=flipped)

    def sort(self, items: Iterable[Any]) -> list[Any]:
        """Stable-sort items by this comparator.

        Raises:
            DrillCompositionError: If projected keys have no defined ordering.
        """
        ordered = list(items)
        for sort_key in reversed(self.keys):
            ordered = _sort_pass(ordered, sort_key.key, sort_key.descending)
        return ordered


def comparing(key: KeyFunction) -> Comparator:
    """Build a comparator ordering by one key function.

    Raises:
        DrillCompositionError: If key is not callable.
    """
    return Comparator(keys=(SortKey(key=_require_callable(key)),))


def natural_order() -> Comparator:
    """Comparator ordering items by their own natural ordering."""
    return comparing(_identity)


def sort_items(items: Iterable[Any], comparator: Comparator | None = None) -> list[Any]:
    """Stable-sort items naturally or by a comparator."""
    return (comparator or natural_order()).sort(items)


def _sort_pass(items: list[Any], key: KeyFunction, descending: bool) -> list[Any]:
    try:
        return sorted(items, key=key, reverse=descending)
    except TypeError as error:
        raise DrillCompositionError(
            f"Cannot sort items: {error}. "
            "Sort only values with a defined ordering or pass a comparator."
        ) from error


def _require_callable(key: object) -> KeyFunction:
    if not callable(key):
        raise DrillCompositionError(
            f"Comparator key must be callable, got {type(key).__name__}."
        )
    return key


def _identity(item: Any) -> Any:
    return item
