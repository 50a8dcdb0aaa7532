"""Terminal collectors for pipelines.

A collector is a plain callable that folds an iterable of items into
one result: a list, a mapping, a grouping, a joined string or a scalar.
"""

from __future__ import annotations

from typing import Any, Callable, Iterable

from core.constants import DEFAULT_JOIN_SEPARATOR
from core.errors import DrillCompositionError, DrillDuplicateKeyError

Collector = Callable[[Iterable[Any]], Any]
MergeFunction = Callable[[Any, Any], Any]


def to_list() -> Collector:
    """Collect items into a list in encounter order."""
    return list


def to_dict(
    key_fn: Callable[[Any], Any],
    value_fn: Callable[[Any], Any],
    merge: MergeFunction | None = None,
) -> Collector:
    """Collect items into a key to value mapping.

    Args:
        key_fn: Key projection.
        value_fn: Value projection.
        merge: Optional ``merge(existing, incoming)`` for colliding keys.

    Returns:
        Collector producing a dict in first-seen key order.

    Raises:
        DrillCompositionError: If a projection is not callable.
    """
    _require_callable(key_fn, "to_dict key_fn")
    _require_callable(value_fn, "to_dict value_fn")
    if merge is not None:
        _require_callable(merge, "to_dict merge")

    def collect(items: Iterable[Any]) -> dict[Any, Any]:
        mapping: dict[Any, Any] = {}
        for item in items:
            key = key_fn(item)
            value = value_fn(item)
            if key in mapping:
                if merge is None:
                    raise DrillDuplicateKeyError(
                        f"Duplicate key {key!r} (values {mapping[key]!r} and {value!r}). "
                        "Pass a merge function to resolve colliding keys."
                    )
                value = merge(mapping[key], value)
            mapping[key] = value
        return mapping

    return collect


def group_by(
    key_fn: Callable[[Any], Any],
    downstream: Collector | None = None,
) -> Collector:
    """Collect items into key to group mapping.

    Each group keeps input order. With a downstream collector the group
    value is that collector's result instead of the item list.
    """
    _require_callable(key_fn, "group_by key_fn")
    finisher = downstream or to_list()
    _require_callable(finisher, "group_by downstream")

    def collect(items: Iterable[Any]) -> dict[Any, Any]:
        groups: dict[Any, list[Any]] = {}
        for item in items:
            groups.setdefault(key_fn(item), []).append(item)
        return {key: finisher(members) for key, members in groups.items()}

    return collect


def mapping(fn: Callable[[Any], Any], downstream: Collector | None = None) -> Collector:
    """Project each item before handing it to a downstream collector."""
    _require_callable(fn, "mapping fn")
    finisher = downstream or to_list()

    def collect(items: Iterable[Any]) -> Any:
        return finisher(fn(item) for item in items)

    return collect


def joining(separator: str = DEFAULT_JOIN_SEPARATOR) -> Collector:
    """Join string items with a separator and no trailing separator."""
    if not isinstance(separator, str):
        raise DrillCompositionError(
            f"joining separator must be a string, got {type(separator).__name__}."
        )

    def collect(items: Iterable[Any]) -> str:
        return separator.join(_expect_strings(items))

    return collect


def counting() -> Collector:
    """Count items."""

    def collect(items: Iterable[Any]) -> int:
        return sum(1 for _ in items)

    return collect


def summing(extractor: Callable[[Any], int] | None = None) -> Collector:
    """Sum an integer projection of each item."""
    if extractor is not None:
        _require_callable(extractor, "summing extractor")

    def collect(items: Iterable[Any]) -> int:
        if extractor is None:
            return sum(items)
        return sum(extractor(item) for item in items)

    return collect


def _expect_strings(items: Iterable[Any]) -> Iterable[str]:
    for item in items:
        if not isinstance(item, str):
            raise DrillCompositionError(
                f"joining expects string items, got {type(item).__name__}. "
                "Map items to strings before joining."
            )
        yield item


def _require_callable(value: object, context: str) -> None:
    if not callable(value):
        raise DrillCompositionError(f"{context} must be callable, got {type(value).__name__}.")
