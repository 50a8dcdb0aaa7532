"""Immutable stream pipelines.

A ``Stream`` pairs a source with an ordered tuple of stages. Intermediate
operations return a new stream and never touch the original, so one
stream description can be evaluated many times. Terminal operations pull
the source, run each stage in order and return one result.
"""

from __future__ import annotations

import functools
import itertools
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable, Iterable, Iterator

from core.constants import DEFAULT_JOIN_SEPARATOR
from core.errors import DrillCompositionError, DrillEmptyStreamError
from core.logging_config import get_logger
from pipeline import collectors
from pipeline.collectors import Collector, MergeFunction
from pipeline.comparators import Comparator, sort_items
from pipeline.text_source import read_lines

_LOGGER = get_logger(__name__)

StageFunction = Callable[[Iterator[Any]], Iterator[Any]]


@dataclass(frozen=True)
class StreamSource:
    """Item source for a stream.

    Attributes:
        name: Short description used in logs.
        load: Zero-argument callable returning the items, called once per
            terminal operation.
        bounded: Whether the source is finite.
    """

    name: str
    load: Callable[[], Iterable[Any]]
    bounded: bool = True


@dataclass(frozen=True)
class Stage:
    """One intermediate pipeline stage.

    Attributes:
        name: Stage kind, e.g. ``filter`` or ``limit``.
        apply: Function from the incoming item iterator to the outgoing one.
        bounds: Whether the stage makes an unbounded stream finite.
    """

    name: str
    apply: StageFunction
    bounds: bool = False


class Stream:
    """Lazy, reusable pipeline over a source."""

    def __init__(self, source: StreamSource, stages: tuple[Stage, ...] = ()) -> None:
        self._source = source
        self._stages = stages

    @classmethod
    def of(cls, *items: Any) -> "Stream":
        """Stream over the given items."""
        return cls.from_iterable(items)

    @classmethod
    def from_iterable(cls, items: Iterable[Any]) -> "Stream":
        """Stream over a snapshot of a finite iterable."""
        snapshot = tuple(items)
        return cls(StreamSource(name=f"items[{len(snapshot)}]", load=lambda: snapshot))

    @classmethod
    def from_lines(cls, source_path: Path | str) -> "Stream":
        """Stream over the lines of a text file.

        The file is read when a terminal operation runs, once per run.
        """
        path = Path(source_path)
        return cls(StreamSource(name=f"lines:{path}", load=lambda: read_lines(path)))

    @classmethod
    def range(cls, start: int, end: int) -> "Stream":
        """Stream over integers from ``start`` up to but excluding ``end``."""
        _require_ints(start, end, "range")
        return cls(StreamSource(name=f"range({start},{end})", load=lambda: range(start, end)))

    @classmethod
    def range_closed(cls, start: int, end: int) -> "Stream":
        """Stream over integers from ``start`` up to and including ``end``."""
        _require_ints(start, end, "range_closed")
        return cls(
            StreamSource(
                name=f"range_closed({start},{end})",
                load=lambda: range(start, end + 1),
            )
        )

    @classmethod
    def iterate(cls, seed: Any, step: Callable[[Any], Any]) -> "Stream":
        """Infinite stream ``seed, step(seed), step(step(seed)), ...``.

        Bound it with ``limit`` before sorting or any terminal operation.
        """
        _require_callable(step, "iterate step")
        return cls(
            StreamSource(
                name=f"iterate({seed!r})",
                load=lambda: _iterate(seed, step),
                bounded=False,
            )
        )

    @property
    def stage_names(self) -> tuple[str, ...]:
        """Names of the intermediate stages in order."""
        return tuple(stage.name for stage in self._stages)

    @property
    def bounded(self) -> bool:
        """Whether evaluating this stream terminates."""
        return self._source.bounded or any(stage.bounds for stage in self._stages)

    def filter(self, predicate: Callable[[Any], bool]) -> "Stream":
        """Keep items for which ``predicate`` is true."""
        _require_callable(predicate, "filter predicate")
        return self._append(
            Stage(name="filter", apply=lambda items: (i for i in items if predicate(i)))
        )

    def map(self, function: Callable[[Any], Any]) -> "Stream":
        """Replace each item with ``function(item)``."""
        _require_callable(function, "map function")
        return self._append(Stage(name="map", apply=lambda items: (function(i) for i in items)))

    def flat_map(self, function: Callable[[Any], Iterable[Any]]) -> "Stream":
        """Replace each item with the items of ``function(item)``."""
        _require_callable(function, "flat_map function")
        return self._append(
            Stage(
                name="flat_map",
                apply=lambda items: itertools.chain.from_iterable(function(i) for i in items),
            )
        )

    def sorted(self, comparator: Comparator | None = None) -> "Stream":
        """Stable sort, naturally or by ``comparator``.

        Raises:
            DrillCompositionError: If the stream is unbounded.
        """
        if comparator is not None and not isinstance(comparator, Comparator):
            raise DrillCompositionError(
                f"sorted expects a Comparator, got {type(comparator).__name__}. "
                "Build one with comparing()."
            )
        if not self.bounded:
            raise DrillCompositionError(
                "Cannot sort an unbounded stream. Apply limit() before sorted()."
            )
        return self._append(
            Stage(name="sorted", apply=lambda items: iter(sort_items(items, comparator)))
        )

    def limit(self, max_size: int) -> "Stream":
        """Keep at most the first ``max_size`` items.

        Raises:
            DrillCompositionError: If ``max_size`` is negative or not an int.
        """
        if isinstance(max_size, bool) or not isinstance(max_size, int) or max_size < 0:
            raise DrillCompositionError(
                f"limit expects a non-negative integer, got {max_size!r}."
            )
        return self._append(
            Stage(
                name="limit",
                apply=lambda items: itertools.islice(items, max_size),
                bounds=True,
            )
        )

    def distinct(self) -> "Stream":
        """Drop repeated items, keeping the first occurrence."""
        return self._append(Stage(name="distinct", apply=_distinct))

    def peek(self, action: Callable[[Any], None]) -> "Stream":
        """Call ``action`` on each item as it passes through."""
        _require_callable(action, "peek action")
        return self._append(Stage(name="peek", apply=lambda items: _peek(items, action)))

    def collect(self, collector: Collector) -> Any:
        """Evaluate the stream with any collector."""
        _require_callable(collector, "collector")
        return self._evaluate("collect", collector)

    def to_list(self) -> list[Any]:
        """Materialize items into a list."""
        return self._evaluate("to_list", collectors.to_list())

    def to_dict(
        self,
        key_fn: Callable[[Any], Any],
        value_fn: Callable[[Any], Any],
        merge: MergeFunction | None = None,
    ) -> dict[Any, Any]:
        """Build a key to value mapping.

        Raises:
            DrillDuplicateKeyError: If two items share a key and no merge
                function is given.
        """
        return self._evaluate("to_dict", collectors.to_dict(key_fn, value_fn, merge))

    def group_by(
        self,
        key_fn: Callable[[Any], Any],
        downstream: Collector | None = None,
    ) -> dict[Any, Any]:
        """Build a key to group mapping, groups in input order."""
        return self._evaluate("group_by", collectors.group_by(key_fn, downstream))

    def join(self, separator: str = DEFAULT_JOIN_SEPARATOR) -> str:
        """Join string items with ``separator``."""
        return self._evaluate("join", collectors.joining(separator))

    def count(self) -> int:
        """Number of items."""
        return self._evaluate("count", collectors.counting())

    def sum(self, extractor: Callable[[Any], int] | None = None) -> int:
        """Sum of the items, or of ``extractor(item)`` per item."""
        return self._evaluate("sum", collectors.summing(extractor))

    def max(self, extractor: Callable[[Any], Any] | None = None) -> Any:
        """Largest item or projected value.

        Raises:
            DrillEmptyStreamError: If the stream has no items.
        """
        return self._evaluate("max", _extreme(max, extractor))

    def min(self, extractor: Callable[[Any], Any] | None = None) -> Any:
        """Smallest item or projected value.

        Raises:
            DrillEmptyStreamError: If the stream has no items.
        """
        return self._evaluate("min", _extreme(min, extractor))

    def reduce(self, identity: Any, accumulator: Callable[[Any, Any], Any]) -> Any:
        """Left fold of the items starting from ``identity``."""
        _require_callable(accumulator, "reduce accumulator")
        return self._evaluate(
            "reduce", lambda items: functools.reduce(accumulator, items, identity)
        )

    def for_each(self, action: Callable[[Any], None]) -> None:
        """Call ``action`` on every item."""
        _require_callable(action, "for_each action")
        self._evaluate("for_each", lambda items: _consume(items, action))

    def _append(self, stage: Stage) -> "Stream":
        return Stream(self._source, self._stages + (stage,))

    def _evaluate(self, terminal: str, collector: Collector) -> Any:
        if not self.bounded:
            raise DrillCompositionError(
                f"Cannot run {terminal}() on an unbounded stream. Apply limit() first."
            )
        items: Iterator[Any] = iter(self._source.load())
        for stage in self._stages:
            items = stage.apply(items)
        result = collector(items)
        _LOGGER.debug(
            "pipeline_completed",
            source=self._source.name,
            stages=list(self.stage_names),
            terminal=terminal,
        )
        return result


def _iterate(seed: Any, step: Callable[[Any], Any]) -> Iterator[Any]:
    value = seed
    while True:
        yield value
        value = step(value)


def _distinct(items: Iterator[Any]) -> Iterator[Any]:
    seen_hashable: set[Any] = set()
    seen_unhashable: list[Any] = []
    for item in items:
        try:
            if item in seen_hashable:
                continue
            seen_hashable.add(item)
        except TypeError:
            if item in seen_unhashable:
                continue
            seen_unhashable.append(item)
        yield item


def _peek(items: Iterator[Any], action: Callable[[Any], None]) -> Iterator[Any]:
    for item in items:
        action(item)
        yield item


def _consume(items: Iterator[Any], action: Callable[[Any], None]) -> None:
    for item in items:
        action(item)


def _extreme(
    pick: Callable[..., Any],
    extractor: Callable[[Any], Any] | None,
) -> Collector:
    if extractor is not None:
        _require_callable(extractor, "extractor")

    def collect(items: Iterable[Any]) -> Any:
        values = items if extractor is None else (extractor(item) for item in items)
        sentinel = object()
        result = pick(values, default=sentinel)
        if result is sentinel:
            raise DrillEmptyStreamError(
                f"{pick.__name__}() needs at least one item, but the stream is empty."
            )
        return result

    return collect


def _require_ints(start: object, end: object, context: str) -> None:
    for value in (start, end):
        if isinstance(value, bool) or not isinstance(value, int):
            raise DrillCompositionError(
                f"{context} bounds must be integers, got {type(value).__name__}."
            )


def _require_callable(value: object, context: str) -> None:
    if not callable(value):
        raise DrillCompositionError(f"{context} must be callable, got {type(value).__name__}.")
