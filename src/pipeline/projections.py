"""Named projections and predicates for declarative pipelines.

Pipeline specs refer to functions by name. Each projection declares which
item kind it accepts and which kind it produces so a spec can be checked
stage by stage before anything runs.
"""

from __future__ import annotations

from dataclasses import dataclass
from operator import attrgetter
from typing import Any, Callable, Iterable, Mapping

from core.types import Person
from pipeline.text_source import split_words

ANY_KIND = "any"


@dataclass(frozen=True)
class Projection:
    """A named one-to-one item function."""

    name: str
    accepts: str
    produces: str
    function: Callable[[Any], Any]

    def output_kind(self, input_kind: str) -> str:
        """Return the produced kind, resolving pass-through projections."""
        return input_kind if self.produces == ANY_KIND else self.produces


@dataclass(frozen=True)
class FlatProjection:
    """A named one-to-many item function."""

    name: str
    accepts: str
    produces: str
    function: Callable[[Any], Iterable[Any]]


PROJECTIONS: Mapping[str, Projection] = {
    "identity": Projection("identity", ANY_KIND, ANY_KIND, lambda item: item),
    "first_name": Projection("first_name", "person", "string", attrgetter("first_name")),
    "last_name": Projection("last_name", "person", "string", attrgetter("last_name")),
    "lower": Projection("lower", "string", "string", str.lower),
    "upper": Projection("upper", "string", "string", str.upper),
    "length": Projection("length", "string", "int", len),
}

FLAT_PROJECTIONS: Mapping[str, FlatProjection] = {
    "names": FlatProjection(
        "names", "person", "string", lambda person: (person.first_name, person.last_name)
    ),
    "words": FlatProjection("words", "string", "string", split_words),
}

PREDICATE_OPERATORS: Mapping[str, Callable[[Any, Any], bool]] = {
    "equals": lambda value, expected: value == expected,
    "not_equals": lambda value, expected: value != expected,
    "startswith": lambda value, prefix: str(value).startswith(prefix),
    "at_least": lambda value, bound: value >= bound,
    "at_most": lambda value, bound: value <= bound,
}


def accepts_kind(accepted: str, item_kind: str) -> bool:
    """Return whether a function accepting ``accepted`` can take ``item_kind``."""
    return accepted == ANY_KIND or accepted == item_kind


def build_predicate(
    projection: Projection,
    operator_name: str,
    operand: object,
) -> Callable[[Any], bool]:
    """Build a filter predicate from a projection and a named comparison."""
    compare = PREDICATE_OPERATORS[operator_name]
    function = projection.function
    return lambda item: compare(function(item), operand)


def person_from_mapping(payload: Mapping[str, object]) -> Person:
    """Build a person record from a ``first_name``/``last_name`` mapping."""
    return Person(str(payload["first_name"]), str(payload["last_name"]))
