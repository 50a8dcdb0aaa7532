"""Drill registry keyed by drill name."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Mapping

from core.config import DrillsConfig
from core.errors import DrillNotFoundError
from drills import exercises


@dataclass(frozen=True)
class DrillEntry:
    """One registered drill.

    Attributes:
        function: Drill callable.
        reads_verse: Whether the drill takes a config to locate the verse.
    """

    function: Callable[..., Any]
    reads_verse: bool = False


DRILLS: Mapping[str, DrillEntry] = {
    "print-sentence": DrillEntry(exercises.print_sentence),
    "count-words": DrillEntry(exercises.count_words),
    "sum-word-lengths": DrillEntry(exercises.sum_word_lengths),
    "longest-word-length": DrillEntry(exercises.longest_word_length),
    "first-names": DrillEntry(exercises.first_names),
    "first-names-joined": DrillEntry(exercises.first_names_joined),
    "first-names-sorted": DrillEntry(exercises.first_names_sorted),
    "first-three-by-last-then-first": DrillEntry(exercises.first_three_by_last_then_first),
    "unique-names-sorted": DrillEntry(exercises.unique_names_sorted),
    "first-to-last": DrillEntry(exercises.first_to_last),
    "lower-first-to-upper-last": DrillEntry(exercises.lower_first_to_upper_last),
    "first-to-last-by-reduce": DrillEntry(exercises.first_to_last_by_reduce),
    "four-letter-words": DrillEntry(exercises.four_letter_words, reads_verse=True),
    "sum-first-twelve": DrillEntry(exercises.sum_first_twelve),
    "sum-first-twelve-exclusive": DrillEntry(exercises.sum_first_twelve_exclusive),
    "sum-first-twelve-iterate": DrillEntry(exercises.sum_first_twelve_iterate),
    "people-by-last-name": DrillEntry(exercises.people_by_last_name),
    "last-names-by-last-name": DrillEntry(exercises.last_names_by_last_name),
}


def drill_names() -> tuple[str, ...]:
    """Return registered drill names in registration order."""
    return tuple(DRILLS)


def run_drill(name: str, config: DrillsConfig | None = None) -> Any:
    """Run a drill by name and return its result.

    Args:
        name: Registered drill name.
        config: Optional runtime config for drills that read the verse.

    Raises:
        DrillNotFoundError: If no drill has that name.
    """
    entry = DRILLS.get(name)
    if entry is None:
        raise DrillNotFoundError(
            f"Unknown drill '{name}'. Use one of: {', '.join(drill_names())}."
        )
    if entry.reads_verse:
        return entry.function(config)
    return entry.function()
