"""Pipeline drills over the fixed people list and the verse file.

Each drill is a standalone callable that composes one pipeline over the
fixed source data and returns its terminal result.
"""

from __future__ import annotations

from operator import attrgetter

from core.config import DrillsConfig
from core.types import Person
from drills.people import FOUR_WORDS, NUMBER_WORDS, PEOPLE, SENTENCE
from pipeline.collectors import mapping
from pipeline.comparators import comparing
from pipeline.stream import Stream
from pipeline.text_source import split_words

first_name = attrgetter("first_name")
last_name = attrgetter("last_name")


def print_sentence() -> None:
    """Print the sentence one word per line."""
    Stream.from_iterable(SENTENCE).for_each(print)


def count_words() -> int:
    """Count the words of a short phrase."""
    return Stream.from_iterable(FOUR_WORDS).count()


def sum_word_lengths() -> int:
    """Add up the lengths of the number words."""
    return Stream.from_iterable(NUMBER_WORDS).sum(len)


def longest_word_length() -> int:
    """Length of the longest number word."""
    return Stream.from_iterable(NUMBER_WORDS).max(len)


def first_names() -> list[str]:
    """First names in source order."""
    return Stream.from_iterable(PEOPLE).map(first_name).to_list()


def first_names_joined() -> str:
    """First names in source order as one comma-separated string."""
    return Stream.from_iterable(PEOPLE).map(first_name).join(",")


def first_names_sorted() -> list[str]:
    """First names in alphabetical order."""
    return Stream.from_iterable(PEOPLE).map(first_name).sorted().to_list()


def first_three_by_last_then_first() -> list[Person]:
    """First three people ordered by last name, then first name."""
    by_last_then_first = comparing(last_name).then_comparing(first_name)
    return Stream.from_iterable(PEOPLE).sorted(by_last_then_first).limit(3).to_list()


def unique_names_sorted() -> list[str]:
    """Every distinct first and last name in alphabetical order."""
    return (
        Stream.from_iterable(PEOPLE)
        .flat_map(lambda person: (person.first_name, person.last_name))
        .distinct()
        .sorted()
        .to_list()
    )


def first_to_last() -> dict[str, str]:
    """Map each first name to its last name."""
    return Stream.from_iterable(PEOPLE).to_dict(first_name, last_name)


def lower_first_to_upper_last() -> dict[str, str]:
    """Map lower-cased first names to upper-cased last names."""
    return (
        Stream.from_iterable(PEOPLE)
        .map(lambda person: Person(person.first_name.lower(), person.last_name.upper()))
        .to_dict(first_name, last_name)
    )


def first_to_last_by_reduce() -> dict[str, str]:
    """Build the first to last name mapping with a fold into a fresh dict."""
    return Stream.from_iterable(PEOPLE).reduce(
        {}, lambda names, person: {**names, person.first_name: person.last_name}
    )


def four_letter_words(config: DrillsConfig | None = None) -> list[str]:
    """Every four-character word of the verse, in reading order.

    Raises:
        DrillSourceError: If the verse file cannot be read.
    """
    runtime_config = config or DrillsConfig.from_env()
    lines = Stream.from_lines(runtime_config.verse_path)
    if runtime_config.echo_lines:
        lines = lines.peek(print)
    return lines.flat_map(split_words).filter(lambda word: len(word) == 4).to_list()


def sum_first_twelve() -> int:
    """Sum of 0..12 inclusive."""
    return Stream.range_closed(0, 12).sum()


def sum_first_twelve_exclusive() -> int:
    """Sum of 1..13 with the end excluded."""
    return Stream.range(1, 13).sum()


def sum_first_twelve_iterate() -> int:
    """Sum of the first twelve counting numbers from an infinite sequence."""
    return Stream.iterate(1, lambda number: number + 1).limit(12).sum()


def people_by_last_name() -> dict[str, list[Person]]:
    """Group people by last name, source order kept within each group."""
    return Stream.from_iterable(PEOPLE).group_by(last_name)


def last_names_by_last_name() -> dict[str, list[str]]:
    """Group by last name, keeping only the mapped last names."""
    return Stream.from_iterable(PEOPLE).group_by(last_name, mapping(last_name))
