"""Unit tests for the pipeline drills."""

from __future__ import annotations

from dataclasses import replace
from pathlib import Path

import pytest

from core.config import DrillsConfig
from core.errors import DrillSourceError
from core.types import Person
from drills import exercises
from drills.people import PEOPLE
from tests.fixture_paths import fixture_path


def test_print_sentence_prints_one_word_per_line(capsys: pytest.CaptureFixture[str]) -> None:
    """The sentence should be printed word by word."""
    exercises.print_sentence()

    assert capsys.readouterr().out.splitlines() == ["I", "can", "print", "a", "stream", "."]


def test_word_counts_and_lengths() -> None:
    """Counting and summing drills should match the fixed phrases."""
    assert exercises.count_words() == 4
    assert exercises.sum_word_lengths() == 19
    assert exercises.longest_word_length() == 5


def test_first_names_keep_source_order() -> None:
    """First names should come out in source order."""
    assert exercises.first_names() == [
        "Bernard",
        "Duncan",
        "Anastasia",
        "Charlotte",
        "Daphne",
        "Gerald",
        "Eustace",
        "Felicity",
    ]


def test_first_names_joined_without_sorting() -> None:
    """Joined first names should keep input order and have no trailing comma."""
    assert (
        exercises.first_names_joined()
        == "Bernard,Duncan,Anastasia,Charlotte,Daphne,Gerald,Eustace,Felicity"
    )


def test_first_names_sorted_alphabetically() -> None:
    """Sorted first names should be in alphabetical order."""
    assert exercises.first_names_sorted() == [
        "Anastasia",
        "Bernard",
        "Charlotte",
        "Daphne",
        "Duncan",
        "Eustace",
        "Felicity",
        "Gerald",
    ]


def test_first_three_by_last_then_first() -> None:
    """Sorting by last then first name should pick Coniston then Hawkshead."""
    assert exercises.first_three_by_last_then_first() == [
        Person("Felicity", "Coniston"),
        Person("Eustace", "Hawkshead"),
        Person("Gerald", "Hawkshead"),
    ]


def test_unique_names_sorted_drops_repeated_last_names() -> None:
    """Eleven distinct names should remain despite Sawrey appearing five times."""
    names = exercises.unique_names_sorted()

    assert names == [
        "Anastasia",
        "Bernard",
        "Charlotte",
        "Coniston",
        "Daphne",
        "Duncan",
        "Eustace",
        "Felicity",
        "Gerald",
        "Hawkshead",
        "Sawrey",
    ]
    assert sum(1 for person in PEOPLE if person.last_name == "Sawrey") == 5


def test_first_to_last_maps_every_person() -> None:
    """Each first name should map to its last name."""
    expected = {person.first_name: person.last_name for person in PEOPLE}

    assert exercises.first_to_last() == expected
    assert exercises.first_to_last_by_reduce() == expected
    assert len(expected) == 8


def test_lower_first_to_upper_last() -> None:
    """Keys should be lower case and values upper case."""
    mapping = exercises.lower_first_to_upper_last()

    assert mapping["bernard"] == "SAWREY"
    assert mapping["felicity"] == "CONISTON"
    assert len(mapping) == 8


def test_four_letter_words_from_packaged_verse() -> None:
    """The packaged verse should yield its five four-character words in order."""
    config = DrillsConfig.from_env()

    assert exercises.four_letter_words(config) == ["unam", "ago.", "tibi", "tuum", "fili"]


def test_four_letter_words_echoes_lines(capsys: pytest.CaptureFixture[str]) -> None:
    """Echo mode should print each verse line before splitting it."""
    config = replace(
        DrillsConfig.from_env(),
        verse_path=Path(fixture_path("verse/limerick.txt")),
        echo_lines=True,
    )

    words = exercises.four_letter_words(config)

    assert words == ["once", "fish", "from", "Kent", "swam", "pond", "near", "Tent"]
    assert capsys.readouterr().out.splitlines()[0] == "There once was a fish from Kent"


def test_four_letter_words_raises_for_missing_verse(tmp_path: Path) -> None:
    """A missing verse file should surface as a source error."""
    config = replace(DrillsConfig.from_env(), verse_path=tmp_path / "missing.txt")

    with pytest.raises(DrillSourceError):
        exercises.four_letter_words(config)


def test_sum_first_twelve_all_variants() -> None:
    """Inclusive, exclusive and iterate ranges should each sum to 78."""
    assert exercises.sum_first_twelve() == 78
    assert exercises.sum_first_twelve_exclusive() == 78
    assert exercises.sum_first_twelve_iterate() == 78


def test_people_by_last_name_groups_in_source_order() -> None:
    """Grouping should yield three families with members in source order."""
    groups = exercises.people_by_last_name()

    assert set(groups) == {"Coniston", "Hawkshead", "Sawrey"}
    assert {name: len(members) for name, members in groups.items()} == {
        "Coniston": 1,
        "Hawkshead": 2,
        "Sawrey": 5,
    }
    assert groups["Hawkshead"] == [Person("Gerald", "Hawkshead"), Person("Eustace", "Hawkshead")]
    assert groups["Sawrey"] == [person for person in PEOPLE if person.last_name == "Sawrey"]


def test_last_names_by_last_name_maps_members() -> None:
    """Downstream mapping should keep one last name per member."""
    groups = exercises.last_names_by_last_name()

    assert groups["Sawrey"] == ["Sawrey"] * 5
    assert groups["Coniston"] == ["Coniston"]
