"""Fixed sample dataset used by the drills."""

from __future__ import annotations

from core.types import Person

PEOPLE: tuple[Person, ...] = (
    Person("Bernard", "Sawrey"),
    Person("Duncan", "Sawrey"),
    Person("Anastasia", "Sawrey"),
    Person("Charlotte", "Sawrey"),
    Person("Daphne", "Sawrey"),
    Person("Gerald", "Hawkshead"),
    Person("Eustace", "Hawkshead"),
    Person("Felicity", "Coniston"),
)

SENTENCE: tuple[str, ...] = ("I", "can", "print", "a", "stream", ".")
FOUR_WORDS: tuple[str, ...] = ("There", "are", "four", "words")
NUMBER_WORDS: tuple[str, ...] = ("one", "two", "three", "four", "five")
