"""Shared typed models.

This module defines the immutable record type consumed by pipelines,
drills and pipeline specs.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, order=True)
class Person:
    """Name-pair record.

    Equality, hashing and ordering are structural over
    (first name, last name).

    Attributes:
        first_name: Given name.
        last_name: Family name.
    """

    first_name: str
    last_name: str
