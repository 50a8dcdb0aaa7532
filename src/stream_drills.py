"""Public SDK surface for stream drills.

This module provides a stable import path for pipeline users.
It re-exports the stream builder, collectors, comparators and drills.
"""

from __future__ import annotations

from core.config import DrillsConfig
from core.errors import (
    DrillCompositionError,
    DrillDuplicateKeyError,
    DrillEmptyStreamError,
    DrillError,
    DrillNotFoundError,
    DrillSourceError,
    DrillSpecError,
)
from core.types import Person
from drills.people import PEOPLE
from drills.registry import DRILLS, drill_names, run_drill
from drills.spec_runner import execute_pipeline_spec_file
from pipeline.collectors import counting, group_by, joining, mapping, summing, to_dict, to_list
from pipeline.comparators import Comparator, comparing, natural_order
from pipeline.stream import Stream
from pipeline.text_source import read_lines, read_words

__all__ = [
    "DRILLS",
    "Comparator",
    "DrillCompositionError",
    "DrillDuplicateKeyError",
    "DrillEmptyStreamError",
    "DrillError",
    "DrillNotFoundError",
    "DrillSourceError",
    "DrillSpecError",
    "DrillsConfig",
    "PEOPLE",
    "Person",
    "Stream",
    "comparing",
    "counting",
    "drill_names",
    "execute_pipeline_spec_file",
    "group_by",
    "joining",
    "mapping",
    "natural_order",
    "read_lines",
    "read_words",
    "run_drill",
    "summing",
    "to_dict",
    "to_list",
]
