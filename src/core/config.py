"""Runtime configuration model for stream drills.

This module owns all environment variable parsing and validation.
Other modules consume a typed config object instead of raw env reads.
"""

from __future__ import annotations

from dataclasses import dataclass
import os
from pathlib import Path

from core.constants import (
    DEFAULT_LOG_LEVEL,
    DEFAULT_VERSE_PATH,
    FALSE_FLAG_VALUES,
    SUPPORTED_LOG_LEVELS,
    TRUE_FLAG_VALUES,
)
from core.errors import DrillConfigError


@dataclass(frozen=True)
class DrillsConfig:
    """Validated runtime configuration.

    Attributes:
        verse_path: Text file read by the file-based drills.
        echo_lines: Print every verse line before it is split into words.
        log_level: Minimum structured log level.
    """

    verse_path: Path
    echo_lines: bool
    log_level: str

    @classmethod
    def from_env(cls) -> "DrillsConfig":
        """Build config from process environment variables.

        Returns:
            A validated config object.

        Raises:
            DrillConfigError: If environment values are invalid.
        """
        verse_path_value = os.getenv("DRILLS_VERSE_PATH", str(DEFAULT_VERSE_PATH))
        echo_lines = parse_flag(os.getenv("DRILLS_ECHO_LINES", "false"), "DRILLS_ECHO_LINES")
        log_level = parse_log_level(os.getenv("DRILLS_LOG_LEVEL", DEFAULT_LOG_LEVEL))
        return cls(
            verse_path=Path(verse_path_value).expanduser().resolve(),
            echo_lines=echo_lines,
            log_level=log_level,
        )


def parse_flag(raw_value: str, variable_name: str) -> bool:
    """Parse a boolean environment flag.

    Args:
        raw_value: Raw string from environment.
        variable_name: Variable name used in error messages.

    Returns:
        Parsed boolean.

    Raises:
        DrillConfigError: If value is not a recognized flag.
    """
    normalized_value = raw_value.strip().lower()
    if normalized_value in TRUE_FLAG_VALUES:
        return True
    if normalized_value in FALSE_FLAG_VALUES:
        return False
    raise DrillConfigError(
        f"Invalid {variable_name} value: expected one of "
        f"{', '.join(TRUE_FLAG_VALUES + FALSE_FLAG_VALUES)}, got '{raw_value}'."
    )


def parse_log_level(raw_value: str) -> str:
    """Parse and validate a log level name.

    Raises:
        DrillConfigError: If level is not supported.
    """
    normalized_value = raw_value.strip().lower()
    if normalized_value in SUPPORTED_LOG_LEVELS:
        return normalized_value
    raise DrillConfigError(
        "Invalid DRILLS_LOG_LEVEL value: "
        f"expected one of {', '.join(SUPPORTED_LOG_LEVELS)}, got '{raw_value}'."
    )
