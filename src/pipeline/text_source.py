"""Static text file readers for pipelines.

This module loads the lines of a local text file in one scoped read.
The file is opened, fully consumed and closed inside each call.
"""

from __future__ import annotations

from pathlib import Path
from typing import Iterable

from core.constants import TEXT_ENCODING
from core.errors import DrillSourceError
from core.logging_config import get_logger

_LOGGER = get_logger(__name__)


def read_lines(source_path: Path | str) -> list[str]:
    """Read every line of a text file.

    Args:
        source_path: Path to a local text file.

    Returns:
        Ordered lines without trailing newlines.

    Raises:
        DrillSourceError: If the file is missing or unreadable.
    """
    file_path = Path(source_path).expanduser()
    try:
        with file_path.open("r", encoding=TEXT_ENCODING) as source_file:
            lines = [line.rstrip("\r\n") for line in source_file]
    except OSError as error:
        _LOGGER.error("source_read_failed", source_path=str(file_path), reason=str(error))
        raise DrillSourceError(
            f"Failed to read text source at {file_path}: {error.strerror or error}. "
            "Provide an existing, readable text file."
        ) from error
    except UnicodeDecodeError as error:
        _LOGGER.error("source_read_failed", source_path=str(file_path), reason=str(error))
        raise DrillSourceError(
            f"Failed to decode text source at {file_path} as {TEXT_ENCODING}. "
            "Save the file as UTF-8 text."
        ) from error
    _LOGGER.debug("source_read", source_path=str(file_path), line_count=len(lines))
    return lines


def split_words(line: str) -> list[str]:
    """Split one line on runs of whitespace."""
    return line.split()


def read_words(source_path: Path | str) -> list[str]:
    """Read a text file and return its whitespace-separated words in order.

    Raises:
        DrillSourceError: If the file is missing or unreadable.
    """
    return _flatten(split_words(line) for line in read_lines(source_path))


def _flatten(rows: Iterable[list[str]]) -> list[str]:
    words: list[str] = []
    for row in rows:
        words.extend(row)
    return words
