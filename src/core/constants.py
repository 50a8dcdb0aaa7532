"""Core constants used across drill modules.

This module centralizes non-domain-specific constants.
Keeping values here avoids magic literals in business logic.
"""

from __future__ import annotations

from pathlib import Path

RESOURCES_DIR = Path(__file__).resolve().parent.parent / "drills" / "resources"
DEFAULT_VERSE_PATH = RESOURCES_DIR / "receipt.txt"
TEXT_ENCODING = "utf-8"
DEFAULT_LOG_LEVEL = "warning"
SUPPORTED_LOG_LEVELS = ("debug", "info", "warning", "error")
TRUE_FLAG_VALUES = ("1", "true", "yes", "on")
FALSE_FLAG_VALUES = ("0", "false", "no", "off")
DEFAULT_JOIN_SEPARATOR = ","
PIPELINE_SPEC_VERSION = 1
