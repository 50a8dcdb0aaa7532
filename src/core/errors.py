"""Stream drills exception hierarchy.

This module defines traceable domain errors with clear boundaries.
Each subsystem raises a specific error type for debuggability.
"""

from __future__ import annotations


class DrillError(Exception):
    """Base exception for all stream drill failures."""


class DrillConfigError(DrillError):
    """Raised for invalid runtime configuration."""


class DrillSourceError(DrillError):
    """Raised when a text source cannot be opened or read."""


class DrillCompositionError(DrillError):
    """Raised for malformed pipeline stage composition."""


class DrillDuplicateKeyError(DrillError):
    """Raised when a mapping collector sees the same key twice."""


class DrillEmptyStreamError(DrillError):
    """Raised when a terminal needs at least one item but got none."""


class DrillSpecError(DrillError):
    """Raised for invalid or unsupported pipeline-spec configuration."""


class DrillDependencyError(DrillError):
    """Raised when an optional runtime dependency is missing."""


class DrillNotFoundError(DrillError):
    """Raised when no drill is registered under a requested name."""
