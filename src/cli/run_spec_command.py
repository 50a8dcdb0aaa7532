"""Pipeline-spec CLI command wiring.

This module registers the run-spec subcommand and delegates execution to the
shared pipeline-spec engine used by CLI and SDK entry points.
"""

from __future__ import annotations

import argparse
from typing import Any

from core.config import DrillsConfig
from drills.spec_runner import execute_pipeline_spec_file, render_result


def add_run_spec_command(subparsers: Any) -> None:
    """Register run-spec subcommand."""
    parser = subparsers.add_parser(
        "run-spec",
        help="Run a declarative YAML pipeline spec",
    )
    parser.add_argument("spec_file", help="Path to YAML pipeline spec file")


def run_run_spec_command(config: DrillsConfig, args: argparse.Namespace) -> int:
    """Handle run-spec command invocation."""
    result = execute_pipeline_spec_file(args.spec_file, config)
    print(render_result(result))
    return 0
