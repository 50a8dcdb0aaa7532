"""Stream drills CLI entry points.
This module exposes commands for listing and running drills and specs.
It maps argparse commands onto drill and pipeline-spec calls.
"""

from __future__ import annotations

import argparse
from dataclasses import replace
from pathlib import Path
from typing import Any, Sequence

from cli.run_spec_command import add_run_spec_command, run_run_spec_command
from core.config import DrillsConfig, parse_log_level
from core.constants import SUPPORTED_LOG_LEVELS
from core.errors import DrillError
from core.logging_config import configure_logging
from drills.registry import drill_names, run_drill
from drills.spec_runner import render_result


def build_parser() -> argparse.ArgumentParser:
    """Build the top-level CLI parser.

    Returns:
        Configured argument parser.
    """
    parser = argparse.ArgumentParser(prog="drills", description="Stream pipeline drills")
    parser.add_argument("--verse-path", help="Override DRILLS_VERSE_PATH for this command")
    parser.add_argument(
        "--log-level",
        choices=SUPPORTED_LOG_LEVELS,
        help="Override DRILLS_LOG_LEVEL for this command",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)
    _add_list_command(subparsers)
    _add_run_command(subparsers)
    add_run_spec_command(subparsers)
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    """Run the drills CLI.

    Args:
        argv: Optional argument vector.

    Returns:
        Process exit code.
    """
    parser = build_parser()
    args = parser.parse_args(argv)
    try:
        config = _build_config(args.verse_path, args.log_level)
        configure_logging(config.log_level)
        if args.command == "list":
            return _run_list_command()
        if args.command == "run":
            return _run_drill_command(config, args)
        if args.command == "run-spec":
            return run_run_spec_command(config, args)
    except DrillError as error:
        print(f"error={error}")
        return 1
    parser.error(f"Unsupported command: {args.command}")
    return 2


def _build_config(verse_path: str | None, log_level: str | None) -> DrillsConfig:
    """Build config with optional CLI overrides.

    Args:
        verse_path: Optional verse file override.
        log_level: Optional log level override.

    Returns:
        Configured runtime config.
    """
    config = DrillsConfig.from_env()
    if verse_path:
        config = replace(config, verse_path=Path(verse_path).expanduser().resolve())
    if log_level:
        config = replace(config, log_level=parse_log_level(log_level))
    return config


def _run_list_command() -> int:
    """Handle list command.

    Returns:
        Exit code.
    """
    for name in drill_names():
        print(name)
    return 0


def _run_drill_command(config: DrillsConfig, args: argparse.Namespace) -> int:
    """Handle run command.

    Args:
        config: Runtime config.
        args: Parsed CLI args.

    Returns:
        Exit code.
    """
    result = run_drill(args.drill, config)
    if result is not None:
        print(render_result(result))
    return 0


def _add_list_command(subparsers: Any) -> None:
    """Register list subcommand."""
    subparsers.add_parser("list", help="List available drills")


def _add_run_command(subparsers: Any) -> None:
    """Register run subcommand."""
    parser = subparsers.add_parser("run", help="Run one drill and print its result")
    parser.add_argument("drill", choices=drill_names(), help="Drill name")
