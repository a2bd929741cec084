"""Tagroot CLI entry points.

This module exposes dataset discovery and tag lookup commands.
It maps argparse commands onto finder and config store calls.
"""

from __future__ import annotations

import argparse
import json
from dataclasses import replace
from typing import Any, Sequence

from core.config import TagrootConfig, parse_log_level
from core.constants import SUPPORTED_LOG_LEVELS
from core.errors import TagrootError
from core.location import Location
from core.logging_config import configure_logging
from finder.datasets_finder import ConfigBasedDatasetsFinder
from finder.job_settings import load_job_properties
from store.config_client import ConfigClient


def build_parser() -> argparse.ArgumentParser:
    """Build the top-level CLI parser.

    Returns:
        Configured argument parser.
    """
    parser = argparse.ArgumentParser(prog="tagroot", description="Tagroot dataset discovery CLI")
    parser.add_argument(
        "--log-level",
        choices=SUPPORTED_LOG_LEVELS,
        help="Override TAGROOT_LOG_LEVEL for this command",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)
    _add_find_command(subparsers)
    _add_imported_by_command(subparsers)
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    """Run the Tagroot CLI.

    Args:
        argv: Optional argument vector.

    Returns:
        Process exit code.
    """
    parser = build_parser()
    args = parser.parse_args(argv)
    try:
        config = _build_config(args.log_level)
        configure_logging(config.log_level)
        if args.command == "find":
            return _run_find_command(config, args)
        if args.command == "imported-by":
            return _run_imported_by_command(config, args)
    except TagrootError as error:
        print(f"error={error}")
        return 1
    parser.error(f"Unsupported command: {args.command}")
    return 2


def _build_config(log_level: str | None) -> TagrootConfig:
    """Build runtime config with optional log-level override.

    Args:
        log_level: Optional override level name.

    Returns:
        Runtime configuration.
    """
    config = TagrootConfig.from_env()
    if log_level:
        config = replace(config, log_level=parse_log_level(log_level))
    return config


def _run_find_command(config: TagrootConfig, args: argparse.Namespace) -> int:
    """Handle find command.

    Args:
        config: Runtime configuration.
        args: Parsed CLI args.

    Returns:
        Exit code.
    """
    properties = load_job_properties(args.job)
    finder = ConfigBasedDatasetsFinder.from_properties(properties, config=config)
    if args.datasets:
        for dataset in finder.find_datasets():
            rendered_config = json.dumps(dataset.dataset_config, sort_keys=True, default=str)
            print(f"{dataset.location}\t{rendered_config}")
        return 0
    for location in sorted(finder.find_valid_dataset_locations()):
        print(location)
    return 0


def _run_imported_by_command(config: TagrootConfig, args: argparse.Namespace) -> int:
    """Handle imported-by command.

    Args:
        config: Runtime configuration.
        args: Parsed CLI args.

    Returns:
        Exit code.
    """
    client = ConfigClient(
        Location.parse(args.store_uri),
        version=args.store_version,
        config=config,
    )
    for location in client.get_imported_by(Location.parse(args.tag), not args.direct):
        print(location)
    return 0


def _add_find_command(subparsers: Any) -> None:
    """Register find subcommand."""
    parser = subparsers.add_parser("find", help="Print leaf dataset locations for a job")
    parser.add_argument("--job", required=True, help="YAML job properties file")
    parser.add_argument(
        "--datasets",
        action="store_true",
        help="Print each dataset with its resolved store config",
    )


def _add_imported_by_command(subparsers: Any) -> None:
    """Register imported-by subcommand."""
    parser = subparsers.add_parser("imported-by", help="List store nodes importing a tag")
    parser.add_argument("tag", help="Tag location, e.g. file:///stores/main/tags/replicate")
    parser.add_argument("--store-uri", required=True, help="Config store root location")
    parser.add_argument("--store-version", help="Pinned store version; latest if omitted")
    parser.add_argument(
        "--direct",
        action="store_true",
        help="Only list nodes importing the tag explicitly",
    )
