#!/usr/bin/env python3
"""Command line argument parsing and run configuration building."""

from __future__ import annotations

import argparse
import sys
from typing import List, Optional, Sequence

from config import DEFAULT_CONFIG_PATH, RunConfig
from logging_utils import Logger
from utils import expand_path, parse_entity_list

__version__ = "0.3.0"

# Exit codes
EXIT_MISSING_ARGUMENTS = 2


def _create_argument_parser() -> argparse.ArgumentParser:
    """Create and configure the argument parser."""
    parser = argparse.ArgumentParser(
        prog="ghmir",
        description="Back up GitHub users/orgs with ghorg and mirror them to GitLab",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s --path /srv/mirrors --entities acme
  %(prog)s --path '$HOME/mirrors' --entities acme,jdoe --push
  %(prog)s --config ./ghmir.yaml --path /srv/mirrors --entities acme \\
           --push --workers 4 --timeout 900
        """,
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )
    return parser


def _add_run_arguments(parser: argparse.ArgumentParser) -> None:
    """Add the arguments that select what is cloned and mirrored."""
    parser.add_argument(
        "--config",
        dest="config",
        default=DEFAULT_CONFIG_PATH,
        help="File containing configurations and secrets "
        "(default: %(default)s, environment variables are expanded)",
    )
    parser.add_argument(
        "--path",
        dest="path",
        required=True,
        help="Backup directory path, created if missing "
        "(environment variables are expanded)",
    )
    parser.add_argument(
        "--entities",
        dest="entities",
        required=True,
        help="Comma-separated list of GitHub users/orgs to mirror",
    )
    parser.add_argument(
        "--push",
        action="store_true",
        dest="push",
        help="Push to GitLab after cloning (otherwise only clone)",
    )


def _add_behavior_arguments(parser: argparse.ArgumentParser) -> None:
    """Add tuning and output arguments to parser."""
    parser.add_argument(
        "--workers",
        dest="workers",
        type=int,
        default=1,
        help="Repositories of one entity mirrored in parallel (default: 1)",
    )
    parser.add_argument(
        "--timeout",
        dest="timeout_s",
        type=float,
        default=None,
        help="Seconds before a git command or notification is abandoned "
        "(default: no timeout for git)",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        dest="verbose",
        help="Show debug output",
    )


def _validate_parsed_arguments(args) -> List[str]:
    """Validate numeric options and split the entity list."""
    try:
        entities = parse_entity_list(args.entities)

        if args.workers < 1 or args.workers > 64:
            raise ValueError("workers must be between 1 and 64")

        if args.timeout_s is not None and args.timeout_s <= 0:
            raise ValueError("timeout must be a positive number of seconds")

        if not args.path.strip():
            raise ValueError("--path must not be empty")

        return entities
    except ValueError as e:
        Logger.error(f"argument error: {e}")
        sys.exit(EXIT_MISSING_ARGUMENTS)


def parse_arguments(argv: Optional[Sequence[str]] = None) -> RunConfig:
    """Parse command line arguments and return the run configuration."""
    parser = _create_argument_parser()
    _add_run_arguments(parser)
    _add_behavior_arguments(parser)

    args = parser.parse_args(argv)
    Logger.set_verbose(args.verbose)

    entities = _validate_parsed_arguments(args)

    return RunConfig(
        config_path=expand_path(args.config),
        backup_root=expand_path(args.path),
        entities=tuple(entities),
        push=args.push,
        workers=args.workers,
        timeout_s=args.timeout_s,
    )
