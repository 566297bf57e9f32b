#!/usr/bin/env python3
"""illinkrepro CLI - Command line interface for illinkrepro."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

from illinkrepro import __version__
from illinkrepro.config.exceptions import ConfigValidationError
from illinkrepro.config.models import get_config
from illinkrepro.utils.error_handling import (
    FileOperationError,
    IllinkReproError,
    MalformedInvocationError,
    UsageError,
)
from illinkrepro.utils.logging import configure_logging, get_logger, level_from_verbosity


def _add_common_args(parser) -> None:
    """Add common arguments (verbose, quiet)."""
    parser.add_argument(
        "-v",
        "--verbose",
        action="count",
        default=0,
        help="Increase verbosity (-v, -vv)",
    )
    parser.add_argument("-q", "--quiet", action="store_true", help="Show errors only")


def _add_log_args(parser) -> None:
    """Add the build log argument and task name override."""
    parser.add_argument("log", type=Path, help="Structured build log (XML export)")
    parser.add_argument(
        "--task-name",
        help="Name of the linker task in the log (default: ILLink)",
    )


def _setup_create_parser(subparsers) -> argparse.ArgumentParser:
    """Setup create subcommand parser."""
    create_parser = subparsers.add_parser(
        "create",
        help="Create a repro from an ILLink invocation",
        description=(
            "Copy every input of a recorded ILLink invocation into a local directory "
            "and write a response file that only uses relative paths"
        ),
    )
    _add_log_args(create_parser)
    create_parser.add_argument(
        "-o",
        "--out",
        type=Path,
        help="Output directory (default: ./repro)",
    )
    create_parser.add_argument(
        "-f",
        "--force",
        action="store_true",
        help="Overwrite the output directory if it exists",
    )
    create_parser.add_argument("--project", help="Only consider tasks of this project")
    create_parser.add_argument("--target", help="Only consider tasks of this target")
    _add_common_args(create_parser)
    return create_parser


def _setup_list_parser(subparsers) -> argparse.ArgumentParser:
    """Setup list subcommand parser."""
    list_parser = subparsers.add_parser(
        "list",
        help="List the ILLink invocations of a build log",
        description="List ILLink invocations with their project, target and status",
    )
    _add_log_args(list_parser)
    _add_common_args(list_parser)
    return list_parser


def create_parser() -> argparse.ArgumentParser:
    """Create and configure the argument parser."""
    parser = argparse.ArgumentParser(
        prog="illinkrepro",
        description="CLI for illinkrepro - turns a recorded ILLink run into a portable repro",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
illinkrepro finds the ILLink (trimming) task in a structured build log, copies
every assembly, descriptor and search directory it used into a repro directory,
and writes linker.rsp with the rewritten arguments.

Commands:
  create  Create a repro directory
  list    List ILLink invocations found in the log
        """.strip(),
    )

    parser.add_argument(
        "--version", action="version", version=f"%(prog)s {__version__}"
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")
    _setup_create_parser(subparsers)
    _setup_list_parser(subparsers)

    return parser


def _dispatch_create_command(args) -> int:
    """Dispatch create command."""
    from illinkrepro.create import CreateConfig, cmd_create

    config = CreateConfig(
        log_path=args.log,
        out=args.out,
        force=args.force,
        project=args.project,
        target=args.target,
        task_name=args.task_name,
    )
    return cmd_create(config)


def _dispatch_list_command(args) -> int:
    """Dispatch list command."""
    from illinkrepro.create import cmd_list

    return cmd_list(args.log, task_name=args.task_name)


def _dispatch_help_command(parser) -> int:
    """Dispatch help command."""
    parser.print_help()
    return 0


def _dispatch_command(args, parser) -> int:
    """Dispatch command based on parsed arguments."""
    if args.command == "create":
        return _dispatch_create_command(args)
    elif args.command == "list":
        return _dispatch_list_command(args)

    return _dispatch_help_command(parser)


def _exit_code_for(error: Exception) -> int:
    exit_codes = get_config().exit_codes
    if isinstance(error, (UsageError, ConfigValidationError)):
        return exit_codes.invalid_args
    if isinstance(error, MalformedInvocationError):
        return exit_codes.malformed
    return exit_codes.error


def main(argv: list[str] | None = None) -> int:
    parser = create_parser()
    try:
        args = parser.parse_args(argv)
    except SystemExit as e:
        code = e.code
        return code if isinstance(code, int) else (0 if code is None else 2)

    configure_logging(
        level=level_from_verbosity(getattr(args, "verbose", 0), getattr(args, "quiet", False))
    )
    log = get_logger(__name__)

    try:
        return _dispatch_command(args, parser)
    except (IllinkReproError, ConfigValidationError) as e:
        print(f"Error: {e}", file=sys.stderr)
        if isinstance(e, FileOperationError):
            print(
                "The output directory may be partially populated; rerun with --force.",
                file=sys.stderr,
            )
        return _exit_code_for(e)
    except OSError as e:
        log.error(f"Error: {e}")
        return get_config().exit_codes.error


if __name__ == "__main__":
    raise SystemExit(main())
