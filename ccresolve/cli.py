# SPDX-License-Identifier: MIT
"""Command-line interface for ccresolve."""

from __future__ import annotations

import argparse
import json
import logging
import os
import sys
from pathlib import Path

from ccresolve.configure.config import ResolverConfig, build_database
from ccresolve.core.directory import DirectoryBasedDatabase
from ccresolve.core.errors import ConfigError, DatabaseNotFoundError

# Set up logging
logger = logging.getLogger("ccresolve")

DEFAULT_CONFIG_NAME = ".ccresolve.json"


def setup_logging(verbose: bool = False, debug: bool = False) -> None:
    """Configure logging based on verbosity level."""
    if debug:
        level = logging.DEBUG
        fmt = "%(levelname)s: %(name)s: %(message)s"
    elif verbose:
        level = logging.INFO
        fmt = "%(levelname)s: %(message)s"
    else:
        level = logging.WARNING
        fmt = "%(levelname)s: %(message)s"

    logging.basicConfig(level=level, format=fmt)


def load_config(args: argparse.Namespace) -> ResolverConfig:
    """Build the configuration from file, environment, and arguments.

    Precedence (highest to lowest):
        1. Command line options
        2. CCRESOLVE_* environment variables and QNX_TARGET
        3. The config file (--config, or .ccresolve.json in the current dir)
    """
    config_path = Path(args.config) if args.config else Path(DEFAULT_CONFIG_NAME)
    config = ResolverConfig.load(config_path).apply_env()

    if args.compile_commands_dir:
        config.compile_commands_dir = args.compile_commands_dir
    if args.resource_dir is not None:
        config.resource_dir = args.resource_dir
    if args.fallback_flag:
        config.fallback_flags = list(args.fallback_flag)
    return config


def print_command(payload: dict[str, object]) -> None:
    json.dump(payload, sys.stdout, indent=2)
    sys.stdout.write("\n")


def cmd_query(args: argparse.Namespace) -> int:
    """Resolve the compile command for a file.

    Falls back to a synthesized command when no database knows the file.
    """
    file = os.path.abspath(args.file)
    database = build_database(load_config(args))

    resolved = database.get_compile_command(file)
    if resolved is None:
        logger.info("No compile command for %s, using fallback", file)
        payload = database.get_fallback_command(file).to_dict()
        payload["source_root"] = ""
        payload["fallback"] = True
    else:
        payload = resolved.command.to_dict()
        payload["source_root"] = resolved.project.source_root
        payload["fallback"] = False

    print_command(payload)
    return 0


def cmd_fallback(args: argparse.Namespace) -> int:
    """Print the fallback command for a file."""
    file = os.path.abspath(args.file)
    database = build_database(load_config(args))
    payload = database.get_fallback_command(file).to_dict()
    payload["source_root"] = ""
    payload["fallback"] = True
    print_command(payload)
    return 0


def cmd_files(args: argparse.Namespace) -> int:
    """List the files known to the compilation database in a directory."""
    directory = os.path.abspath(args.directory)
    files: list[str] = []
    cdb = DirectoryBasedDatabase(directory)
    cdb.watch(files.extend)

    # Any path resolves against the fixed directory; this triggers the load
    found = cdb.get_database_for_file(os.path.join(directory, "_"))
    if found is None:
        raise DatabaseNotFoundError(directory)

    for path in sorted(files):
        print(path)
    return 0


def add_common_args(parser: argparse.ArgumentParser) -> None:
    """Add common arguments to a parser."""
    parser.add_argument("-v", "--verbose", action="store_true", help="Verbose output")
    parser.add_argument("--debug", action="store_true", help="Debug output")


def add_resolver_args(parser: argparse.ArgumentParser) -> None:
    """Add arguments that configure the resolution engine."""
    parser.add_argument(
        "-c",
        "--config",
        metavar="FILE",
        help=f"Config file (default: {DEFAULT_CONFIG_NAME} if present)",
    )
    parser.add_argument(
        "--compile-commands-dir",
        metavar="DIR",
        help="Resolve every file against the database in DIR",
    )
    parser.add_argument(
        "--resource-dir",
        metavar="DIR",
        help="Clang resource directory to inject ('' disables)",
    )
    parser.add_argument(
        "--fallback-flag",
        metavar="FLAG",
        action="append",
        help="Extra flag for fallback commands, written --fallback-flag=FLAG (repeatable)",
    )


def main(argv: list[str] | None = None) -> int:
    """Main entry point for the ccresolve CLI."""
    parser = argparse.ArgumentParser(
        prog="ccresolve",
        description="Resolve the compile command used to analyze a source file.",
        epilog="Run 'ccresolve <command> --help' for command-specific help.",
    )
    from ccresolve import __version__

    parser.add_argument(
        "--version", action="version", version=f"%(prog)s {__version__}"
    )

    subparsers = parser.add_subparsers(dest="command", help="Commands")

    # ccresolve query
    query_parser = subparsers.add_parser(
        "query", help="Print the compile command for a file"
    )
    add_common_args(query_parser)
    add_resolver_args(query_parser)
    query_parser.add_argument("file", help="Source file")
    query_parser.set_defaults(func=cmd_query)

    # ccresolve fallback
    fallback_parser = subparsers.add_parser(
        "fallback", help="Print the fallback command for a file"
    )
    add_common_args(fallback_parser)
    add_resolver_args(fallback_parser)
    fallback_parser.add_argument("file", help="Source file")
    fallback_parser.set_defaults(func=cmd_fallback)

    # ccresolve files
    files_parser = subparsers.add_parser(
        "files", help="List files known to the database in a directory"
    )
    add_common_args(files_parser)
    files_parser.add_argument("directory", help="Directory holding the database")
    files_parser.set_defaults(func=cmd_files)

    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return 1

    setup_logging(args.verbose, args.debug)

    try:
        result: int = args.func(args)
    except (ConfigError, DatabaseNotFoundError) as e:
        logger.error("%s", e)
        return 1
    return result


if __name__ == "__main__":
    sys.exit(main())
