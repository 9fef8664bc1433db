# SPDX-License-Identifier: MIT
"""On-disk compilation database formats."""

from __future__ import annotations

import logging
from pathlib import Path

from ccresolve.database.fixed import FLAGS_DATABASE_NAME, FixedCompilationDatabase
from ccresolve.database.json_database import (
    JSON_DATABASE_NAME,
    JsonCompilationDatabase,
)

logger = logging.getLogger(__name__)


def load_from_directory(
    directory: str,
) -> JsonCompilationDatabase | FixedCompilationDatabase | None:
    """Load the compilation database stored in a directory.

    compile_commands.json takes precedence over compile_flags.txt.

    Args:
        directory: Directory to look in.

    Returns:
        The loaded database, or None if the directory has neither file.

    Raises:
        DatabaseLoadError: If a database file exists but is malformed.
    """
    base = Path(directory)
    json_path = base / JSON_DATABASE_NAME
    if json_path.is_file():
        return JsonCompilationDatabase.load(json_path)

    flags_path = base / FLAGS_DATABASE_NAME
    if flags_path.is_file():
        return FixedCompilationDatabase.load(flags_path)

    logger.debug("No compilation database in %s", directory)
    return None


__all__ = [
    "FLAGS_DATABASE_NAME",
    "FixedCompilationDatabase",
    "JSON_DATABASE_NAME",
    "JsonCompilationDatabase",
    "load_from_directory",
]
