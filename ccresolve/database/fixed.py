# SPDX-License-Identifier: MIT
"""compile_flags.txt reader.

A compile_flags.txt holds one compiler flag per line and applies the same
flags to every file below its directory.
"""

from __future__ import annotations

import logging
from pathlib import Path

from ccresolve.core.command import CompileCommand
from ccresolve.core.errors import DatabaseLoadError

logger = logging.getLogger(__name__)

FLAGS_DATABASE_NAME = "compile_flags.txt"

# Placeholder executable; consumers only look at the flags.
FIXED_EXECUTABLE = "clang-tool"


class FixedCompilationDatabase:
    """Same flags for every file.

    Attributes:
        directory: Working directory for every command.
        flags: The flags applied to every file.
    """

    def __init__(self, directory: str, flags: list[str]) -> None:
        self.directory = directory
        self.flags = list(flags)

    @classmethod
    def load(cls, path: Path | str) -> FixedCompilationDatabase:
        path = Path(path)
        try:
            text = path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            raise DatabaseLoadError(str(path), str(e)) from e
        flags = [line.strip() for line in text.splitlines() if line.strip()]
        logger.debug("Read %d flags from %s", len(flags), path)
        return cls(str(path.parent), flags)

    def get_compile_commands(self, file: str) -> list[CompileCommand]:
        return [
            CompileCommand(
                directory=self.directory,
                filename=file,
                arguments=[FIXED_EXECUTABLE, *self.flags, file],
                output="",
            )
        ]

    def all_files(self) -> list[str]:
        # Applies to any file, so there is nothing to enumerate
        return []

    def __repr__(self) -> str:
        return f"FixedCompilationDatabase({self.directory!r}, flags={self.flags!r})"
