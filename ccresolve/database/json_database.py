# SPDX-License-Identifier: MIT
"""compile_commands.json reader.

Reads a JSON compilation database in the format written by build
systems for clang tools, IDEs, and language servers:

    [
        {
            "directory": "/path/to/project",
            "file": "src/main.cpp",
            "command": "clang++ -c -o build/main.o src/main.cpp",
            "output": "build/main.o"
        },
        ...
    ]

Each entry carries either "command" (a shell string) or "arguments"
(an argument list).
"""

from __future__ import annotations

import json
import logging
import os
import shlex
from pathlib import Path
from typing import Any

from ccresolve.core.command import CompileCommand
from ccresolve.core.errors import DatabaseLoadError

logger = logging.getLogger(__name__)

JSON_DATABASE_NAME = "compile_commands.json"


def _absolute(path: str, directory: str) -> str:
    if not os.path.isabs(path):
        path = os.path.join(directory, path)
    return os.path.normpath(path)


class JsonCompilationDatabase:
    """A parsed compile_commands.json.

    Attributes:
        path: The file the database was read from.
    """

    def __init__(self, path: Path, commands: list[CompileCommand]) -> None:
        self.path = path
        self._by_file: dict[str, list[CompileCommand]] = {}
        for command in commands:
            key = _absolute(command.filename, command.directory)
            self._by_file.setdefault(key, []).append(command)

    @classmethod
    def load(cls, path: Path | str) -> JsonCompilationDatabase:
        """Read and validate a compile_commands.json file.

        Raises:
            DatabaseLoadError: If the file is unreadable or malformed.
        """
        path = Path(path)
        try:
            with open(path, encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, UnicodeDecodeError, json.JSONDecodeError) as e:
            raise DatabaseLoadError(str(path), str(e)) from e

        if not isinstance(data, list):
            raise DatabaseLoadError(str(path), "top level must be an array")

        commands = [
            cls._parse_entry(path, index, entry) for index, entry in enumerate(data)
        ]
        logger.debug("Read %d entries from %s", len(commands), path)
        return cls(path, commands)

    @staticmethod
    def _parse_entry(path: Path, index: int, entry: Any) -> CompileCommand:
        if not isinstance(entry, dict):
            raise DatabaseLoadError(str(path), f"entry {index} is not an object")

        directory = entry.get("directory")
        file = entry.get("file")
        if not isinstance(directory, str) or not isinstance(file, str):
            raise DatabaseLoadError(
                str(path), f"entry {index} needs 'directory' and 'file' strings"
            )

        arguments = entry.get("arguments")
        if arguments is None and isinstance(entry.get("command"), str):
            try:
                arguments = shlex.split(entry["command"])
            except ValueError as e:
                raise DatabaseLoadError(
                    str(path), f"entry {index} has a bad command: {e}"
                ) from e
        if (
            not isinstance(arguments, list)
            or not arguments
            or not all(isinstance(arg, str) for arg in arguments)
        ):
            raise DatabaseLoadError(
                str(path), f"entry {index} needs 'arguments' or 'command'"
            )

        return CompileCommand(
            directory=directory,
            filename=file,
            arguments=arguments,
            output=str(entry.get("output", "")),
        )

    def get_compile_commands(self, file: str) -> list[CompileCommand]:
        return list(self._by_file.get(os.path.normpath(file), []))

    def all_files(self) -> list[str]:
        return list(self._by_file)

    def __len__(self) -> int:
        return sum(len(commands) for commands in self._by_file.values())

    def __repr__(self) -> str:
        return f"JsonCompilationDatabase({str(self.path)!r}, files={len(self._by_file)})"
