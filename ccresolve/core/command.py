# SPDX-License-Identifier: MIT
"""Compile command and project info records.

A CompileCommand is one entry of a compilation database: the compiler
invocation used to build a single source file.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


@dataclass
class CompileCommand:
    """A compiler invocation for a single file.

    Attributes:
        directory: Working directory the command runs in.
        filename: The source file the command compiles.
        arguments: Full argument vector; arguments[0] is the executable.
        output: Declared output file, or "" when no artifact is expected.
    """

    directory: str
    filename: str
    arguments: list[str]
    output: str = ""

    def __post_init__(self) -> None:
        if not self.arguments:
            raise ValueError(f"compile command for {self.filename} has no arguments")
        self.arguments = list(self.arguments)

    @property
    def executable(self) -> str:
        return self.arguments[0]

    def with_arguments(self, arguments: list[str]) -> CompileCommand:
        """Return a copy of this command with a different argument vector."""
        return CompileCommand(self.directory, self.filename, arguments, self.output)

    def copy(self) -> CompileCommand:
        return self.with_arguments(self.arguments)

    def to_dict(self) -> dict[str, Any]:
        """Convert to a compile_commands.json style entry."""
        return {
            "directory": self.directory,
            "file": self.filename,
            "arguments": list(self.arguments),
            "output": self.output,
        }


@dataclass
class ProjectInfo:
    """Where a compile command came from.

    Attributes:
        source_root: Directory whose database answered the query, or ""
            when the command was an explicit override.
    """

    source_root: str = ""


@dataclass
class ResolvedCommand:
    """A compile command together with the project that produced it."""

    command: CompileCommand
    project: ProjectInfo = field(default_factory=ProjectInfo)
