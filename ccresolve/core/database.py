# SPDX-License-Identifier: MIT
"""Compilation database protocols.

Two levels of database are involved in resolving a command:

- A CompilationDatabase is one loaded database file (for instance a
  compile_commands.json) answering for the files it lists.
- A GlobalCompilationDatabase answers for any file. Implementations are
  layered: each layer holds a reference to the layer it wraps and adds
  one concern (directory discovery, target inference, overrides).
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Callable
from typing import Protocol, runtime_checkable

from ccresolve.core.command import CompileCommand, ResolvedCommand
from ccresolve.core.events import CommandChanged, Listener, Subscription
from ccresolve.core.fallback import get_fallback_command


@runtime_checkable
class CompilationDatabase(Protocol):
    """A loaded compilation database."""

    def get_compile_commands(self, file: str) -> list[CompileCommand]:
        """All commands recorded for a file, possibly none."""
        ...

    def all_files(self) -> list[str]:
        """Absolute paths of every file this database knows about."""
        ...


# Returns None when the directory has no database; raises
# DatabaseLoadError when it has one that cannot be read.
DatabaseLoader = Callable[[str], "CompilationDatabase | None"]


@runtime_checkable
class GlobalCompilationDatabase(Protocol):
    """Resolves compile commands for arbitrary files."""

    def get_compile_command(self, file: str) -> ResolvedCommand | None:
        """Resolve the command for a file, or None if nothing answers."""
        ...

    def get_fallback_command(self, file: str) -> CompileCommand:
        """Best-effort command used when get_compile_command gives None."""
        ...

    def watch(self, listener: Listener) -> Subscription:
        """Subscribe to changes of compile commands."""
        ...


class BaseGlobalDatabase(ABC):
    """Common plumbing for GlobalCompilationDatabase implementations.

    Provides the change event and the default fallback command.
    """

    def __init__(self) -> None:
        self.on_command_changed = CommandChanged()

    @abstractmethod
    def get_compile_command(self, file: str) -> ResolvedCommand | None: ...

    def get_fallback_command(self, file: str) -> CompileCommand:
        return get_fallback_command(file)

    def watch(self, listener: Listener) -> Subscription:
        return self.on_command_changed.subscribe(listener)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}()"
