# SPDX-License-Identifier: MIT
"""Overlay compilation database.

The outermost layer of the engine. Explicit per-file commands set at
runtime (for instance by an editor) take precedence over anything the
wrapped database knows, and every command leaving the engine gets the
same final adjustments.
"""

from __future__ import annotations

import logging
import os
import threading
from collections.abc import Sequence

from ccresolve.core.command import CompileCommand, ProjectInfo, ResolvedCommand
from ccresolve.core.database import BaseGlobalDatabase, GlobalCompilationDatabase
from ccresolve.core.fallback import get_standard_resource_dir

logger = logging.getLogger(__name__)

RESOURCE_DIR_FLAG = "-resource-dir"

# "-Xclang <opt> -Xclang <value>" sequences that make clang load plugins
_XCLANG_PLUGIN_OPTIONS = ("-load", "-plugin", "-add-plugin")
_PLUGIN_FLAG_PREFIXES = ("-fplugin=", "-fpass-plugin=")


def _is_xclang_plugin_option(arg: str) -> bool:
    return arg in _XCLANG_PLUGIN_OPTIONS or arg.startswith("-plugin-arg-")


def strip_plugin_arguments(arguments: list[str]) -> list[str]:
    """Remove arguments that would make the compiler load plugins."""
    result: list[str] = []
    i = 0
    while i < len(arguments):
        arg = arguments[i]
        if (
            arg == "-Xclang"
            and i + 3 < len(arguments)
            and _is_xclang_plugin_option(arguments[i + 1])
            and arguments[i + 2] == "-Xclang"
        ):
            i += 4
            continue
        if arg.startswith(_PLUGIN_FLAG_PREFIXES):
            i += 1
            continue
        result.append(arg)
        i += 1
    return result


def has_resource_dir(arguments: list[str]) -> bool:
    return any(
        arg == RESOURCE_DIR_FLAG or arg.startswith(RESOURCE_DIR_FLAG + "=")
        for arg in arguments[1:]
    )


def adjust_arguments(arguments: list[str], resource_dir: str) -> list[str]:
    """Final adjustments applied to every resolved command.

    Plugin arguments are stripped and, unless the command already names
    one, the resource directory is appended.
    """
    arguments = strip_plugin_arguments(arguments)
    if resource_dir and not has_resource_dir(arguments):
        arguments.append(f"{RESOURCE_DIR_FLAG}={resource_dir}")
    return arguments


class OverlayDatabase(BaseGlobalDatabase):
    """Explicit overrides on top of another database.

    Changes reported by the base are re-broadcast, so consumers only
    need to watch the overlay.

    Example:
        overlay = OverlayDatabase(base, fallback_flags=["-std=c++17"])
        overlay.set_compile_command("/src/a.cpp", CompileCommand(...))
        resolved = overlay.get_compile_command("/src/a.cpp")
        assert resolved.project.source_root == ""

    Attributes:
        base: The wrapped database, or None.
        resource_dir: Value for -resource-dir; "" disables injection.
        fallback_flags: Appended to every fallback command.
    """

    def __init__(
        self,
        base: GlobalCompilationDatabase | None,
        fallback_flags: Sequence[str] = (),
        resource_dir: str | None = None,
    ) -> None:
        super().__init__()
        self.base = base
        self.resource_dir = (
            resource_dir if resource_dir is not None else get_standard_resource_dir()
        )
        self.fallback_flags = list(fallback_flags)
        self._lock = threading.Lock()
        self._commands: dict[str, CompileCommand] = {}
        self._base_changed = (
            base.watch(self.on_command_changed.broadcast) if base is not None else None
        )

    def get_compile_command(self, file: str) -> ResolvedCommand | None:
        key = os.path.normpath(file)
        resolved: ResolvedCommand | None = None
        with self._lock:
            override = self._commands.get(key)
        if override is not None:
            resolved = ResolvedCommand(override.copy(), ProjectInfo(""))
        elif self.base is not None:
            resolved = self.base.get_compile_command(file)
        if resolved is None:
            return None

        arguments = adjust_arguments(resolved.command.arguments, self.resource_dir)
        return ResolvedCommand(resolved.command.with_arguments(arguments), resolved.project)

    def get_fallback_command(self, file: str) -> CompileCommand:
        if self.base is not None:
            command = self.base.get_fallback_command(file)
        else:
            command = super().get_fallback_command(file)
        with self._lock:
            flags = list(self.fallback_flags)
        return command.with_arguments([*command.arguments, *flags])

    def set_compile_command(self, file: str, command: CompileCommand | None) -> None:
        """Set or clear the override for a file.

        The file is broadcast as changed either way, even when clearing
        a file that had no override.
        """
        key = os.path.normpath(file)
        with self._lock:
            if command is not None:
                self._commands[key] = command.copy()
            else:
                self._commands.pop(key, None)
        logger.debug(
            "%s override for %s", "Set" if command is not None else "Cleared", key
        )
        self.on_command_changed.broadcast([file])

    def overridden_files(self) -> list[str]:
        with self._lock:
            return list(self._commands)

    def __repr__(self) -> str:
        return f"OverlayDatabase(base={self.base!r}, overrides={len(self._commands)})"
