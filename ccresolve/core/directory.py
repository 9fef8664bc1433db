# SPDX-License-Identifier: MIT
"""Directory-based compilation database discovery.

For a source file, walk up its ancestor directories and use the first
compilation database found. Each directory is probed at most once per
process: both hits and misses are cached and never invalidated.
"""

from __future__ import annotations

import logging
import os
import threading

from ccresolve.core.command import ProjectInfo, ResolvedCommand
from ccresolve.core.database import (
    BaseGlobalDatabase,
    CompilationDatabase,
    DatabaseLoader,
)
from ccresolve.core.errors import DatabaseLoadError
from ccresolve.database import load_from_directory

logger = logging.getLogger(__name__)


def normalize_path(path: str) -> str:
    return os.path.normpath(os.path.abspath(path))


def ancestor_directories(file: str) -> list[str]:
    """Directories containing file, nearest first, ending at the root."""
    result: list[str] = []
    current = os.path.dirname(file)
    while current:
        result.append(current)
        parent = os.path.dirname(current)
        if parent == current:
            break
        current = parent
    return result


class DirectoryBasedDatabase(BaseGlobalDatabase):
    """Finds compilation databases in the ancestors of a file.

    If compile_commands_dir is given, every file is resolved against the
    database in that directory instead.

    Loading happens outside the lock. Concurrent callers asking for the
    same unseen directory wait for the first caller's load, so the loader
    runs at most once per directory.

    Example:
        cdb = DirectoryBasedDatabase()
        resolved = cdb.get_compile_command("/work/proj/src/main.cpp")
        if resolved is None:
            cmd = cdb.get_fallback_command("/work/proj/src/main.cpp")
    """

    def __init__(
        self,
        compile_commands_dir: str | None = None,
        *,
        loader: DatabaseLoader | None = None,
    ) -> None:
        super().__init__()
        self.compile_commands_dir = (
            normalize_path(compile_commands_dir) if compile_commands_dir else None
        )
        self._loader: DatabaseLoader = loader or load_from_directory
        self._lock = threading.Lock()
        self._databases: dict[str, CompilationDatabase | None] = {}
        self._loading: dict[str, threading.Event] = {}

    def get_compile_command(self, file: str) -> ResolvedCommand | None:
        if not os.path.isabs(file):
            raise ValueError(f"path must be absolute: {file}")
        file = os.path.normpath(file)

        found = self.get_database_for_file(file)
        if found is None:
            logger.info("Failed to find compilation database for %s", file)
            return None

        database, source_root = found
        candidates = database.get_compile_commands(file)
        if not candidates:
            logger.debug("%s has no entry for %s", source_root, file)
            return None
        return ResolvedCommand(candidates[0].copy(), ProjectInfo(source_root))

    def get_database_for_file(
        self, file: str
    ) -> tuple[CompilationDatabase, str] | None:
        """Find the database responsible for a file.

        Returns:
            (database, directory that holds it), or None.
        """
        if self.compile_commands_dir is not None:
            directories = [self.compile_commands_dir]
        else:
            directories = ancestor_directories(file)

        for directory in directories:
            database = self._get_database_in_dir(directory)
            if database is not None:
                return database, directory
        return None

    def _get_database_in_dir(self, directory: str) -> CompilationDatabase | None:
        while True:
            with self._lock:
                if directory in self._databases:
                    return self._databases[directory]
                pending = self._loading.get(directory)
                if pending is None:
                    pending = threading.Event()
                    self._loading[directory] = pending
                    break
            # Another thread is loading this directory
            pending.wait()

        database: CompilationDatabase | None = None
        try:
            database = self._load(directory)
        finally:
            with self._lock:
                self._databases[directory] = database
                del self._loading[directory]
            pending.set()

        if database is not None:
            self.on_command_changed.broadcast(database.all_files())
        return database

    def _load(self, directory: str) -> CompilationDatabase | None:
        try:
            database = self._loader(directory)
        except DatabaseLoadError as e:
            logger.warning("%s", e)
            return None
        if database is not None:
            logger.info("Loaded compilation database from %s", directory)
        return database

    def __repr__(self) -> str:
        return (
            f"DirectoryBasedDatabase(compile_commands_dir={self.compile_commands_dir!r})"
        )
