# SPDX-License-Identifier: MIT
"""Tests for compile_flags.txt loading and directory database discovery."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from ccresolve.core.errors import DatabaseLoadError
from ccresolve.database import (
    FLAGS_DATABASE_NAME,
    JSON_DATABASE_NAME,
    FixedCompilationDatabase,
    JsonCompilationDatabase,
    load_from_directory,
)
from ccresolve.database.fixed import FIXED_EXECUTABLE


class TestFixedCompilationDatabase:
    def test_flags_applied_to_any_file(self, tmp_path: Path) -> None:
        path = tmp_path / FLAGS_DATABASE_NAME
        path.write_text("-std=c++17\n\n  -Iinclude  \n-DDEBUG\n")

        db = FixedCompilationDatabase.load(path)
        (command,) = db.get_compile_commands(str(tmp_path / "src" / "x.cpp"))

        assert command.arguments == [
            FIXED_EXECUTABLE,
            "-std=c++17",
            "-Iinclude",
            "-DDEBUG",
            str(tmp_path / "src" / "x.cpp"),
        ]
        assert command.directory == str(tmp_path)

    def test_no_files_to_enumerate(self, tmp_path: Path) -> None:
        db = FixedCompilationDatabase(str(tmp_path), ["-Wall"])
        assert db.all_files() == []

    def test_empty_file(self, tmp_path: Path) -> None:
        path = tmp_path / FLAGS_DATABASE_NAME
        path.write_text("")
        (command,) = FixedCompilationDatabase.load(path).get_compile_commands("/a.c")
        assert command.arguments == [FIXED_EXECUTABLE, "/a.c"]

    def test_unreadable(self, tmp_path: Path) -> None:
        with pytest.raises(DatabaseLoadError):
            FixedCompilationDatabase.load(tmp_path / FLAGS_DATABASE_NAME)


class TestLoadFromDirectory:
    def test_json_preferred(self, tmp_path: Path) -> None:
        (tmp_path / JSON_DATABASE_NAME).write_text(
            json.dumps([{"directory": str(tmp_path), "file": "a.c", "arguments": ["cc"]}])
        )
        (tmp_path / FLAGS_DATABASE_NAME).write_text("-Wall\n")

        assert isinstance(load_from_directory(str(tmp_path)), JsonCompilationDatabase)

    def test_flags_file(self, tmp_path: Path) -> None:
        (tmp_path / FLAGS_DATABASE_NAME).write_text("-Wall\n")
        assert isinstance(load_from_directory(str(tmp_path)), FixedCompilationDatabase)

    def test_nothing(self, tmp_path: Path) -> None:
        assert load_from_directory(str(tmp_path)) is None

    def test_malformed_json_raises(self, tmp_path: Path) -> None:
        (tmp_path / JSON_DATABASE_NAME).write_text("not json")
        with pytest.raises(DatabaseLoadError):
            load_from_directory(str(tmp_path))

    def test_directory_named_like_database_ignored(self, tmp_path: Path) -> None:
        (tmp_path / JSON_DATABASE_NAME).mkdir()
        assert load_from_directory(str(tmp_path)) is None
