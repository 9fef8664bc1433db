# SPDX-License-Identifier: MIT
"""Tests for ccresolve.core.command."""

import pytest

from ccresolve.core.command import CompileCommand, ProjectInfo, ResolvedCommand


class TestCompileCommand:
    def test_creation(self):
        cmd = CompileCommand("/src", "main.cpp", ["clang++", "-c", "main.cpp"], "main.o")
        assert cmd.directory == "/src"
        assert cmd.filename == "main.cpp"
        assert cmd.executable == "clang++"
        assert cmd.output == "main.o"

    def test_output_defaults_to_empty(self):
        cmd = CompileCommand("/src", "main.cpp", ["clang++"])
        assert cmd.output == ""

    def test_empty_arguments_rejected(self):
        with pytest.raises(ValueError, match="no arguments"):
            CompileCommand("/src", "main.cpp", [])

    def test_arguments_are_copied(self):
        argv = ["clang++", "main.cpp"]
        cmd = CompileCommand("/src", "main.cpp", argv)
        argv.append("-DLATE")
        assert cmd.arguments == ["clang++", "main.cpp"]

    def test_with_arguments_leaves_original(self):
        cmd = CompileCommand("/src", "main.cpp", ["clang++", "main.cpp"], "main.o")
        other = cmd.with_arguments(["gcc", "main.cpp"])
        assert other.arguments == ["gcc", "main.cpp"]
        assert other.output == "main.o"
        assert cmd.arguments == ["clang++", "main.cpp"]

    def test_to_dict(self):
        cmd = CompileCommand("/src", "main.cpp", ["clang++", "main.cpp"])
        assert cmd.to_dict() == {
            "directory": "/src",
            "file": "main.cpp",
            "arguments": ["clang++", "main.cpp"],
            "output": "",
        }


class TestResolvedCommand:
    def test_default_project_info(self):
        resolved = ResolvedCommand(CompileCommand("/src", "a.c", ["cc"]))
        assert resolved.project == ProjectInfo("")
