# SPDX-License-Identifier: MIT
"""Fallback compile commands.

When neither an override nor a compilation database knows a file, the
engine still needs some command to analyze it with. The fallback is a
plain clang invocation living next to the running tool.
"""

from __future__ import annotations

import logging
import os
import re
import shutil
import sys
from pathlib import Path

from ccresolve.core.command import CompileCommand

logger = logging.getLogger(__name__)

# Clang treats .h as C by default, which produces unhelpful diagnostics in
# C++ and Objective-C code bases. Objective-C++ accepts the most code.
HEADER_LANGUAGE_FLAG = "-xobjective-c++-header"
HEADER_SUFFIXES = {".h"}

FALLBACK_COMPILER = "clang"


def get_main_executable() -> Path:
    """Locate the executable of the running tool.

    Uses argv[0] when it names a real file (directly or via PATH) and the
    Python interpreter otherwise.
    """
    argv0 = sys.argv[0] if sys.argv else ""
    if argv0:
        found = argv0 if os.sep in argv0 else shutil.which(argv0)
        if found and os.path.isfile(found):
            return Path(found).resolve()
    return Path(sys.executable).resolve()


def get_fallback_compiler_path() -> str:
    """Path of the clang binary installed next to the running tool."""
    return str(get_main_executable().parent / FALLBACK_COMPILER)


def _version_key(name: str) -> tuple[int, ...]:
    return tuple(int(part) for part in re.findall(r"\d+", name))


def get_standard_resource_dir() -> str:
    """Derive the clang resource directory from the install layout.

    A tool installed as ``<prefix>/bin/tool`` ships its builtin headers in
    ``<prefix>/lib/clang/<version>``. The highest version present wins.

    Returns:
        The resource directory, or "" when the layout has none.
    """
    clang_lib = get_main_executable().parent.parent / "lib" / "clang"
    if not clang_lib.is_dir():
        logger.debug("No clang resource directory under %s", clang_lib)
        return ""
    versions = [entry for entry in clang_lib.iterdir() if entry.is_dir()]
    if not versions:
        return ""
    versions.sort(key=lambda entry: _version_key(entry.name))
    return str(versions[-1])


def get_fallback_command(file: str) -> CompileCommand:
    """Synthesize a compile command for a file nobody knows about.

    Never fails.
    """
    path = Path(file)
    argv = [get_fallback_compiler_path()]
    if path.suffix in HEADER_SUFFIXES:
        argv.append(HEADER_LANGUAGE_FLAG)
    argv.append(file)
    return CompileCommand(
        directory=str(path.parent),
        filename=path.name,
        arguments=argv,
        output="",
    )
