# SPDX-License-Identifier: MIT
"""
ccresolve: compile command resolution for source analysis tools.

Given a source file, ccresolve finds the compiler invocation to analyze it
with: explicit overrides first, then the nearest compilation database in
the file's ancestor directories, then a synthesized fallback. Commands
that go through a compiler wrapper get the real compiler's target triple.
"""

from __future__ import annotations

from ccresolve.configure.config import ResolverConfig, build_database
from ccresolve.core.command import CompileCommand, ProjectInfo, ResolvedCommand
from ccresolve.core.directory import DirectoryBasedDatabase
from ccresolve.core.events import CommandChanged, Subscription
from ccresolve.core.overlay import OverlayDatabase
from ccresolve.core.target_inference import TargetInferringDatabase

__version__ = "0.1.0"

__all__ = [
    "CommandChanged",
    "CompileCommand",
    "DirectoryBasedDatabase",
    "OverlayDatabase",
    "ProjectInfo",
    "ResolvedCommand",
    "ResolverConfig",
    "Subscription",
    "TargetInferringDatabase",
    "build_database",
]
