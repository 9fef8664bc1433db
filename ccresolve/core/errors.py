# SPDX-License-Identifier: MIT
"""Custom exceptions for ccresolve.

All ccresolve exceptions inherit from CcresolveError. Most of them never
reach callers of the resolution engine: the layers catch them and degrade
to a less precise command instead.
"""

from __future__ import annotations


class CcresolveError(Exception):
    """Base class for all ccresolve exceptions.

    Attributes:
        message: The error message.
    """

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class DatabaseNotFoundError(CcresolveError):
    """No ancestor directory yields a usable compilation database.

    Attributes:
        path: The file that was being resolved.
    """

    def __init__(self, path: str) -> None:
        self.path = path
        super().__init__(f"no compilation database found for {path}")


class DatabaseLoadError(CcresolveError):
    """A compilation database exists on disk but could not be loaded.

    Attributes:
        path: Path to the database file.
        reason: What was wrong with it.
    """

    def __init__(self, path: str, reason: str) -> None:
        self.path = path
        self.reason = reason
        super().__init__(f"cannot load compilation database {path}: {reason}")


class SubprocessFailure(CcresolveError):
    """Running a compiler to query its target failed.

    Attributes:
        compiler: The executable that was run.
        reason: Why it failed (spawn error, exit status, timeout, ...).
    """

    def __init__(self, compiler: str, reason: str) -> None:
        self.compiler = compiler
        self.reason = reason
        super().__init__(f"target query for {compiler} failed: {reason}")


class WrapperPatternMismatch(CcresolveError):
    """A compiler wrapper invocation does not have the expected shape.

    Attributes:
        argument: The offending argument.
    """

    def __init__(self, argument: str) -> None:
        self.argument = argument
        super().__init__(f"not a recognized compiler selector: {argument}")


class ConfigError(CcresolveError):
    """Configuration file is invalid."""
