# SPDX-License-Identifier: MIT
"""Target triple inference for compiler wrappers.

Commands compiled through a dispatching wrapper such as QNX qcc carry
the real target only in a selector flag. This layer asks the real
compiler for its target and adds ``-target <triple>`` so analysis uses
the right architecture defaults.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable

from ccresolve.core.command import CompileCommand, ResolvedCommand
from ccresolve.core.database import BaseGlobalDatabase, GlobalCompilationDatabase
from ccresolve.core.errors import WrapperPatternMismatch
from ccresolve.toolchains import qcc

logger = logging.getLogger(__name__)

TARGET_FLAG = "-target"

TargetQuery = Callable[[str, "float | None"], str]


def has_target_flag(arguments: list[str]) -> bool:
    return any(
        arg == TARGET_FLAG or arg.startswith(("-target=", "--target="))
        for arg in arguments[1:]
    )


def insert_target(arguments: list[str], target: str) -> list[str]:
    """Insert ``-target <target>`` right after the executable."""
    return [arguments[0], TARGET_FLAG, target, *arguments[1:]]


class TargetInferringDatabase(BaseGlobalDatabase):
    """Adds -target to commands that go through a compiler wrapper.

    Inferred targets are cached by the literal executable string of the
    command, so each wrapper is probed once per process. The most recent
    non-empty target is also applied to fallback commands, which assumes
    a session analyzes code for one architecture.

    Attributes:
        base: The wrapped database.
        probe_timeout: Seconds to wait for a compiler to report its target.
        probe_plain_compilers: Also probe compilers that are not wrappers.
        qnx_target: QNX target root for system headers of wrapped commands.
    """

    def __init__(
        self,
        base: GlobalCompilationDatabase,
        *,
        probe_timeout: float | None = qcc.DEFAULT_PROBE_TIMEOUT,
        probe_plain_compilers: bool = False,
        qnx_target: str | None = None,
        query: TargetQuery | None = None,
    ) -> None:
        super().__init__()
        self.base = base
        self.probe_timeout = probe_timeout
        self.probe_plain_compilers = probe_plain_compilers
        self.qnx_target = qnx_target
        self._query: TargetQuery = query or qcc.query_target
        self._lock = threading.Lock()
        self._targets: dict[str, str] = {}
        self._last_target = ""
        self._base_changed = base.watch(self.on_command_changed.broadcast)

    @property
    def last_target(self) -> str:
        with self._lock:
            return self._last_target

    def get_compile_command(self, file: str) -> ResolvedCommand | None:
        resolved = self.base.get_compile_command(file)
        if resolved is None:
            return None

        arguments = resolved.command.arguments
        if has_target_flag(arguments):
            return resolved

        target = self.get_target(arguments)
        if not target:
            return resolved

        arguments = insert_target(arguments, target)
        if qcc.is_compiler_wrapper(arguments[0]):
            arguments.extend(qcc.qnx_system_include_args(self.qnx_target))
        with self._lock:
            self._last_target = target
        return ResolvedCommand(resolved.command.with_arguments(arguments), resolved.project)

    def get_fallback_command(self, file: str) -> CompileCommand:
        command = self.base.get_fallback_command(file)
        target = self.last_target
        if not target:
            return command
        return command.with_arguments(insert_target(command.arguments, target))

    def get_target(self, arguments: list[str]) -> str:
        """Target for a command line, probing the compiler on first use."""
        signature = arguments[0]
        with self._lock:
            cached = self._targets.get(signature)
        if cached is not None:
            return cached

        # Probe without the lock; concurrent first probes may both run and
        # the last one to finish is kept.
        target = self._infer_target(arguments)
        with self._lock:
            self._targets[signature] = target
        logger.debug("Target for %s: %r", signature, target)
        return target

    def _infer_target(self, arguments: list[str]) -> str:
        compiler = self._real_compiler(arguments)
        if compiler is None:
            return ""
        return self._query(compiler, self.probe_timeout)

    def _real_compiler(self, arguments: list[str]) -> str | None:
        executable = arguments[0]
        plain = executable if self.probe_plain_compilers else None
        if not qcc.is_compiler_wrapper(executable):
            return plain

        selector = qcc.find_selector(arguments)
        if selector is None:
            logger.debug("%s has no -V selector", executable)
            return None
        try:
            return qcc.derive_real_compiler(executable, selector)
        except WrapperPatternMismatch as e:
            logger.debug("%s", e)
            return plain

    def __repr__(self) -> str:
        return f"TargetInferringDatabase(base={self.base!r})"
