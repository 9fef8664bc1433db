# SPDX-License-Identifier: MIT
"""QNX qcc/q++ compiler wrapper support.

qcc does not compile anything itself. It dispatches to a real GCC
selected with a -V option, e.g.::

    qcc -Vgcc_ntoarmv7le -c foo.c     # runs ntoarmv7-gcc
    qcc -V8.3.0,gcc_ntox86_64 ...     # runs ntox86_64-8.3.0-gcc

Analyzing such a command with qcc's own defaults picks the wrong target,
so the real compiler is asked for its target triple instead.
"""

from __future__ import annotations

import logging
import os
import re
import subprocess
import tempfile

from ccresolve.core.errors import SubprocessFailure, WrapperPatternMismatch

logger = logging.getLogger(__name__)

# Optional path prefix, wrapper name, optional .exe
WRAPPER_RE = re.compile(
    r"^(?P<prefix>(?:.*[/\\])?)(?P<wrapper>qcc|q\+\+)(?P<suffix>\.exe)?$",
    re.IGNORECASE,
)
SELECTOR_PREFIX = "-V"
SELECTOR_RE = re.compile(r"^-V((?P<version>.*),)?gcc_(?P<variant>.*)$")
TARGET_LINE_PREFIX = "Target: "
TARGET_QUERY_FLAG = "-v"

DEFAULT_PROBE_TIMEOUT = 10.0


def is_compiler_wrapper(executable: str) -> bool:
    return WRAPPER_RE.match(executable) is not None


def find_selector(arguments: list[str]) -> str | None:
    """First -V argument after the executable, if any."""
    for arg in arguments[1:]:
        if arg.startswith(SELECTOR_PREFIX):
            return arg
    return None


def normalize_variant(variant: str) -> str:
    """Strip the endianness and language markers from a -V variant.

    "ntoarmv7le" -> "ntoarmv7", "ntox86_64_cpp" -> "ntox86_64".
    """
    for marker in ("le", "_cpp", "_gpp"):
        if variant.endswith(marker):
            variant = variant[: -len(marker)]
    return variant


def derive_real_compiler(executable: str, selector: str) -> str:
    """Name of the GCC a qcc invocation dispatches to.

    Args:
        executable: The wrapper as written in the command (e.g. /opt/bin/qcc).
        selector: The -V argument.

    Returns:
        The real compiler, in the wrapper's directory.

    Raises:
        WrapperPatternMismatch: If executable is not a wrapper or the
            selector does not have the gcc_<variant> shape.
    """
    wrapper = WRAPPER_RE.match(executable)
    if wrapper is None:
        raise WrapperPatternMismatch(executable)
    match = SELECTOR_RE.match(selector)
    if match is None:
        raise WrapperPatternMismatch(selector)

    real = wrapper.group("prefix") + normalize_variant(match.group("variant"))
    version = match.group("version")
    if version:
        real += f"-{version}"
    return real + "-gcc"


def parse_target(output: str) -> str:
    """Extract the triple from ``gcc -v`` output, or "" if absent."""
    for line in output.splitlines():
        if line.startswith(TARGET_LINE_PREFIX):
            return line[len(TARGET_LINE_PREFIX) :].strip()
    return ""


def run_target_query(compiler: str, timeout: float | None = DEFAULT_PROBE_TIMEOUT) -> str:
    """Run ``compiler -v`` and return what it printed.

    Output goes through a temporary file that is removed however the
    run ends.

    Raises:
        SubprocessFailure: If the compiler cannot be started, exits with
            a nonzero status, times out, or its output cannot be read.
    """
    with tempfile.TemporaryFile(prefix="ccresolve_target", suffix=".txt") as out:
        try:
            result = subprocess.run(
                [compiler, TARGET_QUERY_FLAG],
                stdin=subprocess.DEVNULL,
                stdout=out,
                stderr=subprocess.STDOUT,
                timeout=timeout,
            )
        except subprocess.TimeoutExpired as e:
            raise SubprocessFailure(compiler, f"timed out after {timeout}s") from e
        except OSError as e:
            raise SubprocessFailure(compiler, str(e)) from e

        if result.returncode != 0:
            raise SubprocessFailure(compiler, f"exit status {result.returncode}")

        try:
            out.seek(0)
            return out.read().decode("utf-8", errors="replace")
        except OSError as e:
            raise SubprocessFailure(compiler, f"cannot read output: {e}") from e


def query_target(compiler: str, timeout: float | None = DEFAULT_PROBE_TIMEOUT) -> str:
    """Target triple a compiler reports, or "" if it cannot be learned."""
    try:
        output = run_target_query(compiler, timeout)
    except SubprocessFailure as e:
        logger.warning("%s", e)
        return ""
    target = parse_target(output)
    if not target:
        logger.info("%s did not report a target", compiler)
    return target


def qnx_system_include_args(qnx_target: str | None = None) -> list[str]:
    """-isystem flags for the QNX target headers.

    Args:
        qnx_target: The QNX target root; defaults to $QNX_TARGET.

    Returns:
        The flags, or [] when no target root is known.
    """
    if qnx_target is None:
        qnx_target = os.environ.get("QNX_TARGET")
    if not qnx_target:
        return []
    usr_include = os.path.join(qnx_target, "usr", "include")
    return [
        "-isystem",
        usr_include,
        "-isystem",
        os.path.join(usr_include, "c++", "v1"),
    ]
