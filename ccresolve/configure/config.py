# SPDX-License-Identifier: MIT
"""Resolver configuration.

ResolverConfig holds the knobs of the resolution engine. It can be read
from a JSON file and from environment variables, and build_database()
turns it into the layered engine.
"""

from __future__ import annotations

import json
import logging
import os
import shlex
from dataclasses import asdict, dataclass, field, fields
from pathlib import Path
from typing import Any

from ccresolve.core.database import DatabaseLoader
from ccresolve.core.directory import DirectoryBasedDatabase
from ccresolve.core.errors import ConfigError
from ccresolve.core.overlay import OverlayDatabase
from ccresolve.core.target_inference import TargetInferringDatabase
from ccresolve.toolchains.qcc import DEFAULT_PROBE_TIMEOUT

logger = logging.getLogger(__name__)

ENV_PREFIX = "CCRESOLVE_"


@dataclass
class ResolverConfig:
    """Configuration of the resolution engine.

    Attributes:
        compile_commands_dir: Resolve every file against the database in
            this directory instead of searching ancestors.
        resource_dir: Value for -resource-dir. None derives it from the
            install layout; "" disables injection.
        fallback_flags: Extra flags appended to fallback commands.
        probe_timeout: Seconds to wait for a compiler target query.
        probe_plain_compilers: Query the target of every compiler, not only
            of compiler wrappers.
        qnx_target: QNX target root used for system header flags.
    """

    compile_commands_dir: str | None = None
    resource_dir: str | None = None
    fallback_flags: list[str] = field(default_factory=list)
    probe_timeout: float = DEFAULT_PROBE_TIMEOUT
    probe_plain_compilers: bool = False
    qnx_target: str | None = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ResolverConfig:
        """Create a config from a dict, rejecting unknown keys."""
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            raise ConfigError(f"unknown configuration keys: {', '.join(unknown)}")

        config = cls(**data)
        for name in ("compile_commands_dir", "resource_dir", "qnx_target"):
            value = getattr(config, name)
            if value is not None and not isinstance(value, str):
                raise ConfigError(f"{name} must be a string")
        if not isinstance(config.fallback_flags, list) or not all(
            isinstance(flag, str) for flag in config.fallback_flags
        ):
            raise ConfigError("fallback_flags must be a list of strings")
        if isinstance(config.probe_timeout, bool) or not isinstance(
            config.probe_timeout, (int, float)
        ):
            raise ConfigError("probe_timeout must be a number")
        if not isinstance(config.probe_plain_compilers, bool):
            raise ConfigError("probe_plain_compilers must be true or false")
        return config

    @classmethod
    def load(cls, path: Path | str) -> ResolverConfig:
        """Read a JSON config file.

        A missing file yields the defaults.

        Raises:
            ConfigError: If the file is not a JSON object or has bad values.
        """
        path = Path(path)
        if not path.exists():
            logger.debug("No config file at %s, using defaults", path)
            return cls()
        try:
            with open(path, encoding="utf-8") as f:
                data = json.load(f)
        except (json.JSONDecodeError, UnicodeDecodeError, OSError) as e:
            raise ConfigError(f"{path}: {e}") from e
        if not isinstance(data, dict):
            raise ConfigError(f"{path}: top level must be an object")
        try:
            return cls.from_dict(data)
        except ConfigError as e:
            raise ConfigError(f"{path}: {e.message}") from e

    def apply_env(self, environ: dict[str, str] | None = None) -> ResolverConfig:
        """Override values from CCRESOLVE_* variables and QNX_TARGET.

        Set variables win over values read from a config file.

        Returns:
            self, for chaining.
        """
        env = os.environ if environ is None else environ

        directory = env.get(f"{ENV_PREFIX}COMPILE_COMMANDS_DIR")
        if directory:
            self.compile_commands_dir = directory
        if f"{ENV_PREFIX}RESOURCE_DIR" in env:
            self.resource_dir = env[f"{ENV_PREFIX}RESOURCE_DIR"]
        flags = env.get(f"{ENV_PREFIX}FALLBACK_FLAGS")
        if flags:
            self.fallback_flags = shlex.split(flags)
        if env.get("QNX_TARGET"):
            self.qnx_target = env["QNX_TARGET"]
        return self

    def save(self, path: Path | str) -> None:
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "w", encoding="utf-8") as f:
            json.dump(asdict(self), f, indent=2)
            f.write("\n")


def build_database(
    config: ResolverConfig | None = None,
    *,
    loader: DatabaseLoader | None = None,
) -> OverlayDatabase:
    """Compose the resolution engine.

    Layers, outermost first: overrides, target inference, directory
    discovery.
    """
    config = config or ResolverConfig()
    directory = DirectoryBasedDatabase(config.compile_commands_dir, loader=loader)
    inferring = TargetInferringDatabase(
        directory,
        probe_timeout=config.probe_timeout,
        probe_plain_compilers=config.probe_plain_compilers,
        qnx_target=config.qnx_target,
    )
    return OverlayDatabase(
        inferring,
        fallback_flags=config.fallback_flags,
        resource_dir=config.resource_dir,
    )
