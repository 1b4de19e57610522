"""pipeline.config

Runtime settings.

Precedence, lowest to highest: the defaults below, ``DIMENSIONS_*``
environment variables (a repo-root ``.env`` is loaded by
:mod:`pipeline.wiring` without overriding exported values), then CLI flags via
:meth:`Settings.with_overrides`.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Any, Mapping, Optional

from pipeline.core import DEFAULT_OUTPUT_DIR, DEFAULT_PROJECT, DEFAULT_SCHEME

ENV_PREFIX = "DIMENSIONS_"

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR")


def _env_int(environ: Mapping[str, str], name: str, default: int) -> int:
    raw = (environ.get(name) or "").strip()
    if not raw:
        return default
    try:
        value = int(raw)
    except ValueError:
        raise ValueError(f"{name} must be an integer number of seconds, got {raw!r}") from None
    if value < 0:
        raise ValueError(f"{name} must be >= 0, got {value}")
    return value


def _env_path(environ: Mapping[str, str], name: str) -> Optional[Path]:
    raw = (environ.get(name) or "").strip()
    return Path(raw).expanduser() if raw else None


@dataclass(frozen=True)
class Settings:
    project: Path = DEFAULT_PROJECT
    scheme: str = DEFAULT_SCHEME
    output_dir: Path = DEFAULT_OUTPUT_DIR
    scratch_root: Optional[Path] = None

    # 0 disables the timeout.
    build_timeout_seconds: int = 1800
    extract_timeout_seconds: int = 300

    log_level: str = "WARNING"

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "Settings":
        env = os.environ if environ is None else environ
        default = cls()

        log_level = (env.get(f"{ENV_PREFIX}LOG_LEVEL") or default.log_level).strip().upper()
        if log_level not in LOG_LEVELS:
            raise ValueError(f"{ENV_PREFIX}LOG_LEVEL must be one of {list(LOG_LEVELS)}, got {log_level!r}")

        return cls(
            project=_env_path(env, f"{ENV_PREFIX}PROJECT") or default.project,
            scheme=(env.get(f"{ENV_PREFIX}SCHEME") or "").strip() or default.scheme,
            output_dir=_env_path(env, f"{ENV_PREFIX}OUTPUT_DIR") or default.output_dir,
            scratch_root=_env_path(env, f"{ENV_PREFIX}SCRATCH_ROOT"),
            build_timeout_seconds=_env_int(env, f"{ENV_PREFIX}BUILD_TIMEOUT", default.build_timeout_seconds),
            extract_timeout_seconds=_env_int(
                env, f"{ENV_PREFIX}EXTRACT_TIMEOUT", default.extract_timeout_seconds
            ),
            log_level=log_level,
        )

    def with_overrides(self, **overrides: Any) -> "Settings":
        """Return a copy with every non-None override applied."""
        known = {f.name for f in fields(self)}
        unknown = sorted(set(overrides) - known)
        if unknown:
            raise TypeError(f"Unknown settings: {unknown}")
        changes = {k: v for k, v in overrides.items() if v is not None}
        for key in ("project", "output_dir", "scratch_root"):
            if key in changes:
                changes[key] = Path(changes[key])
        return replace(self, **changes)
