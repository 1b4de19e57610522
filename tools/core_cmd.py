"""tools/core_cmd.py

Command-execution helpers shared by the Xcode adapters.

This module has no tool-specific knowledge. It provides:

* :func:`which` - resolve executables, with fallback locations.
* :func:`run_cmd` - run subprocesses (no shell=True) and capture output.
"""

from __future__ import annotations

import logging
import os
import shutil
import subprocess
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List, Optional

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CmdResult:
    exit_code: int
    elapsed_seconds: float
    command_str: str
    stdout: str
    stderr: str

    @property
    def ok(self) -> bool:
        return self.exit_code == 0


def which(bin_name: str, fallbacks: Optional[List[str]] = None) -> Optional[str]:
    """Return the absolute path of *bin_name*, or None if it cannot be found.

    Homebrew installs (``/opt/homebrew/bin``) are often missing from PATH when
    the script is started from an IDE, hence the fallbacks.
    """
    found = shutil.which(bin_name)
    if found:
        return found

    for candidate in fallbacks or []:
        p = Path(candidate)
        if p.exists() and os.access(str(p), os.X_OK):
            return str(p)
    return None


def run_cmd(
    cmd: List[str],
    *,
    cwd: Optional[Path] = None,
    timeout_seconds: int = 0,
    env: Optional[Dict[str, str]] = None,
) -> CmdResult:
    """Run a subprocess and capture stdout/stderr (no ``shell=True``).

    Never raises on non-zero exit codes. Raises ``subprocess.TimeoutExpired``
    when *timeout_seconds* (> 0) elapses and ``FileNotFoundError`` when the
    binary does not exist.
    """
    t0 = time.time()

    # If env is provided, merge it onto the current process environment.
    env2 = None
    if env is not None:
        env2 = os.environ.copy()
        env2.update(env)

    command_str = " ".join(cmd)
    logger.debug("running: %s", command_str)

    proc = subprocess.run(
        cmd,
        cwd=str(cwd) if cwd else None,
        text=True,
        capture_output=True,
        timeout=timeout_seconds if timeout_seconds and timeout_seconds > 0 else None,
        env=env2,
    )
    elapsed = time.time() - t0
    logger.debug("exit %s after %.1fs: %s", proc.returncode, elapsed, command_str)

    return CmdResult(
        exit_code=proc.returncode,
        elapsed_seconds=elapsed,
        command_str=command_str,
        stdout=proc.stdout or "",
        stderr=proc.stderr or "",
    )
