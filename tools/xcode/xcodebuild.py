"""tools/xcode/xcodebuild.py

Runs the measurement UI tests on one simulator and locates the result bundle.

The test target writes its attachments into an ``.xcresult`` bundle under
``<derivedDataPath>/Logs/Test/``. Pointing ``-derivedDataPath`` at a scratch
directory keeps every device run isolated from the user's DerivedData and
from other devices.
"""

from __future__ import annotations

import logging
import subprocess
from pathlib import Path
from typing import List

from ios_dimensions.errors import MissingArtifactError, ToolchainError
from tools.core_cmd import run_cmd

logger = logging.getLogger(__name__)

RESULT_BUNDLE_SUFFIX = ".xcresult"


def destination_for(device_name: str) -> str:
    return f"platform=iOS Simulator,name={device_name}"


def build_test_command(
    *,
    xcodebuild_bin: str,
    project: Path,
    scheme: str,
    derived_data: Path,
    device_name: str,
) -> List[str]:
    return [
        xcodebuild_bin,
        "build",
        "test",
        "-quiet",
        "-scheme",
        scheme,
        "-project",
        str(project),
        "-derivedDataPath",
        str(derived_data),
        "-destination",
        destination_for(device_name),
    ]


def run_build_test(
    *,
    xcodebuild_bin: str,
    project: Path,
    scheme: str,
    derived_data: Path,
    device_name: str,
    timeout_seconds: int = 0,
) -> float:
    """Build and test on *device_name*; return the elapsed seconds.

    Raises :class:`ToolchainError` on a non-zero exit or a timeout.
    """
    cmd = build_test_command(
        xcodebuild_bin=xcodebuild_bin,
        project=project,
        scheme=scheme,
        derived_data=derived_data,
        device_name=device_name,
    )
    try:
        res = run_cmd(cmd, timeout_seconds=timeout_seconds)
    except subprocess.TimeoutExpired as e:
        raise ToolchainError(
            f"xcodebuild timed out after {timeout_seconds}s on {device_name}",
            command=" ".join(cmd),
        ) from e
    except FileNotFoundError as e:
        raise ToolchainError(f"{xcodebuild_bin} not found", command=" ".join(cmd)) from e

    if not res.ok:
        # -quiet leaves only warnings/errors on stderr; keep the tail for the report.
        tail = "\n".join(res.stderr.strip().splitlines()[-20:])
        raise ToolchainError(
            f"xcodebuild exited with code {res.exit_code} on {device_name}"
            + (f"\n{tail}" if tail else ""),
            command=res.command_str,
            exit_code=res.exit_code,
            stderr=res.stderr,
        )
    return res.elapsed_seconds


def find_result_bundle(derived_data: Path) -> Path:
    """Return the most recent ``Logs/Test/*.xcresult`` bundle under *derived_data*."""
    logs = Path(derived_data) / "Logs" / "Test"
    candidates = [p for p in logs.glob(f"*{RESULT_BUNDLE_SUFFIX}")] if logs.is_dir() else []
    if not candidates:
        raise MissingArtifactError(f"No {RESULT_BUNDLE_SUFFIX} bundle found under {logs}")

    # mtime first, name as a tiebreak (bundle names embed a timestamp).
    candidates.sort(key=lambda p: (p.stat().st_mtime, p.name))
    bundle = candidates[-1]
    logger.debug("result bundle: %s", bundle)
    return bundle
