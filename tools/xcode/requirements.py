"""tools/xcode/requirements.py

Host preflight checks.

Each requirement is a small predicate plus a remediation message. The checks
only inspect the host; they never write anything. :func:`first_unmet` returns
the message of the first failing requirement, so the caller can stop before
any device work starts.
"""

from __future__ import annotations

import platform
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, List, Optional, Sequence

from tools.core_cmd import which

XCODEBUILD_FALLBACKS = ["/usr/bin/xcodebuild"]
XCPARSE_FALLBACKS = ["/opt/homebrew/bin/xcparse", "/usr/local/bin/xcparse"]

APPLICATION_DIRS = (Path("/Applications"), Path.home() / "Applications")


@dataclass(frozen=True)
class Requirement:
    name: str
    check: Callable[[], bool]
    message: str


def is_macos() -> bool:
    return platform.system() == "Darwin"


def xcode_installed(search_dirs: Sequence[Path] = APPLICATION_DIRS) -> bool:
    """True if an ``Xcode*.app`` bundle (release or beta) is installed."""
    for d in search_dirs:
        if d.is_dir() and any(d.glob("Xcode*.app")):
            return True
    return False


def default_requirements(
    *,
    host_check: Callable[[], bool] = is_macos,
    app_check: Callable[[], bool] = xcode_installed,
    which_fn: Callable[..., Optional[str]] = which,
) -> List[Requirement]:
    return [
        Requirement(
            name="macos",
            check=host_check,
            message="Xcode is only available on macOS.",
        ),
        Requirement(
            name="xcode",
            check=app_check,
            message="Xcode is required. (https://developer.apple.com/xcode/)",
        ),
        Requirement(
            name="xcodebuild",
            check=lambda: which_fn("xcodebuild", XCODEBUILD_FALLBACKS) is not None,
            message="Xcode Command Line Tools are required. (https://developer.apple.com/xcode/resources/)",
        ),
        Requirement(
            name="xcparse",
            check=lambda: which_fn("xcparse", XCPARSE_FALLBACKS) is not None,
            message="xcparse is required. (https://github.com/ChargePoint/xcparse)",
        ),
    ]


def first_unmet(requirements: Sequence[Requirement]) -> Optional[str]:
    """Return the message of the first unmet requirement, or None."""
    for req in requirements:
        if not req.check():
            return req.message
    return None
