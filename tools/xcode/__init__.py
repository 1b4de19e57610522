"""tools/xcode

Adapters around the Apple toolchain: host checks, simulator discovery,
``xcodebuild`` test runs and ``xcparse`` attachment extraction.

Nothing in here knows about the dataset; it only runs tools and reports
paths or raises :mod:`ios_dimensions.errors` exceptions.
"""

from __future__ import annotations

from .simctl import SimulatorDevice
from .toolchain import Toolchain, XcodeToolchain

__all__ = [
    "SimulatorDevice",
    "Toolchain",
    "XcodeToolchain",
]
