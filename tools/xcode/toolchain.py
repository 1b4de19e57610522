"""tools/xcode/toolchain.py

The toolchain seam used by the measurer.

:class:`XcodeToolchain` is the real implementation (xcrun/xcodebuild/xcparse).
Anything with the same four methods can stand in for it, which is how the
tests measure devices without Xcode.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import List, Protocol, Tuple

from tools.core_cmd import which
from tools.xcode.requirements import XCODEBUILD_FALLBACKS, XCPARSE_FALLBACKS
from tools.xcode.simctl import SimulatorDevice, list_devices
from tools.xcode.xcodebuild import find_result_bundle, run_build_test
from tools.xcode.xcparse import extract_attachments, list_attachments


class Toolchain(Protocol):
    def discover_devices(self) -> Tuple[List[SimulatorDevice], str]: ...

    def build_and_test(self, device_name: str, derived_data: Path) -> None: ...

    def locate_result_bundle(self, derived_data: Path) -> Path: ...

    def extract_attachments(self, bundle: Path, dest: Path) -> List[Path]: ...


@dataclass(frozen=True)
class XcodeToolchain:
    project: Path
    scheme: str
    build_timeout_seconds: int = 0
    extract_timeout_seconds: int = 0
    xcrun_bin: str = "xcrun"
    xcodebuild_bin: str = "xcodebuild"
    xcparse_bin: str = "xcparse"

    @classmethod
    def from_host(
        cls,
        *,
        project: Path,
        scheme: str,
        build_timeout_seconds: int = 0,
        extract_timeout_seconds: int = 0,
    ) -> "XcodeToolchain":
        """Resolve binaries once so fallbacks outside PATH are honored."""
        return cls(
            project=Path(project),
            scheme=scheme,
            build_timeout_seconds=build_timeout_seconds,
            extract_timeout_seconds=extract_timeout_seconds,
            xcrun_bin=which("xcrun") or "xcrun",
            xcodebuild_bin=which("xcodebuild", XCODEBUILD_FALLBACKS) or "xcodebuild",
            xcparse_bin=which("xcparse", XCPARSE_FALLBACKS) or "xcparse",
        )

    def discover_devices(self) -> Tuple[List[SimulatorDevice], str]:
        return list_devices(xcrun_bin=self.xcrun_bin)

    def build_and_test(self, device_name: str, derived_data: Path) -> None:
        run_build_test(
            xcodebuild_bin=self.xcodebuild_bin,
            project=self.project,
            scheme=self.scheme,
            derived_data=derived_data,
            device_name=device_name,
            timeout_seconds=self.build_timeout_seconds,
        )

    def locate_result_bundle(self, derived_data: Path) -> Path:
        return find_result_bundle(derived_data)

    def extract_attachments(self, bundle: Path, dest: Path) -> List[Path]:
        extract_attachments(
            xcparse_bin=self.xcparse_bin,
            bundle=bundle,
            dest=dest,
            timeout_seconds=self.extract_timeout_seconds,
        )
        return list_attachments(dest)
