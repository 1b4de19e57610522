from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence, Tuple

import pytest

from tools.xcode.simctl import SimulatorDevice
from tools.xcode.xcodebuild import find_result_bundle
from tools.xcode.xcparse import list_attachments


def make_attachment(
    orientation: str,
    *,
    width: float = 390,
    height: float = 844,
    device: str = "iPhone",
    scale: float = 3,
    radius: float = 0,
    size_class: Tuple[str, str] = ("compact", "regular"),
) -> Dict[str, Any]:
    """Attachment payload as written by the measurement UI test."""
    top = 47 if orientation == "portrait" else 0
    side = 0 if orientation == "portrait" else 47
    return {
        "orientation": orientation,
        "device": device,
        "scale": scale,
        "radius": radius,
        "screen": {"width": width, "height": height},
        "safeArea": {"top": top, "right": side, "bottom": 34, "left": side},
        "layoutMargins": {"top": top, "right": side + 16, "bottom": 34, "left": side + 16},
        "readableContent": {"top": top, "right": side + 16, "bottom": 34, "left": side + 16},
        "sizeClass": {"horizontal": size_class[0], "vertical": size_class[1]},
    }


def make_pair(width: float = 390, height: float = 844, **kwargs: Any) -> List[Dict[str, Any]]:
    return [
        make_attachment("portrait", width=width, height=height, **kwargs),
        make_attachment("landscape", width=height, height=width, **kwargs),
    ]


class FakeToolchain:
    """Stands in for xcodebuild/xcparse by writing attachments into the scratch dir.

    ``failures`` maps a device name to the step that should raise
    (``build``, ``locate``, ``extract``) and the exception to raise.
    """

    def __init__(
        self,
        attachments: Dict[str, Sequence[Any]],
        *,
        platform: str = "iOS 17.2",
        failures: Optional[Dict[str, Tuple[str, Exception]]] = None,
        emit_bundle: bool = True,
    ) -> None:
        self.attachments = attachments
        self.platform = platform
        self.failures = failures or {}
        self.emit_bundle = emit_bundle
        self.scratch_dirs: List[Path] = []
        self.built: List[str] = []
        self._current: Optional[str] = None

    def _maybe_fail(self, step: str) -> None:
        planned = self.failures.get(self._current or "")
        if planned and planned[0] == step:
            raise planned[1]

    def discover_devices(self):
        devices = [
            SimulatorDevice(name=n, udid=f"UDID-{i}", runtime="com.apple.CoreSimulator.SimRuntime.iOS-17-2")
            for i, n in enumerate(self.attachments)
        ]
        return devices, self.platform

    def build_and_test(self, device_name: str, derived_data: Path) -> None:
        self._current = device_name
        self.scratch_dirs.append(Path(derived_data))
        self.built.append(device_name)
        self._maybe_fail("build")
        if not self.emit_bundle:
            return
        bundle = Path(derived_data) / "Logs" / "Test" / "Test-dimensions.xcresult"
        bundle.mkdir(parents=True)
        payloads = [p if isinstance(p, str) else json.dumps(p) for p in self.attachments[device_name]]
        (bundle / "payloads.json").write_text(json.dumps(payloads), encoding="utf-8")

    def locate_result_bundle(self, derived_data: Path) -> Path:
        self._maybe_fail("locate")
        return find_result_bundle(derived_data)

    def extract_attachments(self, bundle: Path, dest: Path) -> List[Path]:
        self._maybe_fail("extract")
        payloads = json.loads((Path(bundle) / "payloads.json").read_text(encoding="utf-8"))
        for i, text in enumerate(payloads):
            (Path(dest) / f"Screenshot_{i}.txt").write_text(text, encoding="utf-8")
        return list_attachments(dest)


@pytest.fixture
def attachment_file(tmp_path: Path):
    """Write a payload (dict or raw text) to a .txt file and return its path."""
    counter = {"n": 0}

    def _write(payload: Any) -> Path:
        counter["n"] += 1
        p = tmp_path / f"attachment_{counter['n']}.txt"
        p.write_text(payload if isinstance(payload, str) else json.dumps(payload), encoding="utf-8")
        return p

    return _write
