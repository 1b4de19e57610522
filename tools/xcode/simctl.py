"""tools/xcode/simctl.py

Simulator discovery via ``xcrun simctl``.

``simctl list devices available --json`` groups devices by runtime identifier:

    {
      "devices": {
        "com.apple.CoreSimulator.SimRuntime.iOS-17-2": [
          {"name": "iPhone 15", "udid": "...", "isAvailable": true,
           "deviceTypeIdentifier": "com.apple.CoreSimulator.SimDeviceType.iPhone-15"},
          ...
        ],
        "com.apple.CoreSimulator.SimRuntime.watchOS-10-2": [...]
      }
    }

Only the newest iOS runtime with an available iPhone, iPad or iPod is
measured; its version becomes the dataset's platform descriptor (``iOS 17.2``).
"""

from __future__ import annotations

import json
import logging
import re
import subprocess
from dataclasses import dataclass
from typing import Any, List, Mapping, Optional, Tuple

from ios_dimensions.errors import ToolchainError
from tools.core_cmd import run_cmd

logger = logging.getLogger(__name__)

RUNTIME_RE = re.compile(r"SimRuntime\.(?P<os>[A-Za-z]+)-(?P<version>\d+(?:-\d+)*)$")

DEVICE_PREFIXES: Tuple[str, ...] = ("iPhone", "iPad", "iPod")


@dataclass(frozen=True)
class SimulatorDevice:
    name: str
    udid: str
    runtime: str
    device_type: str = ""


def parse_runtime(identifier: str) -> Optional[Tuple[str, Tuple[int, ...]]]:
    """Split ``...SimRuntime.iOS-17-2`` into ``("iOS", (17, 2))``."""
    m = RUNTIME_RE.search(identifier or "")
    if not m:
        return None
    version = tuple(int(part) for part in m.group("version").split("-"))
    return m.group("os"), version


def format_platform(os_name: str, version: Tuple[int, ...]) -> str:
    return f"{os_name} {'.'.join(str(v) for v in version)}"


def _handheld(devices: Any, identifier: str, prefixes: Tuple[str, ...]) -> List[SimulatorDevice]:
    out: List[SimulatorDevice] = []
    for d in devices if isinstance(devices, list) else []:
        if not isinstance(d, Mapping):
            continue
        if d.get("isAvailable") is False:
            continue
        name = str(d.get("name") or "").strip()
        if not name or not name.startswith(prefixes):
            continue
        out.append(
            SimulatorDevice(
                name=name,
                udid=str(d.get("udid") or ""),
                runtime=identifier,
                device_type=str(d.get("deviceTypeIdentifier") or ""),
            )
        )
    return out


def parse_simctl_devices(
    data: Mapping[str, Any],
    *,
    os_name: str = "iOS",
    prefixes: Tuple[str, ...] = DEVICE_PREFIXES,
) -> Tuple[List[SimulatorDevice], str]:
    """Return the handheld devices of the newest *os_name* runtime that has any, and its platform label."""
    groups = data.get("devices") if isinstance(data, Mapping) else None
    if not isinstance(groups, Mapping):
        raise ToolchainError("simctl output has no 'devices' object")

    best: Optional[Tuple[Tuple[int, ...], List[SimulatorDevice]]] = None
    for identifier, devices in groups.items():
        parsed = parse_runtime(str(identifier))
        if not parsed or parsed[0] != os_name:
            continue
        handheld = _handheld(devices, str(identifier), prefixes)
        if not handheld:
            logger.debug("skipping %s: no available handheld devices", identifier)
            continue
        if best is None or parsed[1] > best[0]:
            best = (parsed[1], handheld)

    if best is None:
        raise ToolchainError(f"No {os_name} simulator runtime with handheld devices found")

    version, out = best
    return out, format_platform(os_name, version)


def list_devices(*, xcrun_bin: str = "xcrun", timeout_seconds: int = 60) -> Tuple[List[SimulatorDevice], str]:
    """Run simctl and return ``(devices, platform)``."""
    cmd = [xcrun_bin, "simctl", "list", "devices", "available", "--json"]
    try:
        res = run_cmd(cmd, timeout_seconds=timeout_seconds)
    except subprocess.TimeoutExpired as e:
        raise ToolchainError(f"simctl timed out after {timeout_seconds}s", command=" ".join(cmd)) from e
    except FileNotFoundError as e:
        raise ToolchainError(f"{xcrun_bin} not found", command=" ".join(cmd)) from e

    if not res.ok:
        raise ToolchainError(
            f"simctl exited with code {res.exit_code}",
            command=res.command_str,
            exit_code=res.exit_code,
            stderr=res.stderr,
        )

    try:
        data = json.loads(res.stdout)
    except json.JSONDecodeError as e:
        raise ToolchainError(f"simctl returned invalid JSON: {e}", command=res.command_str) from e

    devices, platform = parse_simctl_devices(data)
    logger.info("discovered %d devices on %s", len(devices), platform)
    return devices, platform
