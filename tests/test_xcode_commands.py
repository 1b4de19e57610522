from __future__ import annotations

import os
import subprocess
from pathlib import Path

import pytest

from ios_dimensions.errors import MissingArtifactError, ToolchainError
from tools.core_cmd import CmdResult
from tools.xcode import xcodebuild, xcparse
from tools.xcode.xcodebuild import build_test_command, find_result_bundle, run_build_test
from tools.xcode.xcparse import extract_attachments, list_attachments


def test_build_test_command_targets_one_simulator(tmp_path: Path) -> None:
    cmd = build_test_command(
        xcodebuild_bin="xcodebuild",
        project=Path("./src/dimensions/dimensions.xcodeproj"),
        scheme="dimensions",
        derived_data=tmp_path,
        device_name="iPhone 14",
    )
    assert cmd[:4] == ["xcodebuild", "build", "test", "-quiet"]
    assert cmd[cmd.index("-scheme") + 1] == "dimensions"
    assert cmd[cmd.index("-derivedDataPath") + 1] == str(tmp_path)
    assert cmd[cmd.index("-destination") + 1] == "platform=iOS Simulator,name=iPhone 14"


def test_non_zero_exit_raises_toolchain_error(tmp_path: Path, monkeypatch) -> None:
    monkeypatch.setattr(
        xcodebuild,
        "run_cmd",
        lambda cmd, timeout_seconds=0: CmdResult(65, 1.0, " ".join(cmd), "", "** TEST FAILED **"),
    )
    with pytest.raises(ToolchainError) as exc:
        run_build_test(
            xcodebuild_bin="xcodebuild",
            project=Path("p.xcodeproj"),
            scheme="dimensions",
            derived_data=tmp_path,
            device_name="iPhone 14",
        )
    assert exc.value.exit_code == 65
    assert "TEST FAILED" in str(exc.value)


def test_timeout_raises_toolchain_error(tmp_path: Path, monkeypatch) -> None:
    def _timeout(cmd, timeout_seconds=0):
        raise subprocess.TimeoutExpired(cmd, timeout_seconds)

    monkeypatch.setattr(xcodebuild, "run_cmd", _timeout)
    with pytest.raises(ToolchainError, match="timed out"):
        run_build_test(
            xcodebuild_bin="xcodebuild",
            project=Path("p.xcodeproj"),
            scheme="dimensions",
            derived_data=tmp_path,
            device_name="iPhone 14",
            timeout_seconds=5,
        )


def test_find_result_bundle_returns_most_recent(tmp_path: Path) -> None:
    logs = tmp_path / "Logs" / "Test"
    old = logs / "Test-dimensions-2024.01.01_10-00-00.xcresult"
    new = logs / "Test-dimensions-2024.01.02_10-00-00.xcresult"
    old.mkdir(parents=True)
    new.mkdir()
    (logs / "LogStoreManifest.plist").write_text("")
    os.utime(old, (1_000, 1_000))
    os.utime(new, (2_000, 2_000))

    assert find_result_bundle(tmp_path) == new


def test_find_result_bundle_without_bundle_raises(tmp_path: Path) -> None:
    with pytest.raises(MissingArtifactError):
        find_result_bundle(tmp_path)


def test_list_attachments_only_returns_txt_files(tmp_path: Path) -> None:
    (tmp_path / "b.txt").write_text("{}")
    (tmp_path / "a.txt").write_text("{}")
    (tmp_path / "screenshot.png").write_bytes(b"")
    (tmp_path / "Logs").mkdir()

    assert [p.name for p in list_attachments(tmp_path)] == ["a.txt", "b.txt"]


def test_list_attachments_empty_raises(tmp_path: Path) -> None:
    with pytest.raises(MissingArtifactError):
        list_attachments(tmp_path)


def test_extract_attachments_failure_raises(tmp_path: Path, monkeypatch) -> None:
    monkeypatch.setattr(
        xcparse,
        "run_cmd",
        lambda cmd, timeout_seconds=0: CmdResult(1, 0.1, " ".join(cmd), "", "Error: bundle not found"),
    )
    with pytest.raises(ToolchainError, match="bundle not found"):
        extract_attachments(xcparse_bin="xcparse", bundle=tmp_path / "x.xcresult", dest=tmp_path)
