from __future__ import annotations

import json
from pathlib import Path

import pytest
from conftest import FakeToolchain, make_attachment, make_pair

from ios_dimensions.errors import DeviceMeasurementError, IncompleteRecordError, ToolchainError
from pipeline.config import Settings
from pipeline.framework import (
    PIPELINES,
    ArtifactStore,
    Completed,
    PreflightAbort,
    RecordingObserver,
    RunContext,
    RunState,
    UnexpectedFailure,
    check_stage_order,
    get_stage,
    run_pipeline,
)
from pipeline.pipeline import DimensionsPipeline
from tools.xcode.requirements import Requirement


def _ok_requirements():
    return [Requirement(name="host", check=lambda: True, message="unused")]


def _pipeline(tmp_path: Path, toolchain: FakeToolchain, requirements=None) -> DimensionsPipeline:
    settings = Settings(output_dir=tmp_path / "data", scratch_root=tmp_path / "scratch")
    return DimensionsPipeline(
        settings,
        toolchain_factory=lambda _settings: toolchain,
        requirements=_ok_requirements() if requirements is None else requirements,
    )


def test_generate_writes_sorted_unique_dataset_and_platform(tmp_path: Path) -> None:
    toolchain = FakeToolchain(
        {
            "iPhone 14": make_pair(390, 844),
            "iPhone 13": make_pair(390, 844),
            "iPhone 15 Pro": make_pair(393, 852, radius=55),
            "iPad Air (5th generation)": make_pair(
                820, 1180, device="iPad", scale=2, radius=18, size_class=("regular", "regular")
            ),
        },
        platform="iOS 17.2",
    )
    observer = RecordingObserver()

    outcome = _pipeline(tmp_path, toolchain).generate(observer=observer)

    assert isinstance(outcome, Completed)
    data = json.loads((tmp_path / "data" / "dimensions.json").read_text(encoding="utf-8"))
    logs = json.loads((tmp_path / "data" / "logs.json").read_text(encoding="utf-8"))

    assert len(data) == 3
    assert logs == {"platform": "iOS 17.2"}
    assert [r.to_dict() for r in outcome.dataset.records] == data
    assert observer.state_sequence == [
        RunState.VERIFYING_PRECONDITIONS,
        RunState.DISCOVERING_DEVICES,
        RunState.MEASURING_DEVICES,
        RunState.SORTING,
        RunState.PERSISTING,
        RunState.DONE,
    ]
    assert {d for d, _ in observer.device_steps} == set(toolchain.attachments)
    assert list((tmp_path / "scratch").iterdir()) == []


def test_output_is_byte_identical_regardless_of_discovery_order(tmp_path: Path) -> None:
    devices = {
        "A": make_pair(390, 844),
        "B": make_pair(393, 852, radius=55),
        "C": make_pair(375, 667, scale=2),
    }
    first = tmp_path / "first"
    second = tmp_path / "second"
    _pipeline(first, FakeToolchain(devices)).generate()
    _pipeline(second, FakeToolchain(dict(reversed(list(devices.items()))))).generate()

    assert (first / "data" / "dimensions.json").read_bytes() == (second / "data" / "dimensions.json").read_bytes()


def test_two_devices_with_identical_attachments_yield_one_record(tmp_path: Path) -> None:
    toolchain = FakeToolchain({"iPhone 14": make_pair(), "iPhone 13": make_pair()})

    outcome = _pipeline(tmp_path, toolchain).generate()

    assert isinstance(outcome, Completed)
    assert len(outcome.dataset.records) == 1
    measure = [r for r in outcome.stage_results if r.name == "measure_devices"][0]
    assert measure.summary["duplicates"] == ["iPhone 13"]


def test_preflight_abort_leaves_existing_artifacts_untouched(tmp_path: Path) -> None:
    out = tmp_path / "data"
    out.mkdir()
    (out / "dimensions.json").write_text("previous", encoding="utf-8")
    toolchain = FakeToolchain({"iPhone 14": make_pair()})
    requirements = [
        Requirement(name="xcodebuild", check=lambda: False, message="Xcode Command Line Tools are required."),
    ]
    observer = RecordingObserver()

    outcome = _pipeline(tmp_path, toolchain, requirements).generate(observer=observer)

    assert isinstance(outcome, PreflightAbort)
    assert outcome.message == "Xcode Command Line Tools are required."
    assert (out / "dimensions.json").read_text(encoding="utf-8") == "previous"
    assert not (out / "logs.json").exists()
    assert toolchain.built == []
    assert observer.state_sequence == [RunState.VERIFYING_PRECONDITIONS, RunState.ABORTED]
    assert observer.states[-1] == (RunState.ABORTED, "Verifying requirements failed")


def test_device_failure_aborts_the_run_without_writing(tmp_path: Path) -> None:
    toolchain = FakeToolchain(
        {
            "iPhone 14": make_pair(),
            "iPhone 15": [make_attachment("portrait", width=393, height=852)],
            "iPhone 15 Pro": make_pair(393, 852, radius=55),
        }
    )

    outcome = _pipeline(tmp_path, toolchain).generate()

    assert isinstance(outcome, UnexpectedFailure)
    assert outcome.stage == "measure_devices"
    assert outcome.device == "iPhone 15"
    assert isinstance(outcome.error, DeviceMeasurementError)
    assert isinstance(outcome.error.cause, IncompleteRecordError)
    assert "iPhone 15" in outcome.message
    assert not (tmp_path / "data").exists()
    # Later devices are not attempted once the run is aborted.
    assert toolchain.built == ["iPhone 14", "iPhone 15"]
    assert all(not p.exists() for p in toolchain.scratch_dirs)


def test_failed_persist_keeps_previous_artifact_pair(tmp_path: Path) -> None:
    out = tmp_path / "data"
    out.mkdir()
    (out / "dimensions.json").write_text("previous", encoding="utf-8")
    (out / "logs.json").mkdir()

    outcome = _pipeline(tmp_path, FakeToolchain({"iPhone 14": make_pair()})).generate()

    assert isinstance(outcome, UnexpectedFailure)
    assert outcome.stage == "write_artifacts"
    assert (out / "dimensions.json").read_text(encoding="utf-8") == "previous"
    assert sorted(p.name for p in out.iterdir()) == ["dimensions.json", "logs.json"]


def test_dry_run_measures_but_writes_nothing(tmp_path: Path) -> None:
    outcome = _pipeline(tmp_path, FakeToolchain({"iPhone 14": make_pair()})).generate(dry_run=True)

    assert isinstance(outcome, Completed)
    assert len(outcome.dataset.records) == 1
    assert outcome.artifacts == {}
    assert not (tmp_path / "data").exists()


def test_device_filter_selects_and_validates_names(tmp_path: Path) -> None:
    toolchain = FakeToolchain({"iPhone 14": make_pair(), "iPhone 15 Pro": make_pair(393, 852, radius=55)})

    outcome = _pipeline(tmp_path, toolchain).generate(devices=["iPhone 15 Pro"])
    assert isinstance(outcome, Completed)
    assert toolchain.built == ["iPhone 15 Pro"]

    bad = _pipeline(tmp_path, toolchain).generate(devices=["iPhone 99"])
    assert isinstance(bad, UnexpectedFailure)
    assert bad.stage == "discover_devices"
    assert "iPhone 99" in str(bad.error)


def test_discover_pipeline_lists_devices_without_building(tmp_path: Path) -> None:
    toolchain = FakeToolchain({"iPhone 14": make_pair(), "iPad mini (6th generation)": make_pair()})

    outcome = _pipeline(tmp_path, toolchain).discover()

    assert isinstance(outcome, Completed)
    assert outcome.dataset is None
    summary = outcome.stage_results[-1].summary
    assert summary["devices"] == ["iPhone 14", "iPad mini (6th generation)"]
    assert toolchain.built == []


def test_stage_order_is_validated_before_running(tmp_path: Path) -> None:
    ctx = RunContext.build(
        toolchain=FakeToolchain({}),
        output_dir=tmp_path,
        requirements=_ok_requirements(),
    )
    with pytest.raises(RuntimeError, match="sort_dimensions"):
        run_pipeline(ctx, stage_names=["sort_dimensions", "measure_devices"], store=ArtifactStore())

    # The builtin pipelines are consistent.
    for names in PIPELINES.values():
        check_stage_order([get_stage(n) for n in names])


def test_scratch_cleanup_failure_keeps_device_and_cause(tmp_path: Path, monkeypatch) -> None:
    def _failing_rmtree(path, *args, **kwargs):
        raise PermissionError(f"busy: {path}")

    monkeypatch.setattr("pipeline.measurer.shutil.rmtree", _failing_rmtree)
    toolchain = FakeToolchain(
        {"iPhone 14": make_pair()},
        failures={"iPhone 14": ("build", ToolchainError("exit 65"))},
    )

    outcome = _pipeline(tmp_path, toolchain).generate()

    assert isinstance(outcome, UnexpectedFailure)
    assert outcome.device == "iPhone 14"
    assert isinstance(outcome.error, DeviceMeasurementError)
    assert isinstance(outcome.error.cause, ToolchainError)
    assert "exit 65" in outcome.message
