from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional, Sequence, Tuple

from pipeline.core import DIMENSIONS_FILENAME, LOGS_FILENAME
from tools.xcode.requirements import Requirement, default_requirements
from tools.xcode.toolchain import Toolchain

from .progress import NullObserver, ProgressObserver


@dataclass(frozen=True)
class RunContext:
    """Immutable job packet for one generation run.

    Attributes
    ----------
    toolchain:
        Runs simctl/xcodebuild/xcparse. Tests pass a fake.
    output_dir:
        Directory receiving ``dimensions.json`` and ``logs.json``.
    scratch_root:
        Parent of the per-device scratch directories. ``None`` means the
        system temp dir.
    devices:
        Optional simulator names to measure. Empty means every discovered
        handheld device.
    requirements:
        Host checks run by the preflight stage.
    dry_run:
        Measure everything but do not write the artifacts.
    observer:
        Receives state transitions and per-device steps.
    """

    toolchain: Toolchain
    output_dir: Path
    scratch_root: Optional[Path] = None
    devices: Tuple[str, ...] = ()
    requirements: Tuple[Requirement, ...] = ()
    dry_run: bool = False
    observer: ProgressObserver = field(default_factory=NullObserver)

    @staticmethod
    def build(
        *,
        toolchain: Toolchain,
        output_dir: Path,
        scratch_root: Optional[Path] = None,
        devices: Sequence[str] | None = None,
        requirements: Sequence[Requirement] | None = None,
        dry_run: bool = False,
        observer: Optional[ProgressObserver] = None,
    ) -> "RunContext":
        # Keep order stable, drop obvious empties and repeats.
        names: list[str] = []
        for d in devices or ():
            s = str(d).strip()
            if s and s not in names:
                names.append(s)

        return RunContext(
            toolchain=toolchain,
            output_dir=Path(output_dir),
            scratch_root=Path(scratch_root) if scratch_root is not None else None,
            devices=tuple(names),
            requirements=tuple(default_requirements() if requirements is None else requirements),
            dry_run=bool(dry_run),
            observer=observer or NullObserver(),
        )

    @property
    def dimensions_path(self) -> Path:
        return self.output_dir / DIMENSIONS_FILENAME

    @property
    def logs_path(self) -> Path:
        return self.output_dir / LOGS_FILENAME
