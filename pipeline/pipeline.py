"""pipeline.pipeline

Single front door for callers (CLI, scripts, CI).

:class:`DimensionsPipeline` turns :class:`~pipeline.config.Settings` into a
:class:`~pipeline.framework.RunContext` and runs one of the registered
pipelines. Building the toolchain is injectable so tests can run the whole
flow against a fake.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Optional, Sequence

import pipeline.stages  # noqa: F401  (registers the builtin stages)
from pipeline.config import Settings
from pipeline.framework import PIPELINES, ProgressObserver, RunContext, RunOutcome, run_pipeline
from tools.xcode.requirements import Requirement
from tools.xcode.toolchain import Toolchain, XcodeToolchain


def xcode_toolchain(settings: Settings) -> Toolchain:
    return XcodeToolchain.from_host(
        project=settings.project,
        scheme=settings.scheme,
        build_timeout_seconds=settings.build_timeout_seconds,
        extract_timeout_seconds=settings.extract_timeout_seconds,
    )


class DimensionsPipeline:
    """High-level facade over the generator.

    Callers should build it via :func:`pipeline.wiring.build_pipeline`.
    """

    def __init__(
        self,
        settings: Settings,
        *,
        toolchain_factory: Callable[[Settings], Toolchain] = xcode_toolchain,
        requirements: Optional[Sequence[Requirement]] = None,
    ) -> None:
        self.settings = settings
        self._toolchain_factory = toolchain_factory
        self._requirements = requirements

    def _context(
        self,
        *,
        devices: Sequence[str] = (),
        dry_run: bool = False,
        observer: Optional[ProgressObserver] = None,
    ) -> RunContext:
        return RunContext.build(
            toolchain=self._toolchain_factory(self.settings),
            output_dir=self.settings.output_dir,
            scratch_root=self.settings.scratch_root,
            devices=devices,
            requirements=self._requirements,
            dry_run=dry_run,
            observer=observer,
        )

    def generate(
        self,
        *,
        devices: Sequence[str] = (),
        dry_run: bool = False,
        observer: Optional[ProgressObserver] = None,
    ) -> RunOutcome:
        """Regenerate ``dimensions.json`` and ``logs.json`` from scratch."""
        ctx = self._context(devices=devices, dry_run=dry_run, observer=observer)
        return run_pipeline(ctx, stage_names=PIPELINES["generate"])

    def discover(
        self,
        *,
        devices: Sequence[str] = (),
        observer: Optional[ProgressObserver] = None,
    ) -> RunOutcome:
        """Run preflight and discovery only (nothing is built or written)."""
        ctx = self._context(devices=devices, observer=observer)
        return run_pipeline(ctx, stage_names=PIPELINES["discover"])
