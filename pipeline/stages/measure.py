"""pipeline.stages.measure

Measure every discovered device and feed the records to the assembler.

Devices run one after another: ``xcodebuild test`` boots a simulator and is
too heavy to run in parallel on one machine. The first device that fails
aborts the whole run, because a dataset silently missing a device is worse
than no new dataset at all. Nothing has been written at that point.
"""

from __future__ import annotations

import logging
from typing import Any, Dict

from ios_dimensions.errors import DeviceMeasurementError, DimensionsError
from pipeline.assembler import DatasetAssembler
from pipeline.framework import ArtifactStore, RunContext, RunState, StoreKeys, register_stage
from pipeline.measurer import DeviceMeasurer

logger = logging.getLogger(__name__)


@register_stage(
    "measure_devices",
    state=RunState.MEASURING_DEVICES,
    title="Gathering dimensions",
    requires=[StoreKeys.DEVICES],
    produces=[StoreKeys.ASSEMBLER],
)
def measure_devices(ctx: RunContext, store: ArtifactStore) -> Dict[str, Any]:
    devices = store.require(StoreKeys.DEVICES)
    measurer = DeviceMeasurer(
        ctx.toolchain,
        scratch_root=ctx.scratch_root,
        on_step=ctx.observer.on_device,
    )
    assembler = DatasetAssembler()
    duplicates: list[str] = []

    for device in devices:
        try:
            record = measurer.measure(device.name)
        except DimensionsError as e:
            raise DeviceMeasurementError(device.name, e) from e

        if not assembler.add(record):
            duplicates.append(device.name)
            logger.info("%s has the same dimensions as an earlier device; skipped", device.name)

    store.put(StoreKeys.ASSEMBLER, assembler)
    return {"measured": len(devices), "unique": len(assembler), "duplicates": duplicates}
