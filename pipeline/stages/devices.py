from __future__ import annotations

import logging
from typing import Any, Dict

from pipeline.framework import ArtifactStore, RunContext, RunState, StoreKeys, register_stage

logger = logging.getLogger(__name__)


@register_stage(
    "discover_devices",
    state=RunState.DISCOVERING_DEVICES,
    title="Gathering devices",
    produces=[StoreKeys.DEVICES, StoreKeys.PLATFORM],
)
def discover_devices(ctx: RunContext, store: ArtifactStore) -> Dict[str, Any]:
    devices, platform = ctx.toolchain.discover_devices()

    if ctx.devices:
        by_name = {d.name: d for d in devices}
        unknown = [n for n in ctx.devices if n not in by_name]
        if unknown:
            raise ValueError(
                f"Unknown simulator(s) for {platform}: {unknown}. "
                f"Available: {sorted(by_name)}"
            )
        devices = [by_name[n] for n in ctx.devices]

    if not devices:
        raise ValueError(f"No handheld simulators available for {platform}")

    store.put(StoreKeys.DEVICES, list(devices))
    store.put(StoreKeys.PLATFORM, platform)
    logger.info("measuring %d devices on %s", len(devices), platform)
    return {"platform": platform, "devices": [d.name for d in devices]}
