from __future__ import annotations

from typing import Any, Dict

from ios_dimensions.domain import Dataset
from pipeline.framework import ArtifactStore, RunContext, RunState, StoreKeys, register_stage


@register_stage(
    "sort_dimensions",
    state=RunState.SORTING,
    title="Sorting dimensions",
    requires=[StoreKeys.ASSEMBLER, StoreKeys.PLATFORM],
    produces=[StoreKeys.DATASET],
)
def sort_dimensions(ctx: RunContext, store: ArtifactStore) -> Dict[str, Any]:
    assembler = store.require(StoreKeys.ASSEMBLER)
    dataset = Dataset(records=assembler.sorted_records(), platform=store.require(StoreKeys.PLATFORM))
    store.put(StoreKeys.DATASET, dataset)
    return {"records": len(dataset.records)}
