"""pipeline.stages.persist

The only stage that writes durable output.

Both artifacts are replaced wholesale and together: either both files hold
this run, or both still hold the previous one. There is no merge with the
previous dataset.
"""

from __future__ import annotations

from typing import Any, Dict

from ios_dimensions.domain import Dataset
from ios_dimensions.io.fs import write_json_files_atomic
from pipeline.framework import ArtifactStore, RunContext, RunState, StoreKeys, register_stage


@register_stage(
    "write_artifacts",
    state=RunState.PERSISTING,
    title="Generating files",
    requires=[StoreKeys.DATASET],
)
def write_artifacts(ctx: RunContext, store: ArtifactStore) -> Dict[str, Any]:
    dataset: Dataset = store.require(StoreKeys.DATASET)

    if ctx.dry_run:
        store.add_warning(f"dry-run: {ctx.dimensions_path} and {ctx.logs_path} left untouched")
        return {"written": False}

    write_json_files_atomic(
        {
            ctx.dimensions_path: dataset.to_json_list(),
            ctx.logs_path: dataset.descriptor(),
        }
    )
    store.add_artifact("dimensions", ctx.dimensions_path)
    store.add_artifact("logs", ctx.logs_path)

    return {"written": True, "records": len(dataset.records)}
