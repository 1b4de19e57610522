from __future__ import annotations

import logging
import traceback
from dataclasses import replace
from datetime import datetime, timezone
from typing import List, Optional, Sequence, Set

from .context import RunContext
from .outcome import Completed, PreflightAbort, RunOutcome, UnexpectedFailure
from .pipelines import PIPELINES
from .registry import StageDefinition, get_stage
from .stage import StageResult
from .states import RunState
from .store import ArtifactStore, StoreKeys

logger = logging.getLogger(__name__)


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


def check_stage_order(stage_defs: Sequence[StageDefinition], *, initial: Set[str] = frozenset()) -> None:
    """Raise if a stage requires a key that no earlier stage produces."""
    available: Set[str] = set(initial)
    for sd in stage_defs:
        missing = [k for k in sd.requires if k not in available]
        if missing:
            raise RuntimeError(
                f"deps: stage '{sd.name}' requires keys not produced by an earlier stage: {missing}"
            )
        available.update(sd.produces)


def run_pipeline(
    ctx: RunContext,
    *,
    stage_names: Optional[Sequence[str]] = None,
    store: Optional[ArtifactStore] = None,
) -> RunOutcome:
    """Run an ordered list of registered stages and return a tagged outcome.

    The first failing stage ends the run; later stages (persistence included)
    never run after a failure. The observer only learns which stage failed;
    the details travel in the returned outcome.
    """
    store = store or ArtifactStore()
    observer = ctx.observer
    results: List[StageResult] = []

    stage_defs = [get_stage(n) for n in (stage_names or PIPELINES["generate"])]
    check_stage_order(stage_defs, initial=set(store.data.keys()))

    for sd in stage_defs:
        observer.on_state(sd.state, sd.title)
        started = _now_iso()
        try:
            ret = sd.func(ctx, store)
        except Exception as e:
            tb = traceback.format_exc(limit=50)
            results.append(
                StageResult(name=sd.name, ok=False, started_at=started, finished_at=_now_iso(), error=f"{e}")
            )
            failure = UnexpectedFailure(
                stage=sd.name,
                error=e,
                traceback=tb,
                device=getattr(e, "device_name", None),
                stage_results=tuple(results),
            )
            logger.debug("stage %s failed:\n%s", sd.name, tb)
            observer.on_state(RunState.ABORTED, f"{sd.title} failed")
            return failure

        if isinstance(ret, PreflightAbort):
            results.append(
                StageResult(name=sd.name, ok=False, started_at=started, finished_at=_now_iso(), error=ret.message)
            )
            observer.on_state(RunState.ABORTED, f"{sd.title} failed")
            return replace(ret, stage_results=tuple(results))

        results.append(
            StageResult(
                name=sd.name,
                ok=True,
                started_at=started,
                finished_at=_now_iso(),
                summary=dict(ret or {}),
            )
        )

    for w in store.warnings:
        observer.on_warning(w)
    observer.on_state(RunState.DONE, "Done")
    return Completed(
        dataset=store.get(StoreKeys.DATASET),
        artifacts=store.artifact_paths(),
        stage_results=tuple(results),
    )
