"""pipeline.framework

The small task runner behind the generator.

- **RunContext (ctx)**: immutable job packet (toolchain, paths, knobs)
- **ArtifactStore (store)**: scratchpad shared by the stages of one run
- **Stages**: registered functions, one per :class:`RunState`
- **Pipelines**: ordered stage lists
- **Outcomes**: ``Completed`` / ``PreflightAbort`` / ``UnexpectedFailure``
"""

from .context import RunContext
from .outcome import Completed, PreflightAbort, RunOutcome, UnexpectedFailure
from .pipelines import PIPELINES
from .progress import ConsoleObserver, NullObserver, ProgressObserver, RecordingObserver
from .registry import StageDefinition, get_stage, register_stage
from .runner import check_stage_order, run_pipeline
from .stage import StageFunc, StageResult
from .states import RunState
from .store import ArtifactStore, StoreKeys

__all__ = [
    "ArtifactStore",
    "Completed",
    "ConsoleObserver",
    "NullObserver",
    "PIPELINES",
    "PreflightAbort",
    "ProgressObserver",
    "RecordingObserver",
    "RunContext",
    "RunOutcome",
    "RunState",
    "StageDefinition",
    "StageFunc",
    "StageResult",
    "StoreKeys",
    "UnexpectedFailure",
    "check_stage_order",
    "get_stage",
    "register_stage",
    "run_pipeline",
]
