from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Callable, Dict, Optional, Union

from .context import RunContext
from .store import ArtifactStore

if TYPE_CHECKING:
    from .outcome import PreflightAbort

# A stage returns a summary dict (or None), or a PreflightAbort to stop the run.
StageFunc = Callable[[RunContext, ArtifactStore], Union[Optional[Dict[str, Any]], "PreflightAbort"]]


@dataclass(frozen=True)
class StageResult:
    """Execution record for one stage."""

    name: str
    ok: bool
    started_at: str
    finished_at: str

    summary: Dict[str, Any] = field(default_factory=dict)
    error: Optional[str] = None
