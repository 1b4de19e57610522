"""pipeline.framework.outcome

Tagged results of a pipeline run.

The caller (the CLI) inspects the variant instead of catching a special
exception type:

* :class:`Completed` - every stage ran; artifacts were written (unless dry-run).
* :class:`PreflightAbort` - the host is missing a requirement. Expected, so it
  is reported as a short message, never a traceback.
* :class:`UnexpectedFailure` - any stage raised. Reported with full context.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Optional, Tuple, Union

from ios_dimensions.domain import Dataset

from .stage import StageResult


@dataclass(frozen=True)
class Completed:
    dataset: Optional[Dataset]
    artifacts: Dict[str, str] = field(default_factory=dict)
    stage_results: Tuple[StageResult, ...] = ()

    ok = True


@dataclass(frozen=True)
class PreflightAbort:
    message: str
    stage_results: Tuple[StageResult, ...] = ()

    ok = False


@dataclass(frozen=True)
class UnexpectedFailure:
    stage: str
    error: BaseException
    traceback: str = ""
    device: Optional[str] = None
    stage_results: Tuple[StageResult, ...] = ()

    ok = False

    @property
    def message(self) -> str:
        where = f" ({self.device})" if self.device else ""
        return f"stage '{self.stage}'{where} failed: {self.error}"


RunOutcome = Union[Completed, PreflightAbort, UnexpectedFailure]
