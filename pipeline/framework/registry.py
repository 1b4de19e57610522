from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Sequence, Tuple

from .stage import StageFunc
from .states import RunState


@dataclass(frozen=True)
class StageDefinition:
    """Metadata describing a registered stage.

    ``requires`` and ``produces`` name :class:`ArtifactStore` keys. The runner
    uses them to reject a pipeline whose stages are out of order before any
    stage runs.
    """

    name: str
    func: StageFunc
    state: RunState
    title: str

    requires: Tuple[str, ...] = ()
    produces: Tuple[str, ...] = ()


_STAGE_REGISTRY: Dict[str, StageDefinition] = {}


def register_stage(
    name: str,
    *,
    state: RunState,
    title: str,
    requires: Sequence[str] | None = None,
    produces: Sequence[str] | None = None,
):
    """Decorator to register a stage."""

    def _decorator(fn: StageFunc) -> StageFunc:
        _STAGE_REGISTRY[name] = StageDefinition(
            name=name,
            func=fn,
            state=state,
            title=title,
            requires=tuple(requires or ()),
            produces=tuple(produces or ()),
        )
        return fn

    return _decorator


def get_stage(name: str) -> StageDefinition:
    if name not in _STAGE_REGISTRY:
        raise KeyError(f"Unknown stage: {name}")
    return _STAGE_REGISTRY[name]
