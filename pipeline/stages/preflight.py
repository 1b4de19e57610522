from __future__ import annotations

from pipeline.framework import ArtifactStore, PreflightAbort, RunContext, RunState, register_stage
from tools.xcode.requirements import first_unmet


@register_stage(
    "verify_requirements",
    state=RunState.VERIFYING_PRECONDITIONS,
    title="Verifying requirements",
)
def verify_requirements(ctx: RunContext, store: ArtifactStore):
    """Stop the run before any work if the host cannot run the toolchain."""
    message = first_unmet(ctx.requirements)
    if message:
        return PreflightAbort(message)
    return {"checked": [r.name for r in ctx.requirements]}
