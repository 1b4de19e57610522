from __future__ import annotations

from enum import Enum


class RunState(str, Enum):
    """Lifecycle of one generation run."""

    IDLE = "idle"
    VERIFYING_PRECONDITIONS = "verifying_preconditions"
    DISCOVERING_DEVICES = "discovering_devices"
    MEASURING_DEVICES = "measuring_devices"
    SORTING = "sorting"
    PERSISTING = "persisting"
    DONE = "done"
    ABORTED = "aborted"
