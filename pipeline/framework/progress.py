"""pipeline.framework.progress

Progress observers.

The runner and the measure stage call an observer on every state transition
and every per-device step. Observers only display things; they never affect
the run.
"""

from __future__ import annotations

import sys
from dataclasses import dataclass, field
from typing import List, Optional, Protocol, TextIO, Tuple

from .states import RunState


class ProgressObserver(Protocol):
    def on_state(self, state: RunState, title: str) -> None: ...

    def on_device(self, device_name: str, step: str) -> None: ...

    def on_warning(self, message: str) -> None: ...


class NullObserver:
    def on_state(self, state: RunState, title: str) -> None:
        return None

    def on_device(self, device_name: str, step: str) -> None:
        return None

    def on_warning(self, message: str) -> None:
        return None


class ConsoleObserver:
    """Print one line per event, in the style of the rest of the CLI."""

    _ICONS = {
        RunState.DONE: "✅",
        RunState.ABORTED: "❌",
    }

    def __init__(self, stream: Optional[TextIO] = None) -> None:
        self.stream = stream or sys.stdout

    def on_state(self, state: RunState, title: str) -> None:
        icon = self._ICONS.get(state, "▶")
        print(f"{icon} {title}", file=self.stream, flush=True)

    def on_device(self, device_name: str, step: str) -> None:
        print(f"    {device_name}: {step}", file=self.stream, flush=True)

    def on_warning(self, message: str) -> None:
        print(f"⚠️  {message}", file=self.stream, flush=True)


@dataclass
class RecordingObserver:
    """Collects events in memory (used by tests)."""

    states: List[Tuple[RunState, str]] = field(default_factory=list)
    device_steps: List[Tuple[str, str]] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)

    def on_state(self, state: RunState, title: str) -> None:
        self.states.append((state, title))

    def on_device(self, device_name: str, step: str) -> None:
        self.device_steps.append((device_name, step))

    def on_warning(self, message: str) -> None:
        self.warnings.append(message)

    @property
    def state_sequence(self) -> List[RunState]:
        return [s for s, _ in self.states]
