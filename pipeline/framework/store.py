from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict


class StoreKeys:
    """Keys stages use to hand results to later stages."""

    DEVICES = "devices"
    PLATFORM = "platform"
    ASSEMBLER = "assembler"
    DATASET = "dataset"


@dataclass
class ArtifactStore:
    """In-memory scratchpad shared by the stages of one run.

    Stages read inputs from ctx, hand intermediate results to later stages
    through ``data``, and record files they wrote in ``artifacts``.
    """

    data: Dict[str, Any] = field(default_factory=dict)

    # Output artifacts written to disk (name -> path)
    artifacts: Dict[str, Path] = field(default_factory=dict)

    warnings: list[str] = field(default_factory=list)

    def get(self, key: str, default: Any = None) -> Any:
        return self.data.get(key, default)

    def put(self, key: str, value: Any) -> None:
        self.data[key] = value

    def require(self, key: str) -> Any:
        if key not in self.data:
            raise KeyError(f"Required value missing from store: {key}")
        return self.data[key]

    def add_artifact(self, name: str, path: Path) -> None:
        self.artifacts[name] = Path(path)

    def add_warning(self, message: str) -> None:
        self.warnings.append(str(message))

    def artifact_paths(self) -> Dict[str, str]:
        return {k: str(v) for k, v in self.artifacts.items()}
