"""pipeline.framework.pipelines

Pipeline definitions (ordered stage lists).
"""

from __future__ import annotations

from typing import Dict, List

PIPELINES: Dict[str, List[str]] = {
    # Full regeneration of the dataset.
    "generate": [
        "verify_requirements",
        "discover_devices",
        "measure_devices",
        "sort_dimensions",
        "write_artifacts",
    ],
    # Used by --list-devices.
    "discover": [
        "verify_requirements",
        "discover_devices",
    ],
}
