# pipeline/core.py
from __future__ import annotations

from pathlib import Path

ROOT_DIR = Path(__file__).resolve().parents[1]

DEFAULT_PROJECT = Path("./src/dimensions/dimensions.xcodeproj")
DEFAULT_SCHEME = "dimensions"
DEFAULT_OUTPUT_DIR = Path("./src/data")

DIMENSIONS_FILENAME = "dimensions.json"
LOGS_FILENAME = "logs.json"

SCRATCH_PREFIX = "com.ios-dimensions."
