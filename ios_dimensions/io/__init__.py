"""ios_dimensions.io

Filesystem helpers for the output artifacts.
"""

from __future__ import annotations

from .fs import write_json_files_atomic

__all__ = [
    "write_json_files_atomic",
]
