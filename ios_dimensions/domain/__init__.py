"""ios_dimensions.domain

Domain objects shared by the parser, the measurer and the assembler.
"""

from __future__ import annotations

from .dimensions import (
    LANDSCAPE,
    ORIENTATIONS,
    PORTRAIT,
    SIZE_CLASSES,
    Dataset,
    Dimensions,
    Frame,
    OrientedDimensions,
    RawAttachment,
    Screen,
    SizeClass,
)
from .hashing import canonical_json, hash_key, sort_key

__all__ = [
    "LANDSCAPE",
    "ORIENTATIONS",
    "PORTRAIT",
    "SIZE_CLASSES",
    "Dataset",
    "Dimensions",
    "Frame",
    "OrientedDimensions",
    "RawAttachment",
    "Screen",
    "SizeClass",
    "canonical_json",
    "hash_key",
    "sort_key",
]
