"""ios_dimensions.domain.hashing

Stable ordering key for :class:`~ios_dimensions.domain.dimensions.Dimensions`.

Python's built-in ``hash()`` is salted per process (``PYTHONHASHSEED``), so it
cannot order an artifact that must be byte-identical across runs. Instead the
record is encoded as canonical JSON (sorted keys, compact separators) and the
first 8 bytes of its SHA-256 digest are read as an unsigned integer.

The key orders records only. Deduplication compares records structurally.
"""

from __future__ import annotations

import hashlib
import json
from typing import Tuple

from .dimensions import Dimensions


def canonical_json(record: Dimensions) -> str:
    return json.dumps(record.to_dict(), sort_keys=True, separators=(",", ":"), ensure_ascii=False)


def hash_key(record: Dimensions) -> int:
    """Return a 64-bit content hash of *record*."""
    digest = hashlib.sha256(canonical_json(record).encode("utf-8")).digest()
    return int.from_bytes(digest[:8], "big")


def sort_key(record: Dimensions) -> Tuple[int, str]:
    """Hash first; the canonical encoding breaks ties between colliding records."""
    return hash_key(record), canonical_json(record)
