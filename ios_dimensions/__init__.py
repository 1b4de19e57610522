"""ios_dimensions

Core package for the device dimensions dataset.

This package owns the pieces every other part of the repository agrees on:

* domain types (the canonical shape of a measured device)
* the error taxonomy raised while measuring
* IO rules for the output artifacts (atomic, stable JSON)

The ``tools`` and ``pipeline`` packages build on top of it; it must never
import from them.
"""

from __future__ import annotations

__version__ = "1.0.0"
