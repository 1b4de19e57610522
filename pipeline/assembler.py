"""pipeline.assembler

Deduplicate and order per-device records.

Two devices often share geometry (e.g. an iPhone and its successor), so the
same record can arrive more than once. Dedup compares whole records with
``==`` (frozen dataclasses compare deeply) and keeps the first one seen.

That is O(n^2) over the accumulated records, which is fine for a catalog of a
few dozen simulators. The final order comes from
:func:`~ios_dimensions.domain.hashing.sort_key` alone, so discovery order and
completion order never leak into the artifact.
"""

from __future__ import annotations

from typing import Iterable, List, Tuple

from ios_dimensions.domain import Dimensions, sort_key


class DatasetAssembler:
    def __init__(self) -> None:
        self._records: List[Dimensions] = []

    def __len__(self) -> int:
        return len(self._records)

    def add(self, record: Dimensions) -> bool:
        """Append *record* unless an equal one exists. Returns True if appended."""
        if any(existing == record for existing in self._records):
            return False
        self._records.append(record)
        return True

    def records(self) -> Tuple[Dimensions, ...]:
        """Accumulated records in arrival order."""
        return tuple(self._records)

    def sorted_records(self) -> Tuple[Dimensions, ...]:
        return tuple(sorted(self._records, key=sort_key))


def assemble(records: Iterable[Dimensions]) -> Tuple[Dimensions, ...]:
    assembler = DatasetAssembler()
    for r in records:
        assembler.add(r)
    return assembler.sorted_records()
