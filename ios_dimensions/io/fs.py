"""ios_dimensions.io.fs

Commit the output artifacts as one unit.

The site reads ``dimensions.json`` and ``logs.json`` straight from disk, so a
reader must never see a half-written file, nor a new dataset next to the
previous run's platform. :func:`write_json_files_atomic` therefore:

1. serializes every payload to an fsync'ed temp file beside its target;
2. moves the temp files into place with ``os.replace()`` only once all of
   them were written;
3. if a later move fails, puts back the files that were already replaced.

Formatting is fixed (2-space indent, sorted keys, trailing newline) so that
regenerating an unchanged dataset produces no diff.
"""

from __future__ import annotations

import json
import logging
import os
import shutil
import tempfile
from pathlib import Path
from typing import Any, List, Mapping, Optional, Tuple

logger = logging.getLogger(__name__)


def _temp_beside(target: Path, tag: str) -> Tuple[int, Path]:
    fd, name = tempfile.mkstemp(prefix=f"{target.name}.{tag}.", suffix=".tmp", dir=str(target.parent))
    return fd, Path(name)


def _stage_json(target: Path, data: Any, *, indent: int, sort_keys: bool) -> Path:
    target.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp = _temp_beside(target, "new")
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            json.dump(data, f, indent=indent, sort_keys=sort_keys, ensure_ascii=False)
            f.write("\n")
            f.flush()
            os.fsync(f.fileno())
    except Exception:
        tmp.unlink()
        raise
    return tmp


def _backup(target: Path) -> Optional[Path]:
    """Copy the current content of *target* aside, or return None if there is none."""
    if not target.is_file():
        return None
    fd, backup = _temp_beside(target, "old")
    os.close(fd)
    shutil.copy2(target, backup)
    return backup


def _unlink_quietly(path: Optional[Path]) -> None:
    if path is None:
        return
    try:
        path.unlink()
    except FileNotFoundError:
        pass


def write_json_files_atomic(
    files: Mapping[Path, Any],
    *,
    indent: int = 2,
    sort_keys: bool = True,
) -> None:
    """Write every ``path -> payload`` pair, or leave all targets as they were."""
    staged: List[Tuple[Path, Path]] = []
    committed: List[Tuple[Path, Optional[Path]]] = []

    try:
        for path, data in files.items():
            target = Path(path)
            staged.append((target, _stage_json(target, data, indent=indent, sort_keys=sort_keys)))

        for target, tmp in staged:
            backup = _backup(target)
            try:
                os.replace(tmp, target)
            except Exception:
                _unlink_quietly(backup)
                raise
            committed.append((target, backup))
    except Exception:
        for target, backup in reversed(committed):
            logger.warning("restoring %s after a failed commit", target)
            if backup is None:
                _unlink_quietly(target)
            else:
                os.replace(backup, target)
        raise
    finally:
        for _target, tmp in staged:
            _unlink_quietly(tmp)
        for _target, backup in committed:
            _unlink_quietly(backup)
