"""tools/xcode/xcparse.py

Attachment extraction via `xcparse <https://github.com/ChargePoint/xcparse>`_.

``xcparse attachments <bundle> <dest>`` copies every attachment embedded in an
``.xcresult`` bundle into *dest*. The measurement tests attach plain-text JSON,
so the files of interest end in ``.txt``.
"""

from __future__ import annotations

import logging
import subprocess
from pathlib import Path
from typing import List

from ios_dimensions.errors import MissingArtifactError, ToolchainError
from tools.core_cmd import run_cmd

logger = logging.getLogger(__name__)

ATTACHMENT_SUFFIX = ".txt"


def extract_attachments(
    *,
    xcparse_bin: str,
    bundle: Path,
    dest: Path,
    timeout_seconds: int = 0,
) -> None:
    cmd = [xcparse_bin, "attachments", str(bundle), str(dest)]
    try:
        res = run_cmd(cmd, timeout_seconds=timeout_seconds)
    except subprocess.TimeoutExpired as e:
        raise ToolchainError(f"xcparse timed out after {timeout_seconds}s", command=" ".join(cmd)) from e
    except FileNotFoundError as e:
        raise ToolchainError(f"{xcparse_bin} not found", command=" ".join(cmd)) from e

    if not res.ok:
        raise ToolchainError(
            f"xcparse exited with code {res.exit_code}: {res.stderr.strip()}",
            command=res.command_str,
            exit_code=res.exit_code,
            stderr=res.stderr,
        )


def list_attachments(dest: Path) -> List[Path]:
    """Return the extracted attachment files directly under *dest*.

    Sorted only so logs are reproducible; callers must not depend on order.
    """
    files = sorted(p for p in Path(dest).glob(f"*{ATTACHMENT_SUFFIX}") if p.is_file())
    if not files:
        raise MissingArtifactError(f"No *{ATTACHMENT_SUFFIX} attachments extracted into {dest}")
    logger.debug("extracted %d attachments into %s", len(files), dest)
    return files
