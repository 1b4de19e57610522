"""pipeline.attachments

Decode one extracted attachment file into a :class:`RawAttachment`.

This is the only place that turns filesystem bytes into domain objects, so it
also owns the error translation: anything wrong with the file surfaces as
:class:`MalformedAttachmentError` (or :class:`MissingArtifactError` when the
file is gone).
"""

from __future__ import annotations

import json
from pathlib import Path

from ios_dimensions.domain import RawAttachment
from ios_dimensions.errors import MalformedAttachmentError, MissingArtifactError


def parse_attachment(path: Path) -> RawAttachment:
    p = Path(path)
    try:
        text = p.read_text(encoding="utf-8")
    except FileNotFoundError as e:
        raise MissingArtifactError(f"Attachment not found: {p}") from e
    except (OSError, UnicodeDecodeError) as e:
        raise MalformedAttachmentError(f"unreadable: {e}", path=p) from e

    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise MalformedAttachmentError(f"invalid JSON: {e}", path=p) from e

    try:
        return RawAttachment.from_dict(data)
    except ValueError as e:
        raise MalformedAttachmentError(str(e), path=p) from e
