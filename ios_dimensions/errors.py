"""ios_dimensions.errors

Errors raised while measuring devices.

Environment problems (wrong host, missing Xcode/xcparse) are *not*
part of this hierarchy: the preflight stage reports them as a
:class:`~pipeline.framework.outcome.PreflightAbort` value instead.
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional, Sequence


class DimensionsError(Exception):
    """Base class for all measurement errors."""


class ToolchainError(DimensionsError):
    """An external tool exited non-zero, timed out, or could not be started."""

    def __init__(
        self,
        message: str,
        *,
        command: Optional[str] = None,
        exit_code: Optional[int] = None,
        stderr: str = "",
    ) -> None:
        super().__init__(message)
        self.command = command
        self.exit_code = exit_code
        self.stderr = stderr


class MissingArtifactError(DimensionsError):
    """The toolchain succeeded but an expected output is missing."""


class MalformedAttachmentError(DimensionsError):
    """An attachment could not be decoded into a RawAttachment."""

    def __init__(self, message: str, *, path: Optional[Path] = None) -> None:
        if path is not None:
            message = f"{path}: {message}"
        super().__init__(message)
        self.path = path


class IncompleteRecordError(DimensionsError):
    """A record was folded without both orientations."""

    def __init__(self, missing: Sequence[str], *, device: Optional[str] = None) -> None:
        self.missing = tuple(missing)
        self.device = device
        where = f" for {device}" if device else ""
        super().__init__(f"Missing {', '.join(self.missing)} attachment{where}")


class DeviceMeasurementError(DimensionsError):
    """Wraps a per-device failure with the simulator name it happened on."""

    def __init__(self, device_name: str, cause: BaseException) -> None:
        super().__init__(f"{device_name}: {cause}")
        self.device_name = device_name
        self.cause = cause
