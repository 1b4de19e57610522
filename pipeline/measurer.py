"""pipeline.measurer

Measure one simulator device.

Per device the sequence is:

  scratch dir -> xcodebuild build test -> newest .xcresult -> xcparse
  -> parse *.txt attachments -> fold portrait/landscape -> remove scratch dir

The scratch directory is created with ``mkdtemp`` for every device, so two
measurements never share derived data, and it is removed whatever happens
after it was created.
"""

from __future__ import annotations

import logging
import shutil
import tempfile
from contextlib import contextmanager
from pathlib import Path
from typing import Callable, Iterable, Iterator, Optional

from ios_dimensions.domain import LANDSCAPE, PORTRAIT, Dimensions, RawAttachment
from ios_dimensions.errors import DimensionsError, ToolchainError
from pipeline.attachments import parse_attachment
from pipeline.core import SCRATCH_PREFIX
from tools.xcode.toolchain import Toolchain

logger = logging.getLogger(__name__)

STEP_EXTRACT = "Extracting dimensions"
STEP_PARSE = "Parsing extracted dimensions"
STEP_CLEANUP = "Cleaning up extraction cache"

StepCallback = Callable[[str, str], None]


def _no_step(_device: str, _step: str) -> None:
    return None


def _remove_scratch(path: Path) -> Optional[OSError]:
    try:
        shutil.rmtree(path)
    except OSError as e:
        logger.warning("could not remove scratch dir %s: %s", path, e)
        return e
    logger.debug("removed scratch dir %s", path)
    return None


@contextmanager
def scratch_dir(root: Optional[Path] = None) -> Iterator[Path]:
    """Yield a fresh, exclusive directory and always try to remove it afterwards.

    A cleanup failure never hides the error raised inside the block. When the
    block succeeded, it is reported as a :class:`ToolchainError`.
    """
    if root is not None:
        Path(root).mkdir(parents=True, exist_ok=True)
    path = Path(tempfile.mkdtemp(prefix=SCRATCH_PREFIX, dir=str(root) if root is not None else None))
    try:
        yield path
    except BaseException:
        _remove_scratch(path)
        raise

    error = _remove_scratch(path)
    if error is not None:
        raise ToolchainError(f"could not remove scratch dir {path}: {error}") from error


def fold_attachments(attachments: Iterable[RawAttachment], *, device_name: Optional[str] = None) -> Dimensions:
    """Fold parsed attachments into one record.

    ``device``/``scale``/``radius`` come from whichever attachment was folded
    last. Disagreement between orientations is logged, not rejected.
    """
    device = scale = radius = None
    portrait = landscape = None

    for a in attachments:
        if device is not None and (a.device, a.scale, a.radius) != (device, scale, radius):
            logger.warning(
                "%s: attachments disagree (%s/%s/%s vs %s/%s/%s); keeping the last one",
                device_name or "device",
                device,
                scale,
                radius,
                a.device,
                a.scale,
                a.radius,
            )
        device, scale, radius = a.device, a.scale, a.radius

        if a.orientation == PORTRAIT:
            portrait = a.dimensions
        elif a.orientation == LANDSCAPE:
            landscape = a.dimensions

    return Dimensions.from_slots(
        device=device,
        scale=scale,
        radius=radius,
        portrait=portrait,
        landscape=landscape,
        device_name=device_name,
    )


class DeviceMeasurer:
    """Drive the toolchain for one device at a time."""

    def __init__(
        self,
        toolchain: Toolchain,
        *,
        scratch_root: Optional[Path] = None,
        on_step: StepCallback = _no_step,
    ) -> None:
        self.toolchain = toolchain
        self.scratch_root = scratch_root
        self.on_step = on_step

    def measure(self, device_name: str) -> Dimensions:
        """Return the Dimensions record for *device_name*.

        Raises a :class:`~ios_dimensions.errors.DimensionsError` subclass on
        failure; the scratch directory is gone either way.
        """
        with scratch_dir(self.scratch_root) as scratch:
            try:
                self.on_step(device_name, STEP_EXTRACT)
                self.toolchain.build_and_test(device_name, scratch)

                self.on_step(device_name, STEP_PARSE)
                bundle = self.toolchain.locate_result_bundle(scratch)
                files = self.toolchain.extract_attachments(bundle, scratch)
                record = fold_attachments(
                    (parse_attachment(f) for f in files),
                    device_name=device_name,
                )
            except DimensionsError:
                raise
            except OSError as e:
                # Filesystem trouble inside the scratch dir counts as a toolchain failure.
                raise ToolchainError(f"{device_name}: {e}") from e
            finally:
                self.on_step(device_name, STEP_CLEANUP)

        logger.info("measured %s: %s @%sx radius=%s", device_name, record.device, record.scale, record.radius)
        return record
