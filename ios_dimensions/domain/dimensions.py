"""ios_dimensions.domain.dimensions

Canonical representation of measured device geometry.

The UI test target writes one JSON attachment per orientation. Those are read
into :class:`RawAttachment` objects and folded into one :class:`Dimensions`
record per device, which is the unit of the output dataset.

Every type here is a frozen dataclass, so ``==`` is a deep structural
comparison. Deduplication relies on that.

JSON keys use camelCase (``safeArea``, ``sizeClass``...) because that is what
the attachment producer writes and what the site consumes.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional, Tuple, Union

from ios_dimensions.errors import IncompleteRecordError

Number = Union[int, float]

PORTRAIT = "portrait"
LANDSCAPE = "landscape"
ORIENTATIONS: Tuple[str, ...] = (PORTRAIT, LANDSCAPE)

SIZE_CLASSES: Tuple[str, ...] = ("compact", "regular", "unspecified")


def _require(d: Mapping[str, Any], key: str, where: str) -> Any:
    if not isinstance(d, Mapping):
        raise ValueError(f"{where}: expected an object, got {type(d).__name__}")
    if key not in d:
        raise ValueError(f"{where}: missing field '{key}'")
    return d[key]


def _number(v: Any, where: str, *, positive: bool = False) -> Number:
    # bool is a subclass of int; treat as invalid.
    if isinstance(v, bool) or not isinstance(v, (int, float)):
        raise ValueError(f"{where}: expected a number, got {v!r}")
    if v != v or v in (float("inf"), float("-inf")):
        raise ValueError(f"{where}: expected a finite number, got {v!r}")
    if positive and v <= 0:
        raise ValueError(f"{where}: expected a positive number, got {v!r}")
    if not positive and v < 0:
        raise ValueError(f"{where}: expected a non-negative number, got {v!r}")
    # Keep whole numbers as ints so serialized output reads 390, not 390.0.
    if isinstance(v, float) and v.is_integer():
        return int(v)
    return v


def _choice(v: Any, choices: Tuple[str, ...], where: str) -> str:
    if not isinstance(v, str) or v not in choices:
        raise ValueError(f"{where}: expected one of {list(choices)}, got {v!r}")
    return v


@dataclass(frozen=True)
class Frame:
    """Inset quadruple in points."""

    top: Number
    right: Number
    bottom: Number
    left: Number

    @classmethod
    def from_dict(cls, d: Mapping[str, Any], where: str = "frame") -> "Frame":
        return cls(
            top=_number(_require(d, "top", where), f"{where}.top"),
            right=_number(_require(d, "right", where), f"{where}.right"),
            bottom=_number(_require(d, "bottom", where), f"{where}.bottom"),
            left=_number(_require(d, "left", where), f"{where}.left"),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {"top": self.top, "right": self.right, "bottom": self.bottom, "left": self.left}


@dataclass(frozen=True)
class Screen:
    width: Number
    height: Number

    @classmethod
    def from_dict(cls, d: Mapping[str, Any], where: str = "screen") -> "Screen":
        return cls(
            width=_number(_require(d, "width", where), f"{where}.width", positive=True),
            height=_number(_require(d, "height", where), f"{where}.height", positive=True),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {"width": self.width, "height": self.height}


@dataclass(frozen=True)
class SizeClass:
    """Horizontal/vertical size class pair (compact, regular or unspecified)."""

    horizontal: str
    vertical: str

    @classmethod
    def from_dict(cls, d: Mapping[str, Any], where: str = "sizeClass") -> "SizeClass":
        return cls(
            horizontal=_choice(_require(d, "horizontal", where), SIZE_CLASSES, f"{where}.horizontal"),
            vertical=_choice(_require(d, "vertical", where), SIZE_CLASSES, f"{where}.vertical"),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {"horizontal": self.horizontal, "vertical": self.vertical}


@dataclass(frozen=True)
class OrientedDimensions:
    """Geometry of one orientation.

    The three frames are progressively narrower insets: the safe area, then
    the layout margins, then the readable content guide.
    """

    screen: Screen
    safe_area: Frame
    layout_margins: Frame
    readable_content: Frame
    size_class: SizeClass

    @classmethod
    def from_dict(cls, d: Mapping[str, Any], where: str = "dimensions") -> "OrientedDimensions":
        return cls(
            screen=Screen.from_dict(_require(d, "screen", where), f"{where}.screen"),
            safe_area=Frame.from_dict(_require(d, "safeArea", where), f"{where}.safeArea"),
            layout_margins=Frame.from_dict(_require(d, "layoutMargins", where), f"{where}.layoutMargins"),
            readable_content=Frame.from_dict(
                _require(d, "readableContent", where), f"{where}.readableContent"
            ),
            size_class=SizeClass.from_dict(_require(d, "sizeClass", where), f"{where}.sizeClass"),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "screen": self.screen.to_dict(),
            "safeArea": self.safe_area.to_dict(),
            "layoutMargins": self.layout_margins.to_dict(),
            "readableContent": self.readable_content.to_dict(),
            "sizeClass": self.size_class.to_dict(),
        }


@dataclass(frozen=True)
class RawAttachment:
    """One decoded attachment: a single orientation of a single device run."""

    orientation: str
    device: str
    scale: Number
    radius: Number
    dimensions: OrientedDimensions

    @classmethod
    def from_dict(cls, d: Mapping[str, Any]) -> "RawAttachment":
        """Decode the flat attachment object.

        The producer writes ``orientation``/``device``/``scale``/``radius``
        next to the oriented payload fields, so the same mapping feeds both.
        """
        where = "attachment"
        device = _require(d, "device", where)
        if not isinstance(device, str) or not device.strip():
            raise ValueError(f"{where}.device: expected a non-empty string, got {device!r}")

        return cls(
            orientation=_choice(_require(d, "orientation", where), ORIENTATIONS, f"{where}.orientation"),
            device=device,
            scale=_number(_require(d, "scale", where), f"{where}.scale", positive=True),
            radius=_number(_require(d, "radius", where), f"{where}.radius"),
            dimensions=OrientedDimensions.from_dict(d, where),
        )

    def to_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {
            "orientation": self.orientation,
            "device": self.device,
            "scale": self.scale,
            "radius": self.radius,
        }
        out.update(self.dimensions.to_dict())
        return out


@dataclass(frozen=True)
class Dimensions:
    """Complete, orientation-merged geometry for one device."""

    device: str
    scale: Number
    radius: Number
    portrait: OrientedDimensions
    landscape: OrientedDimensions

    @classmethod
    def from_slots(
        cls,
        *,
        device: Optional[str],
        scale: Optional[Number],
        radius: Optional[Number],
        portrait: Optional[OrientedDimensions],
        landscape: Optional[OrientedDimensions],
        device_name: Optional[str] = None,
    ) -> "Dimensions":
        """Fold accumulated slots, refusing to build a half-populated record."""
        missing = [name for name, v in ((PORTRAIT, portrait), (LANDSCAPE, landscape)) if v is None]
        if missing:
            raise IncompleteRecordError(missing, device=device_name)
        if device is None or scale is None or radius is None:
            raise IncompleteRecordError(["device/scale/radius"], device=device_name)

        return cls(device=device, scale=scale, radius=radius, portrait=portrait, landscape=landscape)

    @classmethod
    def from_dict(cls, d: Mapping[str, Any]) -> "Dimensions":
        where = "dimensions"
        device = _require(d, "device", where)
        if not isinstance(device, str) or not device.strip():
            raise ValueError(f"{where}.device: expected a non-empty string, got {device!r}")
        return cls(
            device=device,
            scale=_number(_require(d, "scale", where), f"{where}.scale", positive=True),
            radius=_number(_require(d, "radius", where), f"{where}.radius"),
            portrait=OrientedDimensions.from_dict(_require(d, PORTRAIT, where), f"{where}.{PORTRAIT}"),
            landscape=OrientedDimensions.from_dict(_require(d, LANDSCAPE, where), f"{where}.{LANDSCAPE}"),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "device": self.device,
            "scale": self.scale,
            "radius": self.radius,
            PORTRAIT: self.portrait.to_dict(),
            LANDSCAPE: self.landscape.to_dict(),
        }


@dataclass(frozen=True)
class Dataset:
    """The ordered, unique records of one run plus the runtime they came from."""

    records: Tuple[Dimensions, ...]
    platform: str

    def to_json_list(self) -> list[Dict[str, Any]]:
        return [r.to_dict() for r in self.records]

    def descriptor(self) -> Dict[str, Any]:
        return {"platform": self.platform}
