"""
Marker resolver: one location record in, one visual marker out.

Records are the plain dicts the repository serves. Older records may have no marker,
a marker without ``type`` or a declared type whose field is empty; every shape resolves
to some marker and nothing here raises on malformed input.
"""
from __future__ import annotations

import math
from dataclasses import dataclass
from enum import Enum
from typing import Any, Mapping, Optional

from map_core.constants import DEFAULT_MARKER_COLOR


class Stage(str, Enum):
    """Lifecycle stage of a location."""

    survey = "survey"
    build = "build"
    permit = "permit"
    operational = "operational"

    @property
    def color(self) -> str:
        return STAGE_COLORS[self]

    @property
    def label(self) -> str:
        return self.value.capitalize()


STAGE_COLORS: dict[Stage, str] = {
    Stage.survey: "#3388ff",
    Stage.build: "#fd7e14",
    Stage.permit: "#ffc107",
    Stage.operational: "#28a745",
}


class MarkerType(str, Enum):
    """Marker option stored on a record (admin form choice)."""

    default = "default"
    color = "color"
    icon = "icon"


class MarkerKind(str, Enum):
    """How a resolved marker is drawn."""

    icon = "icon"
    color = "color"


@dataclass(frozen=True)
class MarkerVisual:
    kind: MarkerKind
    color_value: str
    image_ref: Optional[str] = None
    inactive: bool = False


def parse_stage(value: Any) -> Optional[Stage]:
    """Stage for a raw value; absent means survey, unknown strings give None."""
    if value is None or (isinstance(value, str) and not value.strip()):
        return Stage.survey
    try:
        return Stage(str(value).strip().lower())
    except ValueError:
        return None


def stage_color(value: Any) -> str:
    stage = parse_stage(value)
    return stage.color if stage is not None else DEFAULT_MARKER_COLOR


def stage_label(value: Any) -> str:
    stage = parse_stage(value)
    return stage.label if stage is not None else str(value)


def _marker_of(location: Mapping[str, Any]) -> Optional[Mapping[str, Any]]:
    marker = location.get("marker")
    return marker if isinstance(marker, Mapping) else None


def resolve_marker_type(marker: Optional[Mapping[str, Any]]) -> MarkerType:
    """
    Marker type of a stored marker.

    An explicit ``type`` wins. Records written before the type field existed are
    classified from their fields: an icon makes it ``icon``, a non-default color makes
    it ``color``, anything else is ``default``.
    """
    if not marker:
        return MarkerType.default
    declared = marker.get("type")
    if declared:
        try:
            return MarkerType(declared)
        except ValueError:
            return MarkerType.default
    if marker.get("icon"):
        return MarkerType.icon
    color = marker.get("color")
    if color and color != DEFAULT_MARKER_COLOR:
        return MarkerType.color
    return MarkerType.default


def normalize_marker(marker: Optional[Mapping[str, Any]]) -> dict[str, Any]:
    """Marker dict with ``type``, ``color`` and ``icon`` always present (admin edit form shape)."""
    if not marker:
        return {"type": MarkerType.default.value, "color": DEFAULT_MARKER_COLOR, "icon": None}
    out = dict(marker)
    out["type"] = resolve_marker_type(marker).value
    out.setdefault("color", DEFAULT_MARKER_COLOR)
    out.setdefault("icon", None)
    return out


def reset_marker_options(marker: Mapping[str, Any]) -> dict[str, Any]:
    """Clear the fields the chosen marker type does not use."""
    out = normalize_marker(marker)
    marker_type = out["type"]
    if marker_type == MarkerType.default.value:
        out["color"] = DEFAULT_MARKER_COLOR
        out["icon"] = None
    elif marker_type == MarkerType.color.value:
        out["icon"] = None
    elif marker_type == MarkerType.icon.value:
        out["color"] = DEFAULT_MARKER_COLOR
    return out


def is_inactive(location: Mapping[str, Any]) -> bool:
    """True when the location has businesses and every one of them is explicitly inactive."""
    businesses = location.get("businesses") or []
    if not isinstance(businesses, list) or not businesses:
        return False
    return all(isinstance(b, Mapping) and b.get("active") is False for b in businesses)


def _as_coordinate(value: Any) -> Optional[float]:
    if value is None or isinstance(value, bool):
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    return number if math.isfinite(number) else None


def coordinates(location: Mapping[str, Any]) -> Optional[tuple[float, float]]:
    """(lat, lng) when both are numeric and in range, else None."""
    lat = _as_coordinate(location.get("lat"))
    lng = _as_coordinate(location.get("lng"))
    if lat is None or lng is None:
        return None
    if not (-90.0 <= lat <= 90.0 and -180.0 <= lng <= 180.0):
        return None
    return lat, lng


def resolve(location: Mapping[str, Any]) -> MarkerVisual:
    """Visual marker for a location record."""
    marker = _marker_of(location)
    inactive = is_inactive(location)
    fallback_color = stage_color(location.get("stage"))
    if marker is not None:
        marker_type = resolve_marker_type(marker)
        icon = marker.get("icon")
        color = marker.get("color")
        if marker_type is MarkerType.icon and icon:
            return MarkerVisual(
                kind=MarkerKind.icon,
                color_value=fallback_color,
                image_ref=str(icon),
                inactive=inactive,
            )
        if marker_type is MarkerType.color and color:
            return MarkerVisual(kind=MarkerKind.color, color_value=str(color), inactive=inactive)
    return MarkerVisual(kind=MarkerKind.color, color_value=fallback_color, inactive=inactive)
