"""Validate location rows for import."""
import math
from typing import Any

from map_core.markers import Stage

TRUE_VALUES = {"1", "true", "yes", "y", "ya", "aktif", "active"}
FALSE_VALUES = {"0", "false", "no", "n", "tidak", "nonaktif", "inactive"}


def _get_str(row: dict[str, Any], key: str) -> str | None:
    """Get string value; empty string treated as missing."""
    v = row.get(key)
    if v is None:
        return None
    s = str(v).strip()
    return s if s else None


def _get_float(row: dict[str, Any], key: str) -> float | None:
    """Get finite float from row; None if missing or not numeric."""
    v = row.get(key)
    if v is None or isinstance(v, bool) or (isinstance(v, str) and not v.strip()):
        return None
    try:
        n = float(str(v).replace(",", ".")) if isinstance(v, str) else float(v)
    except (TypeError, ValueError):
        return None
    return n if math.isfinite(n) else None


def _get_bool(row: dict[str, Any], key: str) -> tuple[bool, bool | None]:
    """(ok, value) for a yes/no column; missing gives (True, None)."""
    v = row.get(key)
    if v is None or (isinstance(v, str) and not v.strip()):
        return True, None
    if isinstance(v, bool):
        return True, v
    s = str(v).strip().lower()
    if s in TRUE_VALUES:
        return True, True
    if s in FALSE_VALUES:
        return True, False
    return False, None


def coordinate_key(lat: float, lng: float, precision: int = 6) -> tuple[float, float]:
    """Rows whose coordinates share this key belong to the same location."""
    return round(lat, precision), round(lng, precision)


def validate_location_row(row: dict[str, Any]) -> tuple[bool, dict[str, Any] | None, str]:
    """
    Validate a location/business row. Returns (ok, normalized_dict, error_message).
    normalized_dict has name, address, lat, lng, stage, marker (or None) and
    business (or None when the row carries no business_name).
    """
    address = _get_str(row, "address")
    if not address:
        return False, None, "address is required"
    if row.get("lat") in (None, "") or row.get("lng") in (None, ""):
        return False, None, "lat and lng are required"
    lat = _get_float(row, "lat")
    lng = _get_float(row, "lng")
    if lat is None or lng is None:
        return False, None, "lat and lng must be numeric"
    if not (-90.0 <= lat <= 90.0):
        return False, None, "lat must be between -90 and 90"
    if not (-180.0 <= lng <= 180.0):
        return False, None, "lng must be between -180 and 180"

    stage = (_get_str(row, "stage") or Stage.survey.value).lower()
    if stage not in {s.value for s in Stage}:
        return False, None, f"stage must be one of {', '.join(s.value for s in Stage)}"

    marker = None
    icon = _get_str(row, "marker_icon")
    color = _get_str(row, "marker_color")
    if icon:
        marker = {"type": "icon", "icon": icon}
    elif color:
        marker = {"type": "color", "color": color}

    business = None
    business_name = _get_str(row, "business_name")
    if business_name:
        ok, active = _get_bool(row, "active")
        if not ok:
            return False, None, "active must be yes/no"
        business = {
            "name": business_name,
            "category": _get_str(row, "category") or "",
            "phone": _get_str(row, "phone") or "",
        }
        description = _get_str(row, "description")
        if description:
            business["description"] = description
        if active is not None:
            business["active"] = active

    normalized = {
        "name": _get_str(row, "name"),
        "address": address,
        "lat": lat,
        "lng": lng,
        "stage": stage,
        "marker": marker,
        "business": business,
    }
    return True, normalized, ""
