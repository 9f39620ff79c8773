"""Popup and label content for a location. All record text is HTML-escaped."""
from html import escape
from typing import Any, Mapping

from map_core.markers import stage_label

PLACEHOLDER_TITLE = "Lokasi"

# The rendered page embeds popups and labels in JS template literals.
_TEMPLATE_LITERAL_CHARS = str.maketrans({"$": "&#36;", "`": "&#96;", "\\": "&#92;"})


def escape_text(value: str) -> str:
    """HTML-escape ``value`` so it is also inert inside a JS template literal."""
    return escape(value, quote=True).translate(_TEMPLATE_LITERAL_CHARS)


def _text(value: Any) -> str:
    return escape_text("" if value is None else str(value))


def _business_block(business: Mapping[str, Any]) -> str:
    active = business.get("active") is not False
    badge_class = "status-active" if active else "status-inactive"
    badge_text = "Active" if active else "Inactive"
    parts = [
        '<div class="business-item">',
        f'<div class="business-name">{_text(business.get("name"))}'
        f' <span class="status-badge {badge_class}">{badge_text}</span></div>',
        f'<div class="business-category">{_text(business.get("category"))}</div>',
        f'<div class="business-phone">📞 {_text(business.get("phone"))}</div>',
    ]
    if business.get("description"):
        parts.append(f'<div class="business-description">{_text(business["description"])}</div>')
    parts.append("</div>")
    return "".join(parts)


def build_popup(location: Mapping[str, Any]) -> str:
    """Popup markup: title, address, then one block per business."""
    name = location.get("name")
    title = f"🏢 {_text(name)}" if name else f"📍 {PLACEHOLDER_TITLE}"
    parts = [
        '<div class="popup-content">',
        f'<div class="popup-header">{title}</div>',
        f'<div class="popup-address">📍 {_text(location.get("address"))}</div>',
    ]
    businesses = location.get("businesses") or []
    if isinstance(businesses, list):
        parts.extend(_business_block(b) for b in businesses if isinstance(b, Mapping))
    parts.append("</div>")
    return "".join(parts)


def build_label(location: Mapping[str, Any]) -> str:
    """Permanent label text; empty when the location has no name."""
    name = location.get("name")
    return str(name) if name else ""


def build_hover_label(location: Mapping[str, Any]) -> str:
    """Label text while the pointer is over the marker: name plus stage."""
    stage = stage_label(location.get("stage"))
    label = build_label(location)
    return f"{label} · {stage}" if label else stage
