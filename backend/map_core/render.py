"""Render a session's surface as a Leaflet page with folium."""
import folium

from map_core.constants import (
    ICON_ANCHOR,
    ICON_POPUP_ANCHOR,
    ICON_SIZE,
    LABEL_OFFSET,
    PIN_ANCHOR,
    PIN_POPUP_ANCHOR,
    PIN_SIZE,
    POPUP_MAX_WIDTH,
)
from map_core.markers import MarkerKind, MarkerVisual
from map_core.popups import escape_text
from map_core.session import MapSession
from map_core.viewport import RenderedMarker

INACTIVE_OPACITY = 0.5

_PIN_SVG = (
    '<svg width="25" height="41" viewBox="0 0 25 41" xmlns="http://www.w3.org/2000/svg">'
    '<path d="M12.5 0C5.6 0 0 5.6 0 12.5c0 12.5 12.5 28.5 12.5 28.5s12.5-16 12.5-28.5C25 5.6 19.4 0 12.5 0z" '
    'fill="{color}" stroke="#fff" stroke-width="2"/>'
    '<circle cx="12.5" cy="12.5" r="6" fill="#fff"/>'
    "</svg>"
)

_ICON_IMG = '<img src="{src}" width="{width}" height="{height}" alt="">'


def pin_svg(color: str) -> str:
    """Colored map pin as inline SVG."""
    return _PIN_SVG.format(color=escape_text(color))


def icon_img(image_ref: str) -> str:
    """Uploaded icon as an <img> sized to the marker box."""
    return _ICON_IMG.format(src=escape_text(image_ref), width=ICON_SIZE[0], height=ICON_SIZE[1])


def marker_icon(visual: MarkerVisual) -> folium.DivIcon:
    # Icon refs are site-relative URLs; folium.CustomIcon would try to read them from disk.
    if visual.kind is MarkerKind.icon and visual.image_ref:
        class_name = "custom-icon-marker"
        if visual.inactive:
            class_name += " marker-inactive"
        return folium.DivIcon(
            html=icon_img(visual.image_ref),
            icon_size=ICON_SIZE,
            icon_anchor=ICON_ANCHOR,
            popup_anchor=ICON_POPUP_ANCHOR,
            class_name=class_name,
        )
    class_name = "custom-colored-marker"
    if visual.inactive:
        class_name += " marker-inactive"
    return folium.DivIcon(
        html=pin_svg(visual.color_value),
        icon_size=PIN_SIZE,
        icon_anchor=PIN_ANCHOR,
        popup_anchor=PIN_POPUP_ANCHOR,
        class_name=class_name,
    )


def _add_marker(fmap: folium.Map, marker: RenderedMarker) -> None:
    tooltip = None
    if marker.current_label:
        tooltip = folium.Tooltip(
            escape_text(marker.current_label),
            sticky=False,
            permanent=True,
            direction="bottom",
            offset=LABEL_OFFSET,
            class_name="location-label",
        )
    folium.Marker(
        location=[marker.lat, marker.lng],
        popup=folium.Popup(marker.popup_html, max_width=POPUP_MAX_WIDTH),
        tooltip=tooltip,
        icon=marker_icon(marker.visual),
        opacity=INACTIVE_OPACITY if marker.visual.inactive else 1.0,
    ).add_to(fmap)


def build_map(session: MapSession) -> folium.Map:
    """folium map mirroring the session's surface: one base layer, markers, view and bounds."""
    surface = session.surface
    bounds_kw = {}
    if surface.max_bounds is not None:
        bounds_kw = {
            "max_bounds": True,
            "min_lat": surface.max_bounds.south,
            "max_lat": surface.max_bounds.north,
            "min_lon": surface.max_bounds.west,
            "max_lon": surface.max_bounds.east,
        }
    fmap = folium.Map(
        location=list(surface.center),
        zoom_start=surface.zoom,
        min_zoom=surface.min_zoom,
        max_zoom=surface.max_zoom,
        tiles=None,
        **bounds_kw,
    )
    for layer in surface.layers:
        folium.TileLayer(tiles=layer.url, attr=layer.attribution, name=layer.switcher_title).add_to(fmap)
    for marker in session.controller.markers:
        _add_marker(fmap, marker)
    return fmap


def render_html(session: MapSession) -> str:
    """Standalone HTML document for the session's current map."""
    return build_map(session).get_root().render()
