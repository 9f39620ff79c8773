# Map core: marker resolver, filter engine, viewport controller, popups, toasts, sessions
from map_core.basemaps import Basemap
from map_core.filters import categories, filter_locations, has_active_filter
from map_core.markers import MarkerKind, MarkerType, MarkerVisual, Stage, resolve
from map_core.popups import build_popup
from map_core.session import MapSession, create_session
from map_core.surface import MapSurface
from map_core.viewport import RecenterOutcome, RenderedMarker, ViewportController

__all__ = [
    "Basemap",
    "MapSession",
    "MapSurface",
    "MarkerKind",
    "MarkerType",
    "MarkerVisual",
    "RecenterOutcome",
    "RenderedMarker",
    "Stage",
    "ViewportController",
    "build_popup",
    "categories",
    "create_session",
    "filter_locations",
    "has_active_filter",
    "resolve",
]
