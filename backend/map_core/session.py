"""Map viewer session: filter state plus the viewport it drives."""
from __future__ import annotations

import logging
import uuid
from typing import Any, Awaitable, Callable, Mapping, Optional, Union

from map_core.basemaps import Basemap
from map_core.controls import activate_control, default_controls, mount_controls
from map_core.filters import categories, filter_locations, has_active_filter
from map_core.notifications import Notifier
from map_core.surface import MapSurface
from map_core.viewport import RecenterOutcome, RenderedMarker, ViewportController

LOG = logging.getLogger(__name__)

FetchFn = Callable[[], Awaitable[Any]]


def coerce_location_list(data: Any) -> list[Mapping[str, Any]]:
    """
    Location records from a repository payload: either ``{"locations": [...]}`` or a
    bare list. Anything else is treated as empty.
    """
    if isinstance(data, Mapping):
        data = data.get("locations")
    if not isinstance(data, list):
        if data is not None:
            LOG.warning("Ignoring malformed locations payload of type %s", type(data).__name__)
        return []
    return [item for item in data if isinstance(item, Mapping)]


class MapSession:
    """
    One public map viewer. Holds the loaded locations and the search/category
    state; every change re-runs the filter and refreshes the markers.
    """

    def __init__(self, controller: ViewportController, notifier: Notifier, session_id: Optional[str] = None) -> None:
        self.session_id = session_id or str(uuid.uuid4())
        self.controller = controller
        self.notifier = notifier
        self.locations: list[Mapping[str, Any]] = []
        self.filtered: list[Mapping[str, Any]] = []
        self.categories: list[str] = []
        self.search_query = ""
        self.selected_category = ""

    @property
    def surface(self) -> MapSurface:
        return self.controller.surface

    @property
    def filter_active(self) -> bool:
        return has_active_filter(self.search_query, self.selected_category)

    def set_locations(self, locations: list[Mapping[str, Any]]) -> None:
        self.locations = list(locations)
        self.categories = categories(self.locations)

    async def load_and_render(self, fetch: FetchFn) -> list[RenderedMarker]:
        """Fetch locations, then filter and render. A failed fetch renders an empty map."""
        try:
            data = await fetch()
        except Exception:
            LOG.exception("Loading locations failed; rendering an empty map")
            data = None
        self.set_locations(coerce_location_list(data))
        return self._apply_filters()

    def _apply_filters(self) -> list[RenderedMarker]:
        self.filtered = filter_locations(self.locations, self.search_query, self.selected_category)
        return self.controller.refresh_markers(self.filtered)

    def on_search_changed(self, text: Optional[str]) -> list[RenderedMarker]:
        self.search_query = text or ""
        return self._apply_filters()

    def on_category_changed(self, value: Optional[str]) -> list[RenderedMarker]:
        self.selected_category = value or ""
        return self._apply_filters()

    def on_layer_switch(self, key: Union[Basemap, str]) -> Basemap:
        return self.controller.switch_layer(key)

    def on_recenter_requested(self) -> RecenterOutcome:
        return self.controller.smart_recenter(self.filter_active, len(self.filtered))

    def on_orientation_reset_requested(self) -> bool:
        return self.controller.reset_orientation()

    def on_region_lock_toggled(self) -> bool:
        return self.controller.toggle_region_lock()

    def on_view_changed(self, center: tuple[float, float], zoom: float) -> bool:
        """User pan/zoom finished at ``center``/``zoom``; applies the region lock check."""
        self.surface.set_view(center, zoom)
        return self.controller.on_move_end()

    def on_marker_hover(self, location_id: Any, inside: bool) -> Optional[RenderedMarker]:
        return self.controller.hover(location_id, inside)

    def activate_control(self, key: str) -> object:
        return activate_control(self.surface, key)


def create_session(surface: Optional[MapSurface] = None, notifier: Optional[Notifier] = None) -> MapSession:
    """New session on a fresh surface (unless one is given) with the default controls mounted."""
    surface = surface or MapSurface()
    notifier = notifier or Notifier()
    controller = ViewportController(surface, notifier)
    session = MapSession(controller, notifier)
    mount_controls(surface, default_controls(session))
    return session
