"""
Viewport controller: basemap switching, region lock, marker refresh and recentering.

The controller is the only writer to its ``MapSurface``. Every operation leaves the
surface in a valid state and reports what it did through the notifier.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Mapping, Optional, Sequence, Union

from map_core.basemaps import DEFAULT_BASEMAP, Basemap
from map_core.constants import (
    DEFAULT_CENTER,
    FALLBACK_ZOOM,
    FIT_PADDING,
    ORIENTATION_RESET_DURATION_S,
    RECENTER_DURATION_S,
    REGION_BOUNDS,
    REGION_NAME,
)
from map_core.geometry import Bounds
from map_core.markers import MarkerVisual, coordinates, resolve
from map_core.notifications import Notifier
from map_core.popups import build_hover_label, build_label, build_popup
from map_core.surface import MapSurface

LOG = logging.getLogger(__name__)


@dataclass
class RenderedMarker:
    """A location as drawn on the surface."""

    location_id: Any
    lat: float
    lng: float
    visual: MarkerVisual
    label: str
    hover_label: str
    popup_html: str
    hovered: bool = False

    @property
    def current_label(self) -> str:
        return self.hover_label if self.hovered else self.label


class RecenterOutcome(str, Enum):
    """Which branch a smart recenter took."""

    filtered = "filtered"
    all = "all"
    fallback = "fallback"


class ViewportController:
    """Owns the base layer, the region lock and the rendered markers of one surface."""

    def __init__(
        self,
        surface: MapSurface,
        notifier: Notifier,
        *,
        region: Bounds = REGION_BOUNDS,
        region_name: str = REGION_NAME,
        fallback_center: tuple[float, float] = DEFAULT_CENTER,
        fallback_zoom: int = FALLBACK_ZOOM,
        fit_padding: float = FIT_PADDING,
        initial_layer: Basemap = DEFAULT_BASEMAP,
        locked: bool = True,
    ) -> None:
        self.surface = surface
        self.notifier = notifier
        self.region = region
        self.region_name = region_name
        self.fallback_center = fallback_center
        self.fallback_zoom = fallback_zoom
        self.fit_padding = fit_padding
        self.current_layer: Optional[Basemap] = None
        self.locked = False
        self.markers: list[RenderedMarker] = []
        self._attach_layer(initial_layer)
        if locked:
            self.locked = True
            self.surface.set_max_bounds(self.region)

    # Basemap

    def _attach_layer(self, layer: Basemap) -> None:
        if self.current_layer is not None:
            self.surface.detach_layer(self.current_layer)
        self.surface.attach_layer(layer)
        self.current_layer = layer

    def switch_layer(self, key: Union[Basemap, str]) -> Basemap:
        """Replace the attached base layer. Unknown keys raise ValueError."""
        layer = Basemap(key)
        self._attach_layer(layer)
        self.notifier.notify(f"Switched to {layer.display_name}")
        return layer

    # Region lock

    def fit_region(self) -> None:
        self.surface.fit_bounds(self.region)

    def toggle_region_lock(self) -> bool:
        """Flip the lock. Locking re-applies the bounds and fits the region."""
        if self.locked:
            self.locked = False
            self.surface.set_max_bounds(None)
            self.notifier.notify("Map unlocked: free panning enabled")
        else:
            self.locked = True
            self.surface.set_max_bounds(self.region)
            self.fit_region()
            self.notifier.notify(f"Map locked to {self.region_name}")
        return self.locked

    def on_move_end(self) -> bool:
        """
        Pan/zoom-end hook. While locked, a center outside the region snaps the view
        back to the region. Also runs after the controller's own marker fits.
        Returns True when the view was snapped back.
        """
        if not self.locked:
            return False
        lat, lng = self.surface.center
        if self.region.contains(lat, lng):
            return False
        LOG.info("View center (%s, %s) left %s, refitting", lat, lng, self.region_name)
        self.fit_region()
        self.notifier.notify(f"Map is locked to {self.region_name}")
        return True

    # Markers

    def _render(self, location: Mapping[str, Any]) -> Optional[RenderedMarker]:
        position = coordinates(location)
        if position is None:
            LOG.warning(
                "Skipping location %r: invalid coordinates lat=%r lng=%r",
                location.get("id"),
                location.get("lat"),
                location.get("lng"),
            )
            return None
        return RenderedMarker(
            location_id=location.get("id"),
            lat=position[0],
            lng=position[1],
            visual=resolve(location),
            label=build_label(location),
            hover_label=build_hover_label(location),
            popup_html=build_popup(location),
        )

    def clear_markers(self) -> None:
        for marker in self.markers:
            self.surface.remove_marker(marker)
        self.markers = []

    def refresh_markers(self, locations: Sequence[Mapping[str, Any]]) -> list[RenderedMarker]:
        """Replace every rendered marker with markers for ``locations`` and fit to them."""
        self.clear_markers()
        for location in locations:
            if not isinstance(location, Mapping):
                LOG.warning("Skipping non-object location record: %r", location)
                continue
            marker = self._render(location)
            if marker is None:
                continue
            self.surface.add_marker(marker)
            self.markers.append(marker)
        bounds = self.marker_bounds()
        if bounds is not None:
            self.surface.fit_bounds(bounds.pad(self.fit_padding))
            self.on_move_end()
        return list(self.markers)

    def marker_bounds(self) -> Optional[Bounds]:
        return Bounds.from_points((m.lat, m.lng) for m in self.markers)

    def find_marker(self, location_id: Any) -> Optional[RenderedMarker]:
        for marker in self.markers:
            if marker.location_id == location_id or str(marker.location_id) == str(location_id):
                return marker
        return None

    def hover(self, location_id: Any, inside: bool) -> Optional[RenderedMarker]:
        """Swap a marker's label between its name and its name with stage."""
        marker = self.find_marker(location_id)
        if marker is not None:
            marker.hovered = inside
        return marker

    # Recenter / orientation

    def smart_recenter(self, filter_active: bool, filtered_count: int) -> RecenterOutcome:
        """
        Fit to the filtered markers when a filter is active, else to all markers, else
        fall back to the country view. Returns which branch was taken.
        """
        bounds = self.marker_bounds()
        if filter_active and filtered_count > 0 and bounds is not None:
            outcome = RecenterOutcome.filtered
            message = f"Showing {filtered_count} filtered locations"
        elif not filter_active and bounds is not None:
            outcome = RecenterOutcome.all
            message = f"Showing all {len(self.markers)} locations"
        else:
            self.surface.set_view(self.fallback_center, self.fallback_zoom)
            self.notifier.notify(f"Back to {self.region_name} center")
            return RecenterOutcome.fallback
        self.surface.fit_bounds(bounds.pad(self.fit_padding), animate=True, duration_s=RECENTER_DURATION_S)
        self.notifier.notify(message)
        self.on_move_end()
        return outcome

    def reset_orientation(self) -> bool:
        """
        North-up. Surfaces without rotation get the current view re-applied with a
        short animation instead. Returns True when a real bearing reset happened.
        """
        if self.surface.supports_rotation:
            self.surface.set_bearing(0.0)
            self.notifier.notify("Map orientation reset to north")
            return True
        self.surface.set_view(
            self.surface.center,
            self.surface.zoom,
            animate=True,
            duration_s=ORIENTATION_RESET_DURATION_S,
        )
        self.notifier.notify("Map reset to standard orientation")
        return False
