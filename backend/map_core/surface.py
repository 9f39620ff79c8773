"""In-memory rendering surface: the scene a map viewer draws."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional

from map_core.basemaps import Basemap
from map_core.constants import DEFAULT_CENTER, DEFAULT_ZOOM
from map_core.geometry import Bounds, zoom_for_bounds


@dataclass(frozen=True)
class Transition:
    """Last view change applied to the surface."""

    kind: str  # "set_view" | "fit_bounds" | "bearing"
    animate: bool = False
    duration_s: Optional[float] = None


class MapSurface:
    """
    Map scene: attached tile layers, markers, controls and the current view.

    The surface does not enforce policy (how many base layers, where the view may go);
    the viewport controller owns that. ``supports_rotation`` mirrors renderers that
    have a bearing (GL maps); classic raster maps do not.
    """

    def __init__(
        self,
        center: tuple[float, float] = DEFAULT_CENTER,
        zoom: int = DEFAULT_ZOOM,
        *,
        width_px: int = 1024,
        height_px: int = 768,
        min_zoom: int = 0,
        max_zoom: int = 18,
        supports_rotation: bool = False,
    ) -> None:
        self.width_px = width_px
        self.height_px = height_px
        self.min_zoom = min_zoom
        self.max_zoom = max_zoom
        self.supports_rotation = supports_rotation
        self.center = (float(center[0]), float(center[1]))
        self.zoom = self._clamp_zoom(zoom)
        self.bearing = 0.0
        self.max_bounds: Optional[Bounds] = None
        self.layers: list[Basemap] = []
        self.markers: list[Any] = []
        self.controls: dict[str, Any] = {}
        self.last_transition: Optional[Transition] = None

    def _clamp_zoom(self, zoom: float) -> int:
        return int(max(self.min_zoom, min(self.max_zoom, zoom)))

    # Layers

    def attach_layer(self, layer: Basemap) -> None:
        self.layers.append(layer)

    def detach_layer(self, layer: Basemap) -> bool:
        if layer in self.layers:
            self.layers.remove(layer)
            return True
        return False

    # Markers

    def add_marker(self, marker: Any) -> None:
        self.markers.append(marker)

    def remove_marker(self, marker: Any) -> bool:
        for i, existing in enumerate(self.markers):
            if existing is marker:
                del self.markers[i]
                return True
        return False

    # Controls

    def add_control(self, key: str, control: Any) -> None:
        if key in self.controls:
            raise ValueError(f"Control '{key}' is already mounted")
        self.controls[key] = control

    # View

    def set_view(
        self,
        center: tuple[float, float],
        zoom: float,
        animate: bool = False,
        duration_s: Optional[float] = None,
    ) -> None:
        self.center = (float(center[0]), float(center[1]))
        self.zoom = self._clamp_zoom(zoom)
        self.last_transition = Transition("set_view", animate, duration_s)

    def fit_bounds(self, bounds: Bounds, animate: bool = False, duration_s: Optional[float] = None) -> None:
        """Center on ``bounds`` at the largest zoom that shows all of it."""
        self.center = bounds.center
        self.zoom = zoom_for_bounds(bounds, self.width_px, self.height_px, self.min_zoom, self.max_zoom)
        self.last_transition = Transition("fit_bounds", animate, duration_s)

    def set_max_bounds(self, bounds: Optional[Bounds]) -> None:
        self.max_bounds = bounds

    def set_bearing(self, degrees: float) -> None:
        if not self.supports_rotation:
            raise NotImplementedError("This surface cannot rotate")
        self.bearing = float(degrees) % 360.0
        self.last_transition = Transition("bearing")
