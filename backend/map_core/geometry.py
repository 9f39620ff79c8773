"""Geographic rectangles and the web-mercator zoom math used for viewport fits."""
from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Iterable, Optional

TILE_SIZE = 256
MAX_MERCATOR_LAT = 85.0511287798


@dataclass(frozen=True)
class Bounds:
    """Axis-aligned lat/lng rectangle (no antimeridian wrap)."""

    south: float
    west: float
    north: float
    east: float

    @classmethod
    def from_points(cls, points: Iterable[tuple[float, float]]) -> Optional[Bounds]:
        """Smallest rectangle containing every (lat, lng) point, or None when there are none."""
        lats: list[float] = []
        lngs: list[float] = []
        for lat, lng in points:
            lats.append(lat)
            lngs.append(lng)
        if not lats:
            return None
        return cls(south=min(lats), west=min(lngs), north=max(lats), east=max(lngs))

    @property
    def center(self) -> tuple[float, float]:
        return ((self.south + self.north) / 2.0, (self.west + self.east) / 2.0)

    def pad(self, ratio: float) -> Bounds:
        """Grow every side by ``ratio`` of the rectangle's span (Leaflet ``pad``)."""
        lat_buffer = abs(self.north - self.south) * ratio
        lng_buffer = abs(self.east - self.west) * ratio
        return Bounds(
            south=self.south - lat_buffer,
            west=self.west - lng_buffer,
            north=self.north + lat_buffer,
            east=self.east + lng_buffer,
        )

    def contains(self, lat: float, lng: float) -> bool:
        return self.south <= lat <= self.north and self.west <= lng <= self.east

    def as_pairs(self) -> list[list[float]]:
        """[[south, west], [north, east]], the shape Leaflet and folium take."""
        return [[self.south, self.west], [self.north, self.east]]


def _mercator_y(lat: float) -> float:
    lat = max(-MAX_MERCATOR_LAT, min(MAX_MERCATOR_LAT, lat))
    rad = math.radians(lat)
    return math.log(math.tan(math.pi / 4 + rad / 2))


def zoom_for_bounds(
    bounds: Bounds,
    width_px: int,
    height_px: int,
    min_zoom: int = 0,
    max_zoom: int = 18,
) -> int:
    """
    Largest integer zoom at which ``bounds`` fits a viewport of the given pixel size.

    A degenerate rectangle (single point) fits at every zoom, so ``max_zoom`` is returned.
    """
    lng_fraction = abs(bounds.east - bounds.west) / 360.0
    lat_fraction = abs(_mercator_y(bounds.north) - _mercator_y(bounds.south)) / (2 * math.pi)
    candidates = []
    if lng_fraction > 0:
        candidates.append(math.log2(width_px / (TILE_SIZE * lng_fraction)))
    if lat_fraction > 0:
        candidates.append(math.log2(height_px / (TILE_SIZE * lat_fraction)))
    if not candidates:
        return max_zoom
    zoom = math.floor(min(candidates))
    return max(min_zoom, min(max_zoom, zoom))
