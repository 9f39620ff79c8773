"""Basemap variants: the closed set of tile layers the viewer can show."""
from enum import Enum


class Basemap(str, Enum):
    """Base tile layers. Exactly one is attached to the map at any time."""

    osm = "osm"
    positron = "positron"
    satellite = "satellite"

    @property
    def url(self) -> str:
        return _TILES[self][0]

    @property
    def attribution(self) -> str:
        return _TILES[self][1]

    @property
    def switcher_title(self) -> str:
        """Layer name as shown in the layer switcher."""
        return _TILES[self][2]

    @property
    def display_name(self) -> str:
        """Layer name used in the switch notification."""
        return _TILES[self][3]

    @property
    def icon(self) -> str:
        return _TILES[self][4]


DEFAULT_BASEMAP = Basemap.osm

# url, attribution, switcher title, notification name, switcher icon
_TILES: dict[Basemap, tuple[str, str, str, str, str]] = {
    Basemap.osm: (
        "https://{s}.tile.openstreetmap.org/{z}/{x}/{y}.png",
        "© OpenStreetMap contributors",
        "OpenStreetMap",
        "OpenStreetMap",
        "🗺️",
    ),
    Basemap.positron: (
        "https://{s}.basemaps.cartocdn.com/light_all/{z}/{x}/{y}{r}.png",
        "© OpenStreetMap contributors © CARTO",
        "Clean Map",
        "Clean Map",
        "🎯",
    ),
    Basemap.satellite: (
        "https://server.arcgisonline.com/ArcGIS/rest/services/World_Imagery/MapServer/tile/{z}/{y}/{x}",
        "© Esri © DigitalGlobe © GeoEye © Earthstar Geographics © CNES/Airbus DS © USDA © USGS "
        "© AeroGRID © IGN © IGP",
        "Satellite",
        "Satellite View",
        "🛰️",
    ),
}
