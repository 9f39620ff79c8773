"""Pydantic schemas for map viewer sessions."""
from pydantic import BaseModel, Field

from map_core.basemaps import Basemap
from schemas.locations import MarkerVisualResponse


class SearchRequest(BaseModel):
    query: str = ""


class CategoryRequest(BaseModel):
    category: str = ""


class LayerRequest(BaseModel):
    layer: Basemap


class ViewRequest(BaseModel):
    """Where a user pan/zoom ended."""

    lat: float = Field(ge=-90, le=90)
    lng: float = Field(ge=-180, le=180)
    zoom: float = Field(ge=0, le=22)


class HoverRequest(BaseModel):
    inside: bool


class BoundsResponse(BaseModel):
    south: float
    west: float
    north: float
    east: float


class RenderedMarkerResponse(BaseModel):
    """A marker currently on the map."""

    location_id: str
    lat: float
    lng: float
    visual: MarkerVisualResponse
    label: str
    popup_html: str
    hovered: bool = False


class ControlResponse(BaseModel):
    key: str
    icon: str
    tooltip: str
    position: str
    group: str | None = None
    active: bool = False


class ToastResponse(BaseModel):
    message: str
    duration_s: float


class MapStateResponse(BaseModel):
    """Full viewer state after an interaction."""

    session_id: str
    layer: Basemap
    locked: bool
    center: tuple[float, float]
    zoom: int
    bearing: float = 0.0
    max_bounds: BoundsResponse | None = None
    search_query: str = ""
    selected_category: str = ""
    categories: list[str] = Field(default_factory=list)
    total_locations: int = 0
    markers: list[RenderedMarkerResponse] = Field(default_factory=list)
    controls: list[ControlResponse] = Field(default_factory=list)
    toasts: list[ToastResponse] = Field(default_factory=list)
