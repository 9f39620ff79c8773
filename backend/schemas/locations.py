"""Pydantic schemas for location and business API."""
from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

StageName = Literal["survey", "build", "permit", "operational"]


class MarkerSchema(BaseModel):
    """Marker settings. ``type`` may be omitted (older records)."""

    type: Literal["default", "color", "icon"] | None = None
    color: str | None = None
    icon: str | None = None


class BusinessSchema(BaseModel):
    """One business at a location; ``name`` identifies it within the location."""

    model_config = ConfigDict(extra="allow")

    name: str = Field(min_length=1)
    category: str = ""
    phone: str = ""
    description: str | None = None
    active: bool | None = None


class LocationCreate(BaseModel):
    """Payload for creating a location."""

    name: str | None = None
    address: str
    lat: float
    lng: float
    stage: StageName = "survey"
    marker: MarkerSchema | None = None
    businesses: list[BusinessSchema] = Field(default_factory=list)


class LocationUpdate(BaseModel):
    """Payload for updating a location (all fields optional, merged into the record)."""

    name: str | None = None
    address: str | None = None
    lat: float | None = None
    lng: float | None = None
    stage: StageName | None = None
    marker: MarkerSchema | None = None
    businesses: list[BusinessSchema] | None = None


class LocationResponse(BaseModel):
    """Location in API responses. ``marker`` always carries a resolved ``type``."""

    id: str
    name: str | None = None
    address: str
    lat: float | None = None
    lng: float | None = None
    stage: str = "survey"
    marker: dict
    businesses: list[dict] = Field(default_factory=list)


class LocationListResponse(BaseModel):
    """All locations, in the document shape of the seed data file."""

    locations: list[LocationResponse]


class MarkerVisualResponse(BaseModel):
    """Marker as the map draws it."""

    kind: Literal["icon", "color"]
    color_value: str
    image_ref: Optional[str] = None
    inactive: bool = False
