"""Location and business API routes (admin panel)."""
from typing import Any, Optional

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from db import get_db
from map_core.markers import normalize_marker, reset_marker_options, resolve
from models.location import Location
from repositories.location_repository import DuplicateBusinessError
from repositories.location_repository import add_business as repo_add_business
from repositories.location_repository import create_location as repo_create_location
from repositories.location_repository import delete_business as repo_delete_business
from repositories.location_repository import delete_location as repo_delete_location
from repositories.location_repository import get_location as repo_get_location
from repositories.location_repository import list_locations as repo_list_locations
from repositories.location_repository import update_business as repo_update_business
from repositories.location_repository import update_location as repo_update_location
from schemas.locations import (
    BusinessSchema,
    LocationCreate,
    LocationListResponse,
    LocationResponse,
    LocationUpdate,
    MarkerSchema,
    MarkerVisualResponse,
)

router = APIRouter(prefix="/locations", tags=["locations"])


def to_response(loc: Location) -> LocationResponse:
    """Location as returned to the admin panel, marker type filled in."""
    return LocationResponse(
        id=loc.id,
        name=loc.name,
        address=loc.address,
        lat=loc.lat,
        lng=loc.lng,
        stage=loc.stage,
        marker=normalize_marker(loc.marker),
        businesses=list(loc.businesses or []),
    )


def _marker_payload(marker: Optional[MarkerSchema]) -> Optional[dict[str, Any]]:
    """Stored marker: an explicit type resets unused options; no type keeps the fields as sent."""
    if marker is None:
        return None
    data = marker.model_dump(exclude_none=True)
    if marker.type is not None:
        return reset_marker_options(data)
    return data


def _business_payload(business: BusinessSchema) -> dict[str, Any]:
    return business.model_dump(exclude_none=True)


def _get_or_404(db: Session, location_id: str) -> Location:
    loc = repo_get_location(db, location_id)
    if loc is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Location not found")
    return loc


@router.get("", response_model=LocationListResponse)
def list_locations(db: Session = Depends(get_db)) -> LocationListResponse:
    """List all locations in insertion order."""
    return LocationListResponse(locations=[to_response(loc) for loc in repo_list_locations(db)])


@router.post("", response_model=LocationResponse, status_code=status.HTTP_201_CREATED)
def create_location(body: LocationCreate, db: Session = Depends(get_db)) -> LocationResponse:
    """Create a new location."""
    loc = repo_create_location(
        db,
        name=body.name,
        address=body.address,
        lat=body.lat,
        lng=body.lng,
        stage=body.stage,
        marker=_marker_payload(body.marker),
        businesses=[_business_payload(b) for b in body.businesses],
    )
    return to_response(loc)


@router.get("/{location_id}", response_model=LocationResponse)
def get_location(location_id: str, db: Session = Depends(get_db)) -> LocationResponse:
    """Get one location (edit form shape)."""
    return to_response(_get_or_404(db, location_id))


@router.put("/{location_id}", response_model=LocationResponse)
def update_location(location_id: str, body: LocationUpdate, db: Session = Depends(get_db)) -> LocationResponse:
    """Merge the provided fields into a location."""
    fields = body.model_dump(exclude_unset=True)
    for key in ("address", "stage"):
        if key in fields and fields[key] is None:
            del fields[key]
    if "marker" in fields:
        fields["marker"] = _marker_payload(body.marker)
    if "businesses" in fields:
        fields["businesses"] = [_business_payload(b) for b in (body.businesses or [])]
    loc = repo_update_location(db, location_id, fields)
    if loc is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Location not found")
    return to_response(loc)


@router.delete("/{location_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_location(location_id: str, db: Session = Depends(get_db)) -> None:
    """Delete a location by id."""
    if not repo_delete_location(db, location_id):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Location not found")


@router.get("/{location_id}/marker", response_model=MarkerVisualResponse)
def get_location_marker(location_id: str, db: Session = Depends(get_db)) -> MarkerVisualResponse:
    """Marker the public map draws for this location."""
    visual = resolve(_get_or_404(db, location_id).as_record())
    return MarkerVisualResponse(
        kind=visual.kind.value,
        color_value=visual.color_value,
        image_ref=visual.image_ref,
        inactive=visual.inactive,
    )


@router.post(
    "/{location_id}/businesses",
    response_model=LocationResponse,
    status_code=status.HTTP_201_CREATED,
)
def add_business(location_id: str, body: BusinessSchema, db: Session = Depends(get_db)) -> LocationResponse:
    """Append a business to a location."""
    try:
        loc = repo_add_business(db, location_id, _business_payload(body))
    except DuplicateBusinessError as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e)) from e
    if loc is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Location not found")
    return to_response(loc)


@router.put("/{location_id}/businesses/{name}", response_model=LocationResponse)
def update_business(
    location_id: str,
    name: str,
    body: BusinessSchema,
    db: Session = Depends(get_db),
) -> LocationResponse:
    """Replace the business with this name."""
    _get_or_404(db, location_id)
    try:
        loc = repo_update_business(db, location_id, name, _business_payload(body))
    except DuplicateBusinessError as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e)) from e
    if loc is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Business not found")
    return to_response(loc)


@router.delete("/{location_id}/businesses/{name}", response_model=LocationResponse)
def delete_business(location_id: str, name: str, db: Session = Depends(get_db)) -> LocationResponse:
    """Remove the business with this name."""
    _get_or_404(db, location_id)
    if not repo_delete_business(db, location_id, name):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Business not found")
    return to_response(_get_or_404(db, location_id))
