"""Location repository: list, get, create, update, delete, and businesses by name."""
import uuid
from typing import Any, Optional

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from models.location import Location

# Columns a partial update may touch; id and position are fixed at creation.
UPDATABLE_FIELDS = ("name", "address", "lat", "lng", "stage", "marker", "businesses")


class DuplicateBusinessError(ValueError):
    """A business with the same name already exists at the location."""


def list_locations(session: Session) -> list[Location]:
    """Return all locations in insertion order."""
    result = session.execute(select(Location).order_by(Location.position, Location.id))
    return list(result.scalars().all())


def get_location(session: Session, location_id: str) -> Optional[Location]:
    """Return a location by id or None."""
    return session.get(Location, location_id)


def _next_position(session: Session) -> int:
    current = session.execute(select(func.max(Location.position))).scalar()
    return (current or 0) + 1


def create_location(
    session: Session,
    name: Optional[str],
    address: str,
    location_id: str | None = None,
    *,
    lat: Optional[float] = None,
    lng: Optional[float] = None,
    stage: str = "survey",
    marker: Optional[dict[str, Any]] = None,
    businesses: Optional[list[dict[str, Any]]] = None,
) -> Location:
    """Create a location, commit, and return it. Id is generated if not provided."""
    loc = Location(
        id=location_id or str(uuid.uuid4()),
        position=_next_position(session),
        name=name,
        address=address,
        lat=lat,
        lng=lng,
        stage=stage or "survey",
        marker=dict(marker) if marker is not None else None,
        businesses=[dict(b) for b in (businesses or [])],
    )
    session.add(loc)
    session.commit()
    session.refresh(loc)
    return loc


def update_location(session: Session, location_id: str, fields: dict[str, Any]) -> Optional[Location]:
    """Merge the given fields into a location. Returns the updated location or None if not found."""
    loc = get_location(session, location_id)
    if loc is None:
        return None
    for key in UPDATABLE_FIELDS:
        if key not in fields:
            continue
        value = fields[key]
        # Fresh containers so the JSON columns register the change.
        if key == "marker" and value is not None:
            value = dict(value)
        elif key == "businesses":
            value = [dict(b) for b in (value or [])]
        setattr(loc, key, value)
    session.commit()
    session.refresh(loc)
    return loc


def count_locations(session: Session) -> int:
    """Return the number of locations (for seeding)."""
    result = session.execute(select(func.count()).select_from(Location))
    return result.scalar() or 0


def delete_location(session: Session, location_id: str) -> bool:
    """Delete a location by id. Returns True if deleted, False if not found."""
    loc = get_location(session, location_id)
    if loc is None:
        return False
    session.delete(loc)
    session.commit()
    return True


def find_location_by_coordinates(session: Session, lat: float, lng: float, precision: int = 6) -> Optional[Location]:
    """Return the first location at (lat, lng) rounded to ``precision`` decimals, or None."""
    result = session.execute(
        select(Location)
        .where(func.round(Location.lat, precision) == round(lat, precision))
        .where(func.round(Location.lng, precision) == round(lng, precision))
        .order_by(Location.position)
    )
    return result.scalars().first()


def find_business_index(loc: Location, name: str) -> int:
    """Index of the first business with this name, or -1."""
    for i, business in enumerate(loc.businesses or []):
        if business.get("name") == name:
            return i
    return -1


def add_business(session: Session, location_id: str, business: dict[str, Any]) -> Optional[Location]:
    """Append a business. Returns None if the location is missing; raises DuplicateBusinessError on a name clash."""
    loc = get_location(session, location_id)
    if loc is None:
        return None
    if find_business_index(loc, business.get("name", "")) != -1:
        raise DuplicateBusinessError(f"business '{business.get('name')}' already exists at this location")
    return update_location(session, location_id, {"businesses": [*(loc.businesses or []), dict(business)]})


def update_business(session: Session, location_id: str, name: str, business: dict[str, Any]) -> Optional[Location]:
    """Replace the first business named ``name``. Returns None if the location or business is missing."""
    loc = get_location(session, location_id)
    if loc is None:
        return None
    index = find_business_index(loc, name)
    if index == -1:
        return None
    new_name = business.get("name", name)
    if new_name != name and find_business_index(loc, new_name) != -1:
        raise DuplicateBusinessError(f"business '{new_name}' already exists at this location")
    businesses = list(loc.businesses or [])
    businesses[index] = dict(business)
    return update_location(session, location_id, {"businesses": businesses})


def delete_business(session: Session, location_id: str, name: str) -> bool:
    """Remove every business named ``name``. Returns True if any was removed."""
    loc = get_location(session, location_id)
    if loc is None:
        return False
    remaining = [b for b in (loc.businesses or []) if b.get("name") != name]
    if len(remaining) == len(loc.businesses or []):
        return False
    update_location(session, location_id, {"businesses": remaining})
    return True
