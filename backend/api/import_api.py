"""Import API: bulk location upload and template downloads."""
import logging
from typing import Any

from fastapi import APIRouter, Depends, File, HTTPException, status, UploadFile
from fastapi.responses import Response
from sqlalchemy.orm import Session

from api.locations import to_response
from db import get_db
from repositories.location_repository import create_location as repo_create_location
from repositories.location_repository import find_business_index, find_location_by_coordinates
from repositories.location_repository import update_location as repo_update_location
from utils.import_parsers import parse_upload
from utils.import_validators import coordinate_key, validate_location_row

LOG = logging.getLogger(__name__)

router = APIRouter(tags=["import"])

LOCATIONS_CSV_TEMPLATE = (
    "name,address,lat,lng,stage,marker_color,marker_icon,business_name,category,phone,description,active\n"
    "TDN Kemang,\"Jl. Kemang Raya No. 10, Jakarta Selatan\",-6.2607,106.8137,operational,,,"
    "Kopi Kemang,Cafe,021-555-0101,Specialty coffee,yes\n"
    "TDN Kemang,\"Jl. Kemang Raya No. 10, Jakarta Selatan\",-6.2607,106.8137,operational,,,"
    "Laundry Kilat,Laundry,021-555-0102,,no\n\n"
)
LOCATIONS_JSON_TEMPLATE = """[
  {
    "name": "TDN Kemang",
    "address": "Jl. Kemang Raya No. 10, Jakarta Selatan",
    "lat": -6.2607,
    "lng": 106.8137,
    "stage": "operational",
    "marker_color": "",
    "marker_icon": "",
    "business_name": "Kopi Kemang",
    "category": "Cafe",
    "phone": "021-555-0101",
    "description": "Specialty coffee",
    "active": true
  }
]
"""


async def _read_upload(file: UploadFile) -> bytes:
    """Read full content of uploaded file."""
    content = await file.read()
    if not content:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Empty file")
    return content


@router.post("/import/locations")
async def import_locations(
    file: UploadFile = File(...),
    db: Session = Depends(get_db),
):
    """Upload CSV or JSON with one business per row. Rows at the same coordinate are
    merged into one location; a coordinate that already exists gets the new businesses
    appended. Returns created, updated and failed lists."""
    try:
        content = await _read_upload(file)
        rows = parse_upload(content, file.filename)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e)) from e

    failed: list[dict] = []
    groups: dict[tuple[float, float], dict[str, Any]] = {}

    for raw_row in rows:
        ok, normalized, err = validate_location_row(raw_row)
        if not ok or normalized is None:
            failed.append({"row": raw_row, "error": err})
            continue
        key = coordinate_key(normalized["lat"], normalized["lng"])
        group = groups.setdefault(key, {"location": normalized, "businesses": []})
        business = normalized["business"]
        if business is None:
            continue
        if any(b["name"] == business["name"] for b in group["businesses"]):
            failed.append({"row": raw_row, "error": f"duplicate business '{business['name']}' at this coordinate"})
            continue
        group["businesses"].append(business)

    created: list[dict] = []
    updated: list[dict] = []
    for key, group in groups.items():
        first = group["location"]
        existing = find_location_by_coordinates(db, *key)
        if existing is None:
            loc = repo_create_location(
                db,
                name=first["name"],
                address=first["address"],
                lat=first["lat"],
                lng=first["lng"],
                stage=first["stage"],
                marker=first["marker"],
                businesses=group["businesses"],
            )
            created.append(to_response(loc).model_dump())
            continue
        new_businesses = []
        for business in group["businesses"]:
            if find_business_index(existing, business["name"]) != -1:
                failed.append(
                    {"row": business, "error": f"business '{business['name']}' already exists at this location"}
                )
            else:
                new_businesses.append(business)
        if new_businesses:
            loc = repo_update_location(
                db, existing.id, {"businesses": [*(existing.businesses or []), *new_businesses]}
            )
            updated.append(to_response(loc).model_dump())

    LOG.info("Location import: %d created, %d updated, %d failed", len(created), len(updated), len(failed))
    return {"created": created, "updated": updated, "failed": failed}


@router.get("/import/templates/locations.csv", response_class=Response)
def template_locations_csv():
    """Download locations CSV template."""
    return Response(
        content=LOCATIONS_CSV_TEMPLATE,
        media_type="text/csv",
        headers={"Content-Disposition": 'attachment; filename="locations.csv"'},
    )


@router.get("/import/templates/locations.json", response_class=Response)
def template_locations_json():
    """Download locations JSON template."""
    return Response(
        content=LOCATIONS_JSON_TEMPLATE,
        media_type="application/json",
        headers={"Content-Disposition": 'attachment; filename="locations.json"'},
    )
