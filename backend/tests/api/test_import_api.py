"""API tests: import endpoints (upload CSV/JSON, template downloads)."""
import json

import pytest

from repositories.location_repository import create_location, get_location

pytestmark = pytest.mark.api

CSV_HEADER = "name,address,lat,lng,stage,business_name,category,active\n"


def _upload(client, content, filename="locations.csv"):
    return client.post("/api/import/locations", files={"file": (filename, content, "text/plain")})


def test_import_csv_groups_rows_by_coordinate(client, db_session):
    content = (
        CSV_HEADER
        + "Kemang,Jl. Kemang,-6.2607,106.8137,operational,Kopi,Cafe,yes\n"
        + "Kemang,Jl. Kemang,-6.2607,106.8137,operational,Laundry,Laundry,no\n"
        + "Pluit,Jl. Pluit,-6.117,106.79,,,,\n"
    )
    r = _upload(client, content.encode())
    assert r.status_code == 200
    data = r.json()
    assert data["failed"] == []
    assert data["updated"] == []
    assert len(data["created"]) == 2
    kemang = data["created"][0]
    assert kemang["stage"] == "operational"
    assert [b["name"] for b in kemang["businesses"]] == ["Kopi", "Laundry"]
    assert kemang["businesses"][1]["active"] is False
    assert data["created"][1]["businesses"] == []


def test_import_reports_invalid_and_duplicate_rows(client, db_session):
    content = (
        CSV_HEADER
        + "A,Jl. A,-6.2,106.8,,Kopi,Cafe,\n"
        + "A,Jl. A,-6.2,106.8,,Kopi,Cafe,\n"
        + "B,,-6.3,106.9,,,,\n"
        + "C,Jl. C,abc,106.9,,,,\n"
    )
    data = _upload(client, content.encode()).json()
    assert len(data["created"]) == 1
    errors = [f["error"] for f in data["failed"]]
    assert errors == [
        "duplicate business 'Kopi' at this coordinate",
        "address is required",
        "lat and lng must be numeric",
    ]


def test_import_appends_to_existing_location(client, db_session):
    create_location(
        db_session, "Kemang", "Jl. Kemang", "loc-imp", lat=-6.2607, lng=106.8137, businesses=[{"name": "Kopi"}]
    )
    rows = [
        {"name": "Kemang", "address": "Jl. Kemang", "lat": -6.2607, "lng": 106.8137, "business_name": "Kopi"},
        {"name": "Kemang", "address": "Jl. Kemang", "lat": -6.2607, "lng": 106.8137, "business_name": "Apotek"},
    ]
    r = _upload(client, json.dumps(rows).encode(), "locations.json")
    assert r.status_code == 200
    data = r.json()
    assert data["created"] == []
    assert len(data["updated"]) == 1
    assert data["failed"][0]["error"] == "business 'Kopi' already exists at this location"
    names = [b["name"] for b in get_location(db_session, "loc-imp").businesses]
    assert names == ["Kopi", "Apotek"]


def test_import_invalid_json_returns_400(client, db_session):
    r = _upload(client, b'{"name": "not a list"}', "locations.json")
    assert r.status_code == 400
    assert "array of objects" in r.json()["detail"]


def test_import_empty_file_returns_400(client, db_session):
    r = _upload(client, b"")
    assert r.status_code == 400
    assert r.json()["detail"] == "Empty file"


def test_templates(client):
    r = client.get("/api/import/templates/locations.csv")
    assert r.status_code == 200
    assert r.text.startswith("name,address,lat,lng,stage")
    assert "attachment" in r.headers["content-disposition"]
    r = client.get("/api/import/templates/locations.json")
    assert r.status_code == 200
    assert json.loads(r.text)[0]["business_name"] == "Kopi Kemang"


def test_csv_template_imports_cleanly(client, db_session):
    template = client.get("/api/import/templates/locations.csv").content
    data = _upload(client, template).json()
    assert data["failed"] == []
    assert len(data["created"]) == 1
    assert len(data["created"][0]["businesses"]) == 2
