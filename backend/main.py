"""TDN business directory map: FastAPI backend."""
import json
import logging
import math
import os
import subprocess
import sys
from typing import Any, Optional

from fastapi import FastAPI

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(levelname)s %(name)s %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
)
logging.getLogger("map_core").setLevel(logging.INFO)
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles

from db import SessionLocal
from api.import_api import router as import_router
from api.locations import router as locations_router
from api.map import router as map_router
from api.routes import router
from api.tiles import router as tiles_router
from api.uploads import router as uploads_router
from repositories.location_repository import count_locations, create_location as repo_create_location
from schemas.health import HealthResponse
from utils.config import CORS_ORIGINS, SEED_LOCATIONS_PATH, UPLOAD_DIR

LOG = logging.getLogger(__name__)

app = FastAPI(
    title="TDN Directory Map",
    description="Business directory map: locations admin, map viewer sessions, tiles",
    version="0.1.0",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# API routes under /api (no static mount at / so /api is never shadowed)
app.include_router(router, prefix="/api")
app.include_router(locations_router, prefix="/api")
app.include_router(map_router, prefix="/api")
app.include_router(import_router, prefix="/api")
app.include_router(uploads_router, prefix="/api")
app.include_router(tiles_router)
app.mount("/uploads", StaticFiles(directory=UPLOAD_DIR, check_dir=False), name="uploads")


@app.get("/api/health", response_model=HealthResponse)
def api_health() -> HealthResponse:
    """Explicit health route so /api/health is always available."""
    return HealthResponse()


@app.on_event("startup")
def startup() -> None:
    """Run DB migrations and seed locations from the data file."""
    backend_dir = os.path.dirname(os.path.abspath(__file__))
    result = subprocess.run(
        [sys.executable, "-m", "alembic", "upgrade", "head"],
        cwd=backend_dir,
        capture_output=True,
        text=True,
    )
    if result.returncode != 0:
        raise RuntimeError(f"Alembic upgrade failed: {result.stderr or result.stdout}")
    _seed_locations_if_empty()


def _coordinate_or_none(value: Any) -> Optional[float]:
    """Float coordinate, or None for values the map cannot use (kept as null)."""
    if value is None or isinstance(value, bool):
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    return number if math.isfinite(number) else None


def _seed_locations_if_empty() -> None:
    """Load the locations document into an empty table (first run after migrating from the JSON file)."""
    if not SEED_LOCATIONS_PATH or not os.path.isfile(SEED_LOCATIONS_PATH):
        return
    db = SessionLocal()
    try:
        if count_locations(db) > 0:
            return
        with open(SEED_LOCATIONS_PATH, encoding="utf-8") as f:
            document = json.load(f)
        records = document.get("locations", []) if isinstance(document, dict) else []
        for record in records:
            if not isinstance(record, dict):
                continue
            repo_create_location(
                db,
                name=record.get("name"),
                address=record.get("address") or "",
                location_id=str(record["id"]) if record.get("id") is not None else None,
                lat=_coordinate_or_none(record.get("lat")),
                lng=_coordinate_or_none(record.get("lng")),
                stage=record.get("stage") or "survey",
                marker=record.get("marker") if isinstance(record.get("marker"), dict) else None,
                businesses=[b for b in record.get("businesses") or [] if isinstance(b, dict)],
            )
        LOG.info("Seeded %d locations from %s", len(records), SEED_LOCATIONS_PATH)
    finally:
        db.close()


@app.get("/")
def root() -> dict:
    """Root redirect/info."""
    return {"service": "tdn-map", "docs": "/docs", "health": "/api/health", "map": "/api/map/sessions"}
