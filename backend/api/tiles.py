"""Vector tile proxy over a pre-built MBTiles archive."""
import gzip
import logging
import os
from typing import Any, Optional

from fastapi import APIRouter, HTTPException, status
from fastapi.responses import JSONResponse, Response
from sqlalchemy import create_engine, text
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError

from utils import config

LOG = logging.getLogger(__name__)

router = APIRouter(prefix="/tiles", tags=["tiles"])

PBF_MEDIA_TYPE = "application/x-protobuf"
GZIP_MAGIC = b"\x1f\x8b"
EMPTY_TILE = gzip.compress(b"")
MAX_TILE_ZOOM = 30

# Opened once per archive path.
_engines: dict[str, Engine] = {}
_metadata: dict[str, dict[str, Any]] = {}


class TileArchiveError(Exception):
    """The MBTiles archive is missing or unreadable."""


def reset_cache() -> None:
    """Drop cached archive handles and metadata (tests, archive replaced on disk)."""
    for engine in _engines.values():
        engine.dispose()
    _engines.clear()
    _metadata.clear()


def get_archive(path: str) -> Engine:
    engine = _engines.get(path)
    if engine is None:
        if not os.path.isfile(path):
            raise TileArchiveError(f"MBTiles archive not found: {path}")
        engine = create_engine(f"sqlite:///{path}", connect_args={"check_same_thread": False})
        _engines[path] = engine
    return engine


def get_archive_metadata(path: str) -> dict[str, Any]:
    info = _metadata.get(path)
    if info is None:
        with get_archive(path).connect() as conn:
            rows = conn.execute(text("SELECT name, value FROM metadata")).all()
        info = {name: value for name, value in rows}
        _metadata[path] = info
    return info


def read_tile(path: str, z: int, x: int, y: int) -> Optional[bytes]:
    """Tile bytes for an XYZ address, or None when the archive has no such tile."""
    info = get_archive_metadata(path)
    scheme = str(info.get("scheme") or "tms").lower()
    tile_row = (1 << z) - 1 - y if scheme == "tms" else y
    with get_archive(path).connect() as conn:
        row = conn.execute(
            text(
                "SELECT tile_data FROM tiles "
                "WHERE zoom_level = :z AND tile_column = :x AND tile_row = :y"
            ),
            {"z": z, "x": x, "y": tile_row},
        ).first()
    return bytes(row[0]) if row is not None and row[0] is not None else None


def _empty_tile_response() -> Response:
    return Response(
        content=EMPTY_TILE,
        media_type=PBF_MEDIA_TYPE,
        headers={"Content-Encoding": "gzip", "Access-Control-Allow-Origin": "*"},
    )


def _check_tileset(tileset: str) -> None:
    if tileset != config.TILESET_NAME:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Tileset not found")


def _check_tile_address(z: int, x: int, y: int) -> None:
    if not 0 <= z <= MAX_TILE_ZOOM or not (0 <= x < 1 << z and 0 <= y < 1 << z):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Tile not found")


@router.get("/{tileset}/metadata")
def tileset_metadata(tileset: str):
    """Metadata table of the archive as JSON."""
    _check_tileset(tileset)
    try:
        return JSONResponse(get_archive_metadata(config.TILES_MBTILES_PATH))
    except (TileArchiveError, SQLAlchemyError):
        LOG.exception("Error getting metadata")
        return Response(content="Error getting metadata", status_code=500, media_type="text/plain")


@router.get("/{tileset}/{z}/{x}/{y}.pbf")
def get_tile(tileset: str, z: int, x: int, y: int):
    """One vector tile; absent tiles come back as an empty gzipped body."""
    _check_tileset(tileset)
    _check_tile_address(z, x, y)
    try:
        data = read_tile(config.TILES_MBTILES_PATH, z, x, y)
    except (TileArchiveError, SQLAlchemyError):
        LOG.exception("Error getting tile %s/%s/%s", z, x, y)
        return Response(content="Error getting tile", status_code=500, media_type="text/plain")
    if not data:
        return _empty_tile_response()
    headers = {"Access-Control-Allow-Origin": "*"}
    if data.startswith(GZIP_MAGIC):
        headers["Content-Encoding"] = "gzip"
    return Response(content=data, media_type=PBF_MEDIA_TYPE, headers=headers)
