"""API tests: MBTiles vector tile proxy."""
import gzip

import pytest
from sqlalchemy import create_engine, text

from api import tiles
from utils import config

pytestmark = pytest.mark.api

TILE_PAYLOAD = b"vector-tile-bytes"


def _write_archive(path, scheme="tms"):
    engine = create_engine(f"sqlite:///{path}")
    with engine.begin() as conn:
        conn.execute(text("CREATE TABLE metadata (name TEXT, value TEXT)"))
        conn.execute(
            text("CREATE TABLE tiles (zoom_level INTEGER, tile_column INTEGER, tile_row INTEGER, tile_data BLOB)")
        )
        conn.execute(
            text("INSERT INTO metadata (name, value) VALUES (:n, :v)"),
            [{"n": "name", "v": "indonesia"}, {"n": "format", "v": "pbf"}, {"n": "scheme", "v": scheme}],
        )
        # z=2, x=3, xyz y=1 -> tms row 2
        row = 2 if scheme == "tms" else 1
        conn.execute(
            text("INSERT INTO tiles VALUES (2, 3, :row, :data)"),
            {"row": row, "data": gzip.compress(TILE_PAYLOAD)},
        )
    engine.dispose()


@pytest.fixture
def archive(tmp_path, monkeypatch):
    path = tmp_path / "indonesia.mbtiles"
    _write_archive(path)
    monkeypatch.setattr(config, "TILES_MBTILES_PATH", str(path))
    tiles.reset_cache()
    yield path
    tiles.reset_cache()


def test_metadata(client, archive):
    r = client.get("/tiles/indonesia/metadata")
    assert r.status_code == 200
    assert r.json() == {"name": "indonesia", "format": "pbf", "scheme": "tms"}


def test_tile_flips_tms_row(client, archive):
    r = client.get("/tiles/indonesia/2/3/1.pbf")
    assert r.status_code == 200
    assert r.headers["content-type"] == "application/x-protobuf"
    assert r.headers["content-encoding"] == "gzip"
    assert r.headers["access-control-allow-origin"] == "*"
    assert r.content == TILE_PAYLOAD


def test_missing_tile_is_empty_gzip(client, archive):
    r = client.get("/tiles/indonesia/2/0/0.pbf")
    assert r.status_code == 200
    assert r.headers["content-encoding"] == "gzip"
    assert r.content == b""


def test_xyz_scheme_archive(client, tmp_path, monkeypatch):
    path = tmp_path / "xyz.mbtiles"
    _write_archive(path, scheme="xyz")
    monkeypatch.setattr(config, "TILES_MBTILES_PATH", str(path))
    tiles.reset_cache()
    try:
        assert client.get("/tiles/indonesia/2/3/1.pbf").content == TILE_PAYLOAD
    finally:
        tiles.reset_cache()


def test_unknown_tileset(client, archive):
    assert client.get("/tiles/world/metadata").status_code == 404
    assert client.get("/tiles/world/0/0/0.pbf").status_code == 404


def test_missing_archive_returns_500(client, tmp_path, monkeypatch):
    monkeypatch.setattr(config, "TILES_MBTILES_PATH", str(tmp_path / "absent.mbtiles"))
    tiles.reset_cache()
    r = client.get("/tiles/indonesia/metadata")
    assert r.status_code == 500
    assert r.text == "Error getting metadata"
    r = client.get("/tiles/indonesia/0/0/0.pbf")
    assert r.status_code == 500
    assert r.text == "Error getting tile"


@pytest.mark.parametrize("address", ["-1/0/0", "2/4/0", "2/0/4", "2/-1/0", "31/0/0"])
def test_tile_address_outside_pyramid_is_404(client, archive, address):
    r = client.get(f"/tiles/indonesia/{address}.pbf")
    assert r.status_code == 404
    assert r.json()["detail"] == "Tile not found"
