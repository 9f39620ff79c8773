"""Configuration from environment."""
import os

PORT = int(os.environ.get("PORT", "5100"))

_BACKEND_DIR = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))

# When TESTING=true, use test DB URL so tests never touch production.
if os.environ.get("TESTING") == "true":
    DATABASE_URL = os.environ.get("TESTING_DATABASE_URL", "sqlite:///:memory:")
    SEED_LOCATIONS_PATH = os.environ.get("TESTING_SEED_LOCATIONS_PATH", "")
else:
    DATABASE_URL = os.environ.get(
        "DATABASE_URL",
        "sqlite:///./directory.db",
    )
    SEED_LOCATIONS_PATH = os.environ.get(
        "SEED_LOCATIONS_PATH",
        os.path.join(_BACKEND_DIR, "data", "locations.json"),
    )

UPLOAD_DIR = os.environ.get("UPLOAD_DIR", os.path.join(_BACKEND_DIR, "public", "uploads"))
MAX_ICON_BYTES = int(os.environ.get("MAX_ICON_BYTES", str(2 * 1024 * 1024)))

TILES_MBTILES_PATH = os.environ.get("TILES_MBTILES_PATH", os.path.join(_BACKEND_DIR, "data", "indonesia.mbtiles"))
TILESET_NAME = os.environ.get("TILESET_NAME", "indonesia")

CORS_ORIGINS = [
    o.strip()
    for o in os.environ.get("CORS_ORIGINS", "http://localhost:5100,http://127.0.0.1:5100").split(",")
    if o.strip()
]
