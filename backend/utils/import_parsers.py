"""Parse CSV and JSON uploads for location import."""
import csv
import json
from io import StringIO
from typing import Any

# Header spellings accepted for the canonical column names.
COLUMN_ALIASES = {
    "latitude": "lat",
    "longitude": "lng",
    "lon": "lng",
    "long": "lng",
    "business": "business_name",
    "nama_usaha": "business_name",
    "kategori": "category",
    "telepon": "phone",
    "alamat": "address",
    "tahap": "stage",
}


def _normalize_key(k: str) -> str:
    """Strip, lower-case and map aliases; empty after strip treated as missing."""
    key = k.strip().lower() if k else ""
    return COLUMN_ALIASES.get(key, key)


def _normalize_row(row: dict[str, Any]) -> dict[str, Any]:
    """Normalize keys and strip string values; drop empty keys and rows with no values."""
    out: dict[str, Any] = {}
    for k, v in row.items():
        key = _normalize_key(k) if isinstance(k, str) else ""
        if not key:
            continue
        out[key] = v.strip() if isinstance(v, str) else v
    if all(v in (None, "") for v in out.values()):
        return {}
    return out


def parse_csv(content: bytes) -> list[dict[str, Any]]:
    """Parse CSV bytes into list of dicts. Skip empty rows."""
    text = content.decode("utf-8-sig", errors="replace")
    reader = csv.DictReader(StringIO(text))
    rows: list[dict[str, Any]] = []
    for row in reader:
        normalized = _normalize_row(dict(row))
        if normalized:
            rows.append(normalized)
    return rows


def parse_json(content: bytes) -> list[dict[str, Any]]:
    """Parse JSON bytes (array of objects, or ``{"locations": [...]}``) into list of dicts."""
    data = json.loads(content.decode("utf-8"))
    if isinstance(data, dict) and isinstance(data.get("locations"), list):
        data = data["locations"]
    if not isinstance(data, list):
        raise ValueError("JSON must be an array of objects")
    rows: list[dict[str, Any]] = []
    for i, item in enumerate(data):
        if not isinstance(item, dict):
            raise ValueError(f"Row {i + 1} is not an object")
        normalized = _normalize_row(item)
        if normalized:
            rows.append(normalized)
    return rows


def parse_upload(content: bytes, filename: str | None) -> list[dict[str, Any]]:
    """Detect format from filename or content and parse. Raises ValueError if invalid."""
    if filename and filename.lower().endswith(".json"):
        return parse_json(content)
    if filename and filename.lower().endswith(".csv"):
        return parse_csv(content)
    # Detect from content: JSON array or document starts with [ or {
    stripped = content.lstrip()
    if stripped.startswith(b"[") or stripped.startswith(b"{"):
        return parse_json(content)
    return parse_csv(content)
