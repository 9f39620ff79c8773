"""Marker icon upload and delete."""
import logging
import os
import random
import time

from fastapi import APIRouter, File, HTTPException, status, UploadFile

from utils import config

LOG = logging.getLogger(__name__)

router = APIRouter(tags=["uploads"])

ICON_URL_PREFIX = "/uploads/icons"
# Icon extensions stored under /uploads (served as static files).
ALLOWED_ICON_EXTENSIONS = {".png", ".jpg", ".jpeg", ".gif", ".webp"}


def icon_dir() -> str:
    return os.path.join(config.UPLOAD_DIR, "icons")


def _icon_extension(original: str | None) -> str:
    return os.path.splitext(original or "")[1].lower()


def _icon_filename(ext: str) -> str:
    return f"icon-{int(time.time() * 1000)}-{random.randint(0, 10**9)}{ext}"


@router.post("/upload-icon")
async def upload_icon(icon: UploadFile = File(...)):
    """Store an image as a marker icon; returns its public path."""
    ext = _icon_extension(icon.filename)
    if ext not in ALLOWED_ICON_EXTENSIONS or not (icon.content_type or "").startswith("image/"):
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Only image files are allowed!")
    content = await icon.read()
    if not content:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="No file uploaded")
    if len(content) > config.MAX_ICON_BYTES:
        raise HTTPException(
            status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
            detail=f"Icon exceeds {config.MAX_ICON_BYTES} bytes",
        )
    os.makedirs(icon_dir(), exist_ok=True)
    filename = _icon_filename(ext)
    with open(os.path.join(icon_dir(), filename), "wb") as f:
        f.write(content)
    LOG.info("Stored icon %s (%d bytes)", filename, len(content))
    return {"filename": filename, "path": f"{ICON_URL_PREFIX}/{filename}"}


@router.delete("/delete-icon/{filename}")
def delete_icon(filename: str):
    """Delete an uploaded icon by filename."""
    name = os.path.basename(filename)
    path = os.path.join(icon_dir(), name)
    if not name or not os.path.isfile(path):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Icon not found")
    os.remove(path)
    return {"message": "Icon deleted successfully"}
