"""API route handlers."""
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from db import get_db
from map_core.filters import categories
from repositories.location_repository import list_locations
from schemas.health import HealthResponse

router = APIRouter()


@router.get("/health", response_model=HealthResponse)
def health() -> HealthResponse:
    """Health check endpoint."""
    return HealthResponse()


@router.get("/categories", response_model=list[str])
def list_categories(db: Session = Depends(get_db)) -> list[str]:
    """Sorted business categories across all locations (category selector options)."""
    return categories([loc.as_record() for loc in list_locations(db)])
