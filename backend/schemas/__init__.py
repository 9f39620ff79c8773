# Schemas package
from .health import HealthResponse
from .locations import LocationCreate, LocationResponse, LocationUpdate, MarkerVisualResponse
from .map import MapStateResponse

__all__ = [
    "HealthResponse",
    "LocationCreate",
    "LocationResponse",
    "LocationUpdate",
    "MapStateResponse",
    "MarkerVisualResponse",
]
