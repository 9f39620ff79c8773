"""Location model for DB persistence."""
import uuid
from typing import Any

from sqlalchemy import Float, Integer, String
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.types import JSON

from models import Base


class Location(Base):
    """Location table: id, position, name, address, lat, lng, stage, marker, businesses."""

    __tablename__ = "location"

    id: Mapped[str] = mapped_column(
        String(36),
        primary_key=True,
        default=lambda: str(uuid.uuid4()),
    )
    # Insertion order; listing follows it.
    position: Mapped[int] = mapped_column(Integer, nullable=False, default=0, index=True)
    name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    address: Mapped[str] = mapped_column(String(512), nullable=False, default="")
    # Not range-checked here; legacy rows may hold null or out-of-range values.
    lat: Mapped[float | None] = mapped_column(Float, nullable=True)
    lng: Mapped[float | None] = mapped_column(Float, nullable=True)
    stage: Mapped[str] = mapped_column(String(32), nullable=False, default="survey")
    # {type?, color?, icon?}; older rows have no type or no marker at all.
    marker: Mapped[dict | None] = mapped_column(JSON(), nullable=True)
    # Ordered list of {name, category, phone, description?, active?}.
    businesses: Mapped[list] = mapped_column(JSON(), nullable=False, default=list)

    def as_record(self) -> dict[str, Any]:
        """Plain dict in the shape the map viewer consumes."""
        return {
            "id": self.id,
            "name": self.name,
            "address": self.address,
            "lat": self.lat,
            "lng": self.lng,
            "stage": self.stage,
            "marker": dict(self.marker) if self.marker is not None else None,
            "businesses": [dict(b) for b in (self.businesses or [])],
        }
