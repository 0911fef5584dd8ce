"""Domain models for rn_listing — pure dataclasses, no business logic."""

from dataclasses import dataclass, field
from datetime import datetime

from src.rn_geo.point import GeoPoint


@dataclass
class Listing:
    id: str
    title: str
    address: str
    city: str
    monthly_price: int  # whole rupees
    owner_id: str
    coordinates: GeoPoint | None = None
    amenities: list[str] = field(default_factory=list)
    created_at: datetime | None = None
