"""Pydantic schemas for rn_listing API responses."""

from pydantic import BaseModel

from src.rn_common.money import rupees_to_display
from src.rn_geo.distance import format_distance
from src.rn_listing.domain.models import Listing


class CoordinatesOut(BaseModel):
    lat: float
    lng: float


class ListingOut(BaseModel):
    id: str
    title: str
    address: str
    city: str
    monthly_price: int
    monthly_price_display: str
    owner_id: str
    coordinates: CoordinatesOut | None
    amenities: list[str]
    created_at: str | None
    # Present only when the query carried an origin
    distance_km: float | None = None
    distance_display: str | None = None

    @classmethod
    def from_domain(cls, listing: Listing, distance_km: float | None = None) -> "ListingOut":
        coords = listing.coordinates
        has_distance = distance_km is not None and distance_km != float("inf")
        return cls(
            id=listing.id,
            title=listing.title,
            address=listing.address,
            city=listing.city,
            monthly_price=listing.monthly_price,
            monthly_price_display=rupees_to_display(listing.monthly_price),
            owner_id=listing.owner_id,
            coordinates=CoordinatesOut(lat=coords.lat, lng=coords.lng) if coords else None,
            amenities=listing.amenities,
            created_at=listing.created_at.isoformat() if listing.created_at else None,
            distance_km=round(distance_km, 3) if has_distance else None,
            distance_display=format_distance(distance_km) if has_distance else None,
        )


class ListingListResponse(BaseModel):
    items: list[ListingOut]
    total: int
    has_more: bool
