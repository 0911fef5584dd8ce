"""In-memory listing store, optionally seeded from a JSON fixture.

Fixture format (list of objects):
    [{"id": "lst_1", "title": "...", "address": "...", "city": "Delhi",
      "monthly_price": 20000, "owner_id": "owner-1",
      "lat": 28.61, "lng": 77.20, "amenities": ["wifi", "ac"],
      "created_at": "2026-08-01T10:00:00+00:00"}]

``created_at`` is optional and defaults to load time.
"""

import json
import logging
from datetime import UTC, datetime
from pathlib import Path
from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession

from src.rn_common.datetime_utils import utc_now
from src.rn_common.id_generator import LISTING_PREFIX, generate_id
from src.rn_geo.point import GeoPoint
from src.rn_listing.domain.models import Listing

logger = logging.getLogger(__name__)

_OLDEST = datetime.min.replace(tzinfo=UTC)


def listing_from_dict(data: dict[str, Any]) -> Listing:
    lat, lng = data.get("lat"), data.get("lng")
    coordinates = None
    if lat is not None and lng is not None:
        coordinates = GeoPoint(lat=float(lat), lng=float(lng))
    return Listing(
        id=data.get("id") or generate_id(LISTING_PREFIX),
        title=data["title"],
        address=data.get("address", ""),
        city=data.get("city", ""),
        monthly_price=int(data["monthly_price"]),
        owner_id=str(data["owner_id"]),
        coordinates=coordinates,
        amenities=list(data.get("amenities", [])),
        created_at=(
            datetime.fromisoformat(data["created_at"]) if data.get("created_at") else utc_now()
        ),
    )


class InMemoryListingRepository:
    def __init__(self) -> None:
        self._listings: dict[str, Listing] = {}

    def add(self, listing: Listing) -> None:
        self._listings[listing.id] = listing

    def load_seed(self, path: Path | str) -> int:
        """Load listings from a JSON fixture file. Returns the number loaded."""
        with open(path, encoding="utf-8") as f:
            records = json.load(f)
        for record in records:
            self.add(listing_from_dict(record))
        logger.info("Loaded %d listings from %s", len(records), path)
        return len(records)

    async def get_by_id(self, listing_id: str, db: AsyncSession | None) -> Listing | None:
        return self._listings.get(listing_id)

    async def list_listings(
        self,
        city: str | None,
        max_price: int | None,
        db: AsyncSession | None,
    ) -> list[Listing]:
        result = [
            listing
            for listing in self._listings.values()
            if (city is None or listing.city.lower() == city.lower())
            and (max_price is None or listing.monthly_price <= max_price)
        ]
        # created_at DESC, id DESC, matching the SQL store
        result.sort(key=lambda listing: (listing.created_at or _OLDEST, listing.id), reverse=True)
        return result
