"""ListingRepository — concrete implementation of ListingRepositoryProtocol.

All queries use raw text() SQL (no ORM). Listings are read-only here.
asyncpg NULL parameter pattern: CAST(:param AS TYPE) IS NULL required for None values.
"""

from typing import Any

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from src.rn_geo.point import GeoPoint
from src.rn_listing.domain.models import Listing

# ---------------------------------------------------------------------------
# SQL
# ---------------------------------------------------------------------------

_SELECT_COLUMNS = """
    id, title, address, city, monthly_price, owner_id,
    latitude, longitude, amenities, created_at
"""

_GET_LISTING_SQL = text(f"""
    SELECT {_SELECT_COLUMNS}
    FROM listings
    WHERE id = :listing_id
""")

_LIST_LISTINGS_SQL = text(f"""
    SELECT {_SELECT_COLUMNS}
    FROM listings
    WHERE
        (CAST(:city AS TEXT) IS NULL OR lower(city) = lower(CAST(:city AS TEXT)))
        AND (CAST(:max_price AS BIGINT) IS NULL OR monthly_price <= CAST(:max_price AS BIGINT))
    ORDER BY created_at DESC, id DESC
""")

# ---------------------------------------------------------------------------
# Row mapper
# ---------------------------------------------------------------------------


def _row_to_listing(row: Any) -> Listing:
    coordinates = None
    if row.latitude is not None and row.longitude is not None:
        coordinates = GeoPoint(lat=float(row.latitude), lng=float(row.longitude))
    return Listing(
        id=row.id,
        title=row.title,
        address=row.address,
        city=row.city,
        monthly_price=row.monthly_price,
        owner_id=row.owner_id,
        coordinates=coordinates,
        amenities=list(row.amenities or []),
        created_at=row.created_at,
    )


# ---------------------------------------------------------------------------
# Repository
# ---------------------------------------------------------------------------


class ListingRepository:
    """Concrete repository — all operations are read-only SQL queries."""

    async def get_by_id(self, listing_id: str, db: AsyncSession) -> Listing | None:
        result = await db.execute(_GET_LISTING_SQL, {"listing_id": listing_id})
        row = result.fetchone()
        return _row_to_listing(row) if row is not None else None

    async def list_listings(
        self,
        city: str | None,
        max_price: int | None,
        db: AsyncSession,
    ) -> list[Listing]:
        result = await db.execute(
            _LIST_LISTINGS_SQL, {"city": city, "max_price": max_price}
        )
        return [_row_to_listing(row) for row in result.fetchall()]
