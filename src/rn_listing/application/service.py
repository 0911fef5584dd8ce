"""ListingApplicationService — read-only listing discovery.

The repository narrows by city and price; geo filtering and ranking happen
here, in memory, at query time.
"""

from sqlalchemy.ext.asyncio import AsyncSession

from src.rn_common.enums import ListingSort
from src.rn_common.errors import InvalidGeoQueryError, ListingNotFoundError
from src.rn_geo.distance import filter_by_distance, sort_by_distance
from src.rn_geo.point import GeoPoint
from src.rn_listing.application.schemas import ListingListResponse, ListingOut
from src.rn_listing.domain.repository import ListingRepositoryProtocol


def _origin(lat: float | None, lng: float | None) -> GeoPoint | None:
    if lat is None and lng is None:
        return None
    if lat is None or lng is None:
        raise InvalidGeoQueryError("lat and lng must be given together")
    try:
        return GeoPoint(lat=lat, lng=lng)
    except ValueError as e:
        raise InvalidGeoQueryError(str(e)) from None


class ListingApplicationService:
    def __init__(self, repo: ListingRepositoryProtocol) -> None:
        self._repo = repo

    async def get_listing(self, db: AsyncSession | None, listing_id: str) -> ListingOut:
        listing = await self._repo.get_by_id(listing_id, db)
        if listing is None:
            raise ListingNotFoundError(listing_id)
        return ListingOut.from_domain(listing)

    async def search(
        self,
        db: AsyncSession | None,
        city: str | None,
        max_price: int | None,
        lat: float | None,
        lng: float | None,
        radius_km: float | None,
        sort: ListingSort | None,
        limit: int,
        offset: int,
    ) -> ListingListResponse:
        origin = _origin(lat, lng)
        if origin is None and radius_km is not None:
            raise InvalidGeoQueryError("radius_km requires lat and lng")
        if origin is None and sort == ListingSort.DISTANCE:
            raise InvalidGeoQueryError("sort=distance requires lat and lng")
        if radius_km is not None and radius_km < 0:
            raise InvalidGeoQueryError("radius_km must not be negative")

        # Default: nearest first when an origin is given, else newest first
        sort = sort or (ListingSort.DISTANCE if origin else ListingSort.NEWEST)

        listings = await self._repo.list_listings(city, max_price, db)
        if origin is not None and radius_km is not None:
            listings = filter_by_distance(listings, origin, radius_km)

        if origin is not None:
            ranked = sort_by_distance(listings, origin)
            if sort == ListingSort.PRICE:
                ranked = sorted(ranked, key=lambda r: r.item.monthly_price)
            elif sort == ListingSort.NEWEST:
                # repository order is already newest first
                position = {listing.id: i for i, listing in enumerate(listings)}
                ranked = sorted(ranked, key=lambda r: position[r.item.id])
            rows = [(r.item, r.distance_km) for r in ranked]
        else:
            if sort == ListingSort.PRICE:
                listings = sorted(listings, key=lambda listing: listing.monthly_price)
            rows = [(listing, None) for listing in listings]

        page = rows[offset:offset + limit]
        return ListingListResponse(
            items=[ListingOut.from_domain(listing, dist) for listing, dist in page],
            total=len(rows),
            has_more=offset + limit < len(rows),
        )
