"""rn_listing REST endpoints.

GET /listings               — search; geo filter/sort when lat+lng are given
GET /listings/{listing_id}  — full detail
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Query, Request
from sqlalchemy.ext.asyncio import AsyncSession

from src.rn_common.backend import Repositories, get_repositories
from src.rn_common.database import get_db_session
from src.rn_common.enums import ListingSort
from src.rn_common.response import ApiResponse, request_success
from src.rn_gateway.auth.dependencies import get_current_user_id
from src.rn_listing.application.service import ListingApplicationService

router = APIRouter(prefix="/listings", tags=["listings"])


def _service(
    repos: Annotated[Repositories, Depends(get_repositories)],
) -> ListingApplicationService:
    return ListingApplicationService(repos.listings)


@router.get("")
async def search_listings(
    request: Request,
    user_id: Annotated[str, Depends(get_current_user_id)],
    db: Annotated[AsyncSession | None, Depends(get_db_session)],
    service: Annotated[ListingApplicationService, Depends(_service)],
    city: str | None = Query(None),
    max_price: int | None = Query(None, ge=0, description="Max monthly price (rupees)"),
    lat: float | None = Query(None, description="Origin latitude"),
    lng: float | None = Query(None, description="Origin longitude"),
    radius_km: float | None = Query(None, description="Only listings within this radius"),
    sort: ListingSort | None = Query(
        None, description="distance | price | newest (default: distance if lat/lng, else newest)"
    ),
    limit: int = Query(20, ge=1, le=100),
    offset: int = Query(0, ge=0),
) -> ApiResponse:
    result = await service.search(
        db, city, max_price, lat, lng, radius_km, sort, limit, offset
    )
    return request_success(request, result.model_dump())


@router.get("/{listing_id}")
async def get_listing(
    listing_id: str,
    request: Request,
    user_id: Annotated[str, Depends(get_current_user_id)],
    db: Annotated[AsyncSession | None, Depends(get_db_session)],
    service: Annotated[ListingApplicationService, Depends(_service)],
) -> ApiResponse:
    result = await service.get_listing(db, listing_id)
    return request_success(request, result.model_dump())
