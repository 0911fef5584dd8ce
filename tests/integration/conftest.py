"""Integration-test fixtures.

Runs the full ASGI app against the in-memory backend: no Docker, no
migrations. Listings are seeded straight into the memory repository.
"""

from datetime import UTC, datetime, timedelta

import pytest
from httpx import AsyncClient

from src.main import app
from src.rn_gateway.auth.jwt_handler import issue_access_token
from src.rn_geo.point import GeoPoint
from src.rn_listing.domain.models import Listing

TENANT = "tenant-priya"
OWNER = "owner-anita"


def _auth(user_id: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {issue_access_token(user_id)}"}


@pytest.fixture
async def seeded(client: AsyncClient) -> AsyncClient:
    """Client whose repositories hold three Delhi-NCR listings."""
    listings = app.state.repositories.listings
    t0 = datetime.now(UTC) - timedelta(days=3)
    listings.add(Listing(
        id="lst_cp", title="Room near Connaught Place", address="Block B",
        city="Delhi", monthly_price=20000, owner_id=OWNER,
        coordinates=GeoPoint(lat=28.6315, lng=77.2167), amenities=["wifi"],
        created_at=t0,
    ))
    listings.add(Listing(
        id="lst_ggn", title="Studio near Cyber City", address="DLF Phase 2",
        city="Gurugram", monthly_price=22000, owner_id=OWNER,
        coordinates=GeoPoint(lat=28.4595, lng=77.0266), created_at=t0 + timedelta(days=1),
    ))
    listings.add(Listing(
        id="lst_ln", title="Room in Laxmi Nagar", address="Laxmi Nagar",
        city="Delhi", monthly_price=7000, owner_id="owner-rahul",
        created_at=t0 + timedelta(days=2),
    ))
    return client


@pytest.fixture
def tenant_headers() -> dict[str, str]:
    return _auth(TENANT)


@pytest.fixture
def owner_headers() -> dict[str, str]:
    return _auth(OWNER)


@pytest.fixture
def stranger_headers() -> dict[str, str]:
    return _auth("someone-else")
