# src/rn_listing/domain/repository.py
"""Repository Protocol — dependency inversion for testability.

Two implementations exist: the in-memory fixture store and the SQL store.
Both accept the session argument; the memory store ignores it.
"""

from typing import Protocol

from sqlalchemy.ext.asyncio import AsyncSession

from src.rn_listing.domain.models import Listing


class ListingRepositoryProtocol(Protocol):
    async def get_by_id(
        self,
        listing_id: str,
        db: AsyncSession | None,
    ) -> Listing | None: ...

    async def list_listings(
        self,
        city: str | None,
        max_price: int | None,
        db: AsyncSession | None,
    ) -> list[Listing]: ...
