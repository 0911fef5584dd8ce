# src/rn_booking/domain/repository.py
"""BookingRepository Protocol — interface contract for persistence layer."""
from datetime import datetime
from typing import Protocol

from sqlalchemy.ext.asyncio import AsyncSession

from src.rn_booking.domain.models import Booking
from src.rn_common.enums import BookingStatus, PartyRole


class BookingRepositoryProtocol(Protocol):
    async def save(self, booking: Booking, db: AsyncSession | None) -> None: ...

    async def get_by_id(self, booking_id: str, db: AsyncSession | None) -> Booking | None: ...

    async def update(self, booking: Booking, db: AsyncSession | None) -> None: ...

    async def get_open_by_negotiation(
        self, negotiation_id: str, db: AsyncSession | None
    ) -> Booking | None: ...

    async def list_by_user(
        self,
        user_id: str,
        role: PartyRole | None,
        status: BookingStatus | None,
        limit: int,
        cursor_ts: datetime | None,
        cursor_id: str | None,
        db: AsyncSession | None,
    ) -> list[Booking]: ...
