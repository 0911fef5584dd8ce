"""In-memory booking store (fixture backend)."""
import copy
from datetime import datetime

from sqlalchemy.ext.asyncio import AsyncSession

from src.rn_booking.domain.models import Booking
from src.rn_common.enums import BookingStatus, PartyRole
from src.rn_common.pagination import is_after_cursor


class InMemoryBookingRepository:
    def __init__(self) -> None:
        self._rows: dict[str, Booking] = {}

    async def save(self, booking: Booking, db: AsyncSession | None) -> None:
        self._rows[booking.id] = copy.deepcopy(booking)

    async def get_by_id(self, booking_id: str, db: AsyncSession | None) -> Booking | None:
        row = self._rows.get(booking_id)
        return copy.deepcopy(row) if row is not None else None

    async def update(self, booking: Booking, db: AsyncSession | None) -> None:
        if booking.id in self._rows:
            self._rows[booking.id] = copy.deepcopy(booking)

    async def get_open_by_negotiation(
        self, negotiation_id: str, db: AsyncSession | None
    ) -> Booking | None:
        for booking in self._rows.values():
            if booking.negotiation_id == negotiation_id and booking.is_open:
                return copy.deepcopy(booking)
        return None

    async def list_by_user(
        self,
        user_id: str,
        role: PartyRole | None,
        status: BookingStatus | None,
        limit: int,
        cursor_ts: datetime | None,
        cursor_id: str | None,
        db: AsyncSession | None,
    ) -> list[Booking]:
        def _matches(b: Booking) -> bool:
            if role == PartyRole.TENANT and b.tenant_id != user_id:
                return False
            if role == PartyRole.OWNER and b.owner_id != user_id:
                return False
            if role is None and user_id not in (b.tenant_id, b.owner_id):
                return False
            if status is not None and b.status != status:
                return False
            return b.created_at is not None and is_after_cursor(
                b.created_at, b.id, cursor_ts, cursor_id
            )

        rows = sorted(
            (b for b in self._rows.values() if _matches(b)),
            key=lambda b: (b.created_at, b.id),
            reverse=True,
        )
        return [copy.deepcopy(b) for b in rows[:limit]]
