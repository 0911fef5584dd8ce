"""BookingApplicationService — turns a listing (and optionally an accepted
negotiation) into a pending booking, and serves booking reads.

The negotiation is only read, never written: once accepted it stays
accepted and is simply referenced by the booking.
"""

import logging
from collections.abc import Callable
from datetime import datetime

from sqlalchemy.ext.asyncio import AsyncSession

from src.rn_booking.application.schemas import (
    BookingListResponse,
    BookingResponse,
    CreateBookingRequest,
)
from src.rn_booking.domain.models import Booking
from src.rn_booking.domain.pricing import monthly_rent_for, quote
from src.rn_booking.domain.repository import BookingRepositoryProtocol
from src.rn_common.database import transaction
from src.rn_common.datetime_utils import utc_now
from src.rn_common.enums import BookingStatus, NegotiationStatus, PartyRole, PaymentStatus
from src.rn_common.errors import (
    BookingNotFoundError,
    InvalidBookingRequestError,
    ListingNotFoundError,
    NegotiationNotBookableError,
    NegotiationNotFoundError,
    NotBookingPartyError,
)
from src.rn_common.id_generator import BOOKING_PREFIX, generate_id
from src.rn_common.pagination import cursor_decode, cursor_encode
from src.rn_listing.domain.repository import ListingRepositoryProtocol
from src.rn_negotiation.domain.models import Negotiation
from src.rn_negotiation.domain.repository import NegotiationRepositoryProtocol

logger = logging.getLogger(__name__)


def role_in_booking(booking: Booking, actor_id: str) -> PartyRole:
    if actor_id == booking.tenant_id:
        return PartyRole.TENANT
    if actor_id == booking.owner_id:
        return PartyRole.OWNER
    raise NotBookingPartyError(booking.id)


class BookingApplicationService:
    def __init__(
        self,
        listing_repo: ListingRepositoryProtocol,
        negotiation_repo: NegotiationRepositoryProtocol,
        repo: BookingRepositoryProtocol,
        deposit_months: int,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        self._listings = listing_repo
        self._negotiations = negotiation_repo
        self._repo = repo
        self._deposit_months = deposit_months
        self._clock = clock

    async def create_booking(
        self, db: AsyncSession | None, tenant_id: str, req: CreateBookingRequest
    ) -> BookingResponse:
        if req.duration_months <= 0:
            raise InvalidBookingRequestError(
                f"duration_months must be at least 1, got {req.duration_months}"
            )
        now = self._clock()
        if req.move_in_date < now.date():
            raise InvalidBookingRequestError("move_in_date cannot be in the past")

        async with transaction(db):
            listing = await self._listings.get_by_id(req.listing_id, db)
            if listing is None:
                raise ListingNotFoundError(req.listing_id)

            negotiation = None
            if req.negotiation_id is not None:
                negotiation = await self._bookable_negotiation(
                    db, req.negotiation_id, tenant_id, listing.id
                )

            financials = quote(
                monthly_rent_for(listing, negotiation),
                req.duration_months,
                self._deposit_months,
            )
            booking = Booking(
                id=generate_id(BOOKING_PREFIX),
                listing_id=listing.id,
                tenant_id=tenant_id,
                owner_id=listing.owner_id,
                negotiation_id=negotiation.id if negotiation else None,
                monthly_rent=financials.monthly_rent,
                security_deposit=financials.security_deposit,
                move_in_date=req.move_in_date,
                duration_months=financials.duration_months,
                status=BookingStatus.PENDING,
                payment_status=PaymentStatus.PENDING,
                created_at=now,
                updated_at=now,
            )
            await self._repo.save(booking, db)

        logger.info(
            "Booking %s created for listing %s: rent %d x %d + deposit %d = %d (negotiation %s)",
            booking.id,
            listing.id,
            booking.monthly_rent,
            booking.duration_months,
            booking.security_deposit,
            booking.total_amount,
            booking.negotiation_id or "-",
        )
        return BookingResponse.from_domain(booking)

    async def get_booking(
        self, db: AsyncSession | None, booking_id: str, actor_id: str
    ) -> BookingResponse:
        booking = await self.load(db, booking_id)
        role_in_booking(booking, actor_id)
        return BookingResponse.from_domain(booking)

    async def list_bookings(
        self,
        db: AsyncSession | None,
        actor_id: str,
        role: PartyRole | None,
        status: BookingStatus | None,
        limit: int,
        cursor: str | None,
    ) -> BookingListResponse:
        cursor_ts, cursor_id = cursor_decode(cursor)
        rows = await self._repo.list_by_user(
            actor_id, role, status, limit + 1, cursor_ts, cursor_id, db
        )
        has_more = len(rows) > limit
        page = rows[:limit]
        last = page[-1] if page else None
        next_cursor = (
            cursor_encode(last.created_at, last.id)
            if has_more and last is not None and last.created_at is not None
            else None
        )
        return BookingListResponse(
            items=[BookingResponse.from_domain(b) for b in page],
            next_cursor=next_cursor,
            has_more=has_more,
        )

    async def load(self, db: AsyncSession | None, booking_id: str) -> Booking:
        booking = await self._repo.get_by_id(booking_id, db)
        if booking is None:
            raise BookingNotFoundError(booking_id)
        return booking

    async def _bookable_negotiation(
        self,
        db: AsyncSession | None,
        negotiation_id: str,
        tenant_id: str,
        listing_id: str,
    ) -> Negotiation:
        negotiation = await self._negotiations.get_by_id(negotiation_id, db)
        if negotiation is None:
            raise NegotiationNotFoundError(negotiation_id)
        if negotiation.status != NegotiationStatus.ACCEPTED:
            raise NegotiationNotBookableError(
                negotiation_id, f"status is {negotiation.status.value}, not accepted"
            )
        if negotiation.tenant_id != tenant_id:
            raise NegotiationNotBookableError(negotiation_id, "belongs to another tenant")
        if negotiation.listing_id != listing_id:
            raise NegotiationNotBookableError(negotiation_id, "was made on a different listing")
        if await self._repo.get_open_by_negotiation(negotiation_id, db) is not None:
            raise NegotiationNotBookableError(negotiation_id, "already has an open booking")
        return negotiation
