"""PaymentApplicationService — settles pending bookings.

Thin composition over ``payment_policy``: load the booking, check who is
acting, apply the policy, save. Kept apart from the booking materializer,
which never changes a booking after creating it.
"""

from collections.abc import Callable
from datetime import datetime

from sqlalchemy.ext.asyncio import AsyncSession

from src.rn_booking.application.schemas import BookingResponse, RecordPaymentRequest
from src.rn_booking.application.service import role_in_booking
from src.rn_booking.domain import payment_policy
from src.rn_booking.domain.models import Booking
from src.rn_booking.domain.repository import BookingRepositoryProtocol
from src.rn_common.database import transaction
from src.rn_common.datetime_utils import utc_now
from src.rn_common.enums import PartyRole, PaymentMethod
from src.rn_common.errors import BookingNotFoundError, TenantOnlyPaymentError


class PaymentApplicationService:
    def __init__(
        self,
        repo: BookingRepositoryProtocol,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        self._repo = repo
        self._clock = clock

    async def record_payment(
        self,
        db: AsyncSession | None,
        booking_id: str,
        actor_id: str,
        req: RecordPaymentRequest,
    ) -> BookingResponse:
        async with transaction(db):
            booking = await self._load(db, booking_id)
            if role_in_booking(booking, actor_id) != PartyRole.TENANT:
                raise TenantOnlyPaymentError(booking_id)
            payment_policy.record_payment(
                booking, PaymentMethod(req.payment_method), req.transaction_id, self._clock()
            )
            await self._repo.update(booking, db)
        return BookingResponse.from_domain(booking)

    async def confirm_offline_payment(
        self, db: AsyncSession | None, booking_id: str, actor_id: str
    ) -> BookingResponse:
        async with transaction(db):
            booking = await self._load(db, booking_id)
            role = role_in_booking(booking, actor_id)
            payment_policy.confirm_offline_payment(booking, role, self._clock())
            await self._repo.update(booking, db)
        return BookingResponse.from_domain(booking)

    async def cancel_booking(
        self, db: AsyncSession | None, booking_id: str, actor_id: str
    ) -> BookingResponse:
        async with transaction(db):
            booking = await self._load(db, booking_id)
            role_in_booking(booking, actor_id)
            payment_policy.cancel(booking, self._clock())
            await self._repo.update(booking, db)
        return BookingResponse.from_domain(booking)

    async def _load(self, db: AsyncSession | None, booking_id: str) -> Booking:
        booking = await self._repo.get_by_id(booking_id, db)
        if booking is None:
            raise BookingNotFoundError(booking_id)
        return booking
