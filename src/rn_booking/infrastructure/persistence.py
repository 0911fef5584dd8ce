# src/rn_booking/infrastructure/persistence.py
"""BookingRepository — raw SQL persistence implementation.

total_amount is derived from the stored columns and has no column of its own.
"""
from datetime import datetime
from typing import Any

from sqlalchemy import text
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from src.rn_booking.domain.models import Booking
from src.rn_common.enums import BookingStatus, PartyRole, PaymentMethod, PaymentStatus
from src.rn_common.errors import NegotiationNotBookableError

_OPEN_NEGOTIATION_CONSTRAINT = "uq_bookings_open_negotiation"

# ---------------------------------------------------------------------------
# SQL statements
# ---------------------------------------------------------------------------

_INSERT_BOOKING_SQL = text("""
    INSERT INTO bookings (id, listing_id, tenant_id, owner_id, negotiation_id,
        monthly_rent, security_deposit, move_in_date, duration_months,
        status, payment_status, payment_method, transaction_id,
        tenant_confirmed_payment, owner_confirmed_payment, paid_at,
        created_at, updated_at)
    VALUES (:id, :listing_id, :tenant_id, :owner_id, :negotiation_id,
        :monthly_rent, :security_deposit, :move_in_date, :duration_months,
        :status, :payment_status, :payment_method, :transaction_id,
        :tenant_confirmed_payment, :owner_confirmed_payment, :paid_at,
        :created_at, :updated_at)
""")

_UPDATE_BOOKING_SQL = text("""
    UPDATE bookings
    SET status = :status, payment_status = :payment_status,
        payment_method = :payment_method, transaction_id = :transaction_id,
        tenant_confirmed_payment = :tenant_confirmed_payment,
        owner_confirmed_payment = :owner_confirmed_payment,
        paid_at = :paid_at, updated_at = NOW()
    WHERE id = :id
""")

_SELECT_COLUMNS = """
    id, listing_id, tenant_id, owner_id, negotiation_id,
    monthly_rent, security_deposit, move_in_date, duration_months,
    status, payment_status, payment_method, transaction_id,
    tenant_confirmed_payment, owner_confirmed_payment, paid_at,
    created_at, updated_at
"""

_GET_BOOKING_BY_ID_SQL = text(f"""
    SELECT {_SELECT_COLUMNS}
    FROM bookings WHERE id = :id
""")

_GET_OPEN_BY_NEGOTIATION_SQL = text(f"""
    SELECT {_SELECT_COLUMNS}
    FROM bookings
    WHERE negotiation_id = :negotiation_id
      AND status IN ('pending', 'confirmed', 'active')
    LIMIT 1
""")

_LIST_BOOKINGS_SQL = text(f"""
    SELECT {_SELECT_COLUMNS}
    FROM bookings
    WHERE
        (
            (CAST(:role AS TEXT) IS NULL AND (tenant_id = :user_id OR owner_id = :user_id))
            OR (CAST(:role AS TEXT) = 'tenant' AND tenant_id = :user_id)
            OR (CAST(:role AS TEXT) = 'owner' AND owner_id = :user_id)
        )
        AND (CAST(:status AS TEXT) IS NULL OR status = CAST(:status AS TEXT))
        AND (
            CAST(:cursor_ts AS TIMESTAMPTZ) IS NULL
            OR created_at < CAST(:cursor_ts AS TIMESTAMPTZ)
            OR (
                created_at = CAST(:cursor_ts AS TIMESTAMPTZ)
                AND id < CAST(:cursor_id AS TEXT)
            )
        )
    ORDER BY created_at DESC, id DESC
    LIMIT :limit
""")


# ---------------------------------------------------------------------------
# Row mapper
# ---------------------------------------------------------------------------


def _row_to_booking(row: Any) -> Booking:
    """Convert a DB result row to a Booking domain object."""
    return Booking(
        id=row.id,
        listing_id=row.listing_id,
        tenant_id=row.tenant_id,
        owner_id=row.owner_id,
        negotiation_id=row.negotiation_id,
        monthly_rent=row.monthly_rent,
        security_deposit=row.security_deposit,
        move_in_date=row.move_in_date,
        duration_months=row.duration_months,
        status=BookingStatus(row.status),
        payment_status=PaymentStatus(row.payment_status),
        payment_method=PaymentMethod(row.payment_method) if row.payment_method else None,
        transaction_id=row.transaction_id,
        tenant_confirmed_payment=row.tenant_confirmed_payment,
        owner_confirmed_payment=row.owner_confirmed_payment,
        paid_at=row.paid_at,
        created_at=row.created_at,
        updated_at=row.updated_at,
    )


def _mutable_params(booking: Booking) -> dict[str, Any]:
    return {
        "id": booking.id,
        "status": booking.status.value,
        "payment_status": booking.payment_status.value,
        "payment_method": booking.payment_method.value if booking.payment_method else None,
        "transaction_id": booking.transaction_id,
        "tenant_confirmed_payment": booking.tenant_confirmed_payment,
        "owner_confirmed_payment": booking.owner_confirmed_payment,
        "paid_at": booking.paid_at,
    }


# ---------------------------------------------------------------------------
# Repository
# ---------------------------------------------------------------------------


class BookingRepository:
    """Concrete implementation of BookingRepositoryProtocol using raw SQL."""

    async def save(self, booking: Booking, db: AsyncSession) -> None:
        params = _mutable_params(booking)
        params.update(
            {
                "listing_id": booking.listing_id,
                "tenant_id": booking.tenant_id,
                "owner_id": booking.owner_id,
                "negotiation_id": booking.negotiation_id,
                "monthly_rent": booking.monthly_rent,
                "security_deposit": booking.security_deposit,
                "move_in_date": booking.move_in_date,
                "duration_months": booking.duration_months,
                "created_at": booking.created_at,
                "updated_at": booking.updated_at,
            }
        )
        try:
            await db.execute(_INSERT_BOOKING_SQL, params)
        except IntegrityError as e:
            # A concurrent request booked the same negotiation first
            if booking.negotiation_id and _OPEN_NEGOTIATION_CONSTRAINT in str(e.orig):
                raise NegotiationNotBookableError(
                    booking.negotiation_id, "already has an open booking"
                ) from e
            raise

    async def get_by_id(self, booking_id: str, db: AsyncSession) -> Booking | None:
        result = await db.execute(_GET_BOOKING_BY_ID_SQL, {"id": booking_id})
        row = result.fetchone()
        return _row_to_booking(row) if row is not None else None

    async def update(self, booking: Booking, db: AsyncSession) -> None:
        await db.execute(_UPDATE_BOOKING_SQL, _mutable_params(booking))

    async def get_open_by_negotiation(
        self, negotiation_id: str, db: AsyncSession
    ) -> Booking | None:
        result = await db.execute(
            _GET_OPEN_BY_NEGOTIATION_SQL, {"negotiation_id": negotiation_id}
        )
        row = result.fetchone()
        return _row_to_booking(row) if row is not None else None

    async def list_by_user(
        self,
        user_id: str,
        role: PartyRole | None,
        status: BookingStatus | None,
        limit: int,
        cursor_ts: datetime | None,
        cursor_id: str | None,
        db: AsyncSession,
    ) -> list[Booking]:
        result = await db.execute(
            _LIST_BOOKINGS_SQL,
            {
                "user_id": user_id,
                "role": role.value if role else None,
                "status": status.value if status else None,
                "cursor_ts": cursor_ts,
                "cursor_id": cursor_id,
                "limit": limit,
            },
        )
        return [_row_to_booking(row) for row in result.fetchall()]
