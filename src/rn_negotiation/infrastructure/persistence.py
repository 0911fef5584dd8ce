# src/rn_negotiation/infrastructure/persistence.py
"""NegotiationRepository — raw SQL persistence implementation.

Each mutation is a single-row UPDATE of the mutable columns; original_price,
proposed_price and the party columns are written once on INSERT.
"""
from datetime import datetime
from typing import Any

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from src.rn_common.enums import NegotiationStatus, PartyRole
from src.rn_negotiation.domain.models import Negotiation

# ---------------------------------------------------------------------------
# SQL statements
# ---------------------------------------------------------------------------

_INSERT_NEGOTIATION_SQL = text("""
    INSERT INTO negotiations (id, listing_id, tenant_id, owner_id,
        original_price, proposed_price, duration_months, status,
        counter_offer, final_price, message, owner_response,
        created_at, expires_at, response_date, updated_at)
    VALUES (:id, :listing_id, :tenant_id, :owner_id,
        :original_price, :proposed_price, :duration_months, :status,
        :counter_offer, :final_price, :message, :owner_response,
        :created_at, :expires_at, :response_date, :updated_at)
""")

_UPDATE_NEGOTIATION_SQL = text("""
    UPDATE negotiations
    SET status = :status, counter_offer = :counter_offer,
        final_price = :final_price, owner_response = :owner_response,
        response_date = :response_date, updated_at = NOW()
    WHERE id = :id
""")

_SELECT_COLUMNS = """
    id, listing_id, tenant_id, owner_id,
    original_price, proposed_price, duration_months, status,
    counter_offer, final_price, message, owner_response,
    created_at, expires_at, response_date, updated_at
"""

_GET_NEGOTIATION_BY_ID_SQL = text(f"""
    SELECT {_SELECT_COLUMNS}
    FROM negotiations WHERE id = :id
""")

_LIST_NEGOTIATIONS_SQL = text(f"""
    SELECT {_SELECT_COLUMNS}
    FROM negotiations
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


_LIST_LAPSED_NEGOTIATIONS_SQL = text(f"""
    SELECT {_SELECT_COLUMNS}
    FROM negotiations
    WHERE
        (
            (CAST(:role AS TEXT) IS NULL AND (tenant_id = :user_id OR owner_id = :user_id))
            OR (CAST(:role AS TEXT) = 'tenant' AND tenant_id = :user_id)
            OR (CAST(:role AS TEXT) = 'owner' AND owner_id = :user_id)
        )
        AND status IN ('proposed', 'countered')
        AND expires_at IS NOT NULL
        AND expires_at < :now
""")


# ---------------------------------------------------------------------------
# Row mapper
# ---------------------------------------------------------------------------


def _row_to_negotiation(row: Any) -> Negotiation:
    """Convert a DB result row to a Negotiation domain object."""
    return Negotiation(
        id=row.id,
        listing_id=row.listing_id,
        tenant_id=row.tenant_id,
        owner_id=row.owner_id,
        original_price=row.original_price,
        proposed_price=row.proposed_price,
        duration_months=row.duration_months,
        status=NegotiationStatus(row.status),
        counter_offer=row.counter_offer,
        final_price=row.final_price,
        message=row.message,
        owner_response=row.owner_response,
        created_at=row.created_at,
        expires_at=row.expires_at,
        response_date=row.response_date,
        updated_at=row.updated_at,
    )


# ---------------------------------------------------------------------------
# Repository
# ---------------------------------------------------------------------------


class NegotiationRepository:
    """Concrete implementation of NegotiationRepositoryProtocol using raw SQL."""

    async def save(self, negotiation: Negotiation, db: AsyncSession) -> None:
        await db.execute(
            _INSERT_NEGOTIATION_SQL,
            {
                "id": negotiation.id,
                "listing_id": negotiation.listing_id,
                "tenant_id": negotiation.tenant_id,
                "owner_id": negotiation.owner_id,
                "original_price": negotiation.original_price,
                "proposed_price": negotiation.proposed_price,
                "duration_months": negotiation.duration_months,
                "status": negotiation.status.value,
                "counter_offer": negotiation.counter_offer,
                "final_price": negotiation.final_price,
                "message": negotiation.message,
                "owner_response": negotiation.owner_response,
                "created_at": negotiation.created_at,
                "expires_at": negotiation.expires_at,
                "response_date": negotiation.response_date,
                "updated_at": negotiation.updated_at,
            },
        )

    async def get_by_id(self, negotiation_id: str, db: AsyncSession) -> Negotiation | None:
        result = await db.execute(_GET_NEGOTIATION_BY_ID_SQL, {"id": negotiation_id})
        row = result.fetchone()
        return _row_to_negotiation(row) if row is not None else None

    async def update(self, negotiation: Negotiation, db: AsyncSession) -> None:
        await db.execute(
            _UPDATE_NEGOTIATION_SQL,
            {
                "id": negotiation.id,
                "status": negotiation.status.value,
                "counter_offer": negotiation.counter_offer,
                "final_price": negotiation.final_price,
                "owner_response": negotiation.owner_response,
                "response_date": negotiation.response_date,
            },
        )

    async def list_by_user(
        self,
        user_id: str,
        role: PartyRole | None,
        status: NegotiationStatus | None,
        limit: int,
        cursor_ts: datetime | None,
        cursor_id: str | None,
        db: AsyncSession,
    ) -> list[Negotiation]:
        result = await db.execute(
            _LIST_NEGOTIATIONS_SQL,
            {
                "user_id": user_id,
                "role": role.value if role else None,
                "status": status.value if status else None,
                "cursor_ts": cursor_ts,
                "cursor_id": cursor_id,
                "limit": limit,
            },
        )
        return [_row_to_negotiation(row) for row in result.fetchall()]

    async def list_lapsed_by_user(
        self,
        user_id: str,
        role: PartyRole | None,
        now: datetime,
        db: AsyncSession,
    ) -> list[Negotiation]:
        result = await db.execute(
            _LIST_LAPSED_NEGOTIATIONS_SQL,
            {"user_id": user_id, "role": role.value if role else None, "now": now},
        )
        return [_row_to_negotiation(row) for row in result.fetchall()]
