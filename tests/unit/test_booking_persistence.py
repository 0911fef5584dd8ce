"""Unit tests for BookingRepository using MagicMock AsyncSession."""
from datetime import UTC, date, datetime
from typing import Any
from unittest.mock import AsyncMock, MagicMock

import pytest
from sqlalchemy.exc import IntegrityError

from src.rn_booking.domain.models import Booking
from src.rn_booking.infrastructure.persistence import BookingRepository
from src.rn_common.enums import BookingStatus, PaymentMethod, PaymentStatus
from src.rn_common.errors import NegotiationNotBookableError


def _make_row(**kwargs: Any) -> MagicMock:
    row = MagicMock()
    row.id = kwargs.get("id", "bkg_1")
    row.listing_id = kwargs.get("listing_id", "lst_1")
    row.tenant_id = kwargs.get("tenant_id", "tenant-1")
    row.owner_id = kwargs.get("owner_id", "owner-1")
    row.negotiation_id = kwargs.get("negotiation_id", "neg_1")
    row.monthly_rent = kwargs.get("monthly_rent", 18000)
    row.security_deposit = kwargs.get("security_deposit", 18000)
    row.move_in_date = kwargs.get("move_in_date", date(2026, 10, 1))
    row.duration_months = kwargs.get("duration_months", 6)
    row.status = kwargs.get("status", "pending")
    row.payment_status = kwargs.get("payment_status", "pending")
    row.payment_method = kwargs.get("payment_method")
    row.transaction_id = kwargs.get("transaction_id")
    row.tenant_confirmed_payment = kwargs.get("tenant_confirmed_payment", False)
    row.owner_confirmed_payment = kwargs.get("owner_confirmed_payment", False)
    row.paid_at = kwargs.get("paid_at")
    row.created_at = kwargs.get("created_at", datetime.now(UTC))
    row.updated_at = kwargs.get("updated_at", datetime.now(UTC))
    return row


def _make_booking(**kwargs: Any) -> Booking:
    defaults = dict(
        id="bkg_1", listing_id="lst_1", tenant_id="tenant-1", owner_id="owner-1",
        monthly_rent=18000, security_deposit=18000,
        move_in_date=date(2026, 10, 1), duration_months=6,
        created_at=datetime.now(UTC),
    )
    defaults.update(kwargs)
    return Booking(**defaults)


def _db_returning(row: Any) -> MagicMock:
    result = MagicMock()
    result.fetchone.return_value = row
    db = MagicMock()
    db.execute = AsyncMock(return_value=result)
    return db


class TestBookingRepository:
    @pytest.mark.asyncio
    async def test_save_binds_all_columns(self) -> None:
        db = MagicMock()
        db.execute = AsyncMock()
        await BookingRepository().save(_make_booking(), db)
        params = db.execute.call_args.args[1]
        assert params["status"] == "pending"
        assert params["payment_method"] is None
        assert params["security_deposit"] == 18000
        assert params["move_in_date"] == date(2026, 10, 1)

    @pytest.mark.asyncio
    async def test_save_duplicate_open_booking_is_not_bookable(self) -> None:
        db = MagicMock()
        db.execute = AsyncMock(side_effect=IntegrityError(
            "INSERT INTO bookings ...", {},
            Exception('duplicate key violates unique constraint "uq_bookings_open_negotiation"'),
        ))
        with pytest.raises(NegotiationNotBookableError) as exc_info:
            await BookingRepository().save(_make_booking(negotiation_id="neg_1"), db)
        assert exc_info.value.code == 4003
        assert exc_info.value.http_status == 409

    @pytest.mark.asyncio
    async def test_save_other_integrity_errors_propagate(self) -> None:
        db = MagicMock()
        db.execute = AsyncMock(side_effect=IntegrityError(
            "INSERT INTO bookings ...", {}, Exception("violates foreign key constraint"),
        ))
        with pytest.raises(IntegrityError):
            await BookingRepository().save(_make_booking(negotiation_id="neg_1"), db)

    @pytest.mark.asyncio
    async def test_get_by_id_maps_enums(self) -> None:
        db = _db_returning(_make_row(
            status="confirmed", payment_status="paid", payment_method="online",
            transaction_id="txn_1",
        ))
        b = await BookingRepository().get_by_id("bkg_1", db)
        assert b is not None
        assert b.status == BookingStatus.CONFIRMED
        assert b.payment_status == PaymentStatus.PAID
        assert b.payment_method == PaymentMethod.ONLINE
        assert b.total_amount == 126000

    @pytest.mark.asyncio
    async def test_get_open_by_negotiation_none(self) -> None:
        db = _db_returning(None)
        assert await BookingRepository().get_open_by_negotiation("neg_1", db) is None

    @pytest.mark.asyncio
    async def test_update_params(self) -> None:
        db = MagicMock()
        db.execute = AsyncMock()
        b = _make_booking(status=BookingStatus.CANCELLED, payment_method=PaymentMethod.OFFLINE)
        await BookingRepository().update(b, db)
        params = db.execute.call_args.args[1]
        assert params["status"] == "cancelled"
        assert params["payment_method"] == "offline"
        assert "monthly_rent" not in params
