# src/rn_booking/application/schemas.py
from datetime import date, datetime
from typing import Literal

from pydantic import BaseModel, Field

from src.rn_booking.domain.models import Booking
from src.rn_common.money import rupees_to_display


class CreateBookingRequest(BaseModel):
    listing_id: str
    negotiation_id: str | None = None
    move_in_date: date
    duration_months: int


class RecordPaymentRequest(BaseModel):
    payment_method: Literal["online", "offline"]
    transaction_id: str | None = Field(None, max_length=128)


class BookingResponse(BaseModel):
    id: str
    listing_id: str
    tenant_id: str
    owner_id: str
    negotiation_id: str | None
    monthly_rent: int
    security_deposit: int
    total_amount: int
    total_amount_display: str
    move_in_date: date
    duration_months: int
    status: str
    payment_status: str
    payment_method: str | None
    transaction_id: str | None
    tenant_confirmed_payment: bool
    owner_confirmed_payment: bool
    paid_at: datetime | None
    created_at: datetime | None
    updated_at: datetime | None

    @classmethod
    def from_domain(cls, b: Booking) -> "BookingResponse":
        return cls(
            id=b.id,
            listing_id=b.listing_id,
            tenant_id=b.tenant_id,
            owner_id=b.owner_id,
            negotiation_id=b.negotiation_id,
            monthly_rent=b.monthly_rent,
            security_deposit=b.security_deposit,
            total_amount=b.total_amount,
            total_amount_display=rupees_to_display(b.total_amount),
            move_in_date=b.move_in_date,
            duration_months=b.duration_months,
            status=b.status.value,
            payment_status=b.payment_status.value,
            payment_method=b.payment_method.value if b.payment_method else None,
            transaction_id=b.transaction_id,
            tenant_confirmed_payment=b.tenant_confirmed_payment,
            owner_confirmed_payment=b.owner_confirmed_payment,
            paid_at=b.paid_at,
            created_at=b.created_at,
            updated_at=b.updated_at,
        )


class BookingListResponse(BaseModel):
    items: list[BookingResponse]
    next_cursor: str | None
    has_more: bool
