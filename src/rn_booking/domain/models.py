"""Booking domain model — pure dataclass, no SQLAlchemy dependency."""
from dataclasses import dataclass
from datetime import date, datetime

from src.rn_common.enums import BookingStatus, PaymentMethod, PaymentStatus


@dataclass
class Booking:
    id: str
    listing_id: str
    tenant_id: str
    owner_id: str
    # Negotiated final price when negotiation_id is set, else the listing price
    monthly_rent: int
    security_deposit: int
    move_in_date: date
    duration_months: int
    negotiation_id: str | None = None
    status: BookingStatus = BookingStatus.PENDING
    payment_status: PaymentStatus = PaymentStatus.PENDING
    payment_method: PaymentMethod | None = None
    transaction_id: str | None = None
    # Offline payments need both sides to confirm
    tenant_confirmed_payment: bool = False
    owner_confirmed_payment: bool = False
    paid_at: datetime | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @property
    def total_amount(self) -> int:
        """Derived, never stored: rent for the whole stay plus the deposit."""
        return self.monthly_rent * self.duration_months + self.security_deposit

    @property
    def is_paid(self) -> bool:
        return self.payment_status == PaymentStatus.PAID

    @property
    def is_open(self) -> bool:
        """Still holds the listing/negotiation (not cancelled or finished)."""
        return self.status in (
            BookingStatus.PENDING,
            BookingStatus.CONFIRMED,
            BookingStatus.ACTIVE,
        )
