"""Booking financials.

    monthly_rent     = negotiation.final_price   (accepted negotiation)
                     | listing.monthly_price     (direct booking)
    security_deposit = monthly_rent * deposit_months   (platform policy)
    total_amount     = monthly_rent * duration + security_deposit
"""

from dataclasses import dataclass

from src.rn_common.enums import NegotiationStatus
from src.rn_listing.domain.models import Listing
from src.rn_negotiation.domain.models import Negotiation


@dataclass(frozen=True)
class BookingQuote:
    monthly_rent: int
    security_deposit: int
    duration_months: int

    @property
    def total_amount(self) -> int:
        return self.monthly_rent * self.duration_months + self.security_deposit


def monthly_rent_for(listing: Listing, negotiation: Negotiation | None) -> int:
    """Rent the booking is charged at; never above an accepted negotiated price."""
    if negotiation is None:
        return listing.monthly_price
    if negotiation.status != NegotiationStatus.ACCEPTED or negotiation.final_price is None:
        raise ValueError(f"negotiation {negotiation.id} has no agreed price")
    return negotiation.final_price


def quote(monthly_rent: int, duration_months: int, deposit_months: int) -> BookingQuote:
    if duration_months <= 0:
        raise ValueError(f"duration_months must be at least 1, got {duration_months}")
    if deposit_months < 0:
        raise ValueError(f"deposit_months must not be negative, got {deposit_months}")
    return BookingQuote(
        monthly_rent=monthly_rent,
        security_deposit=monthly_rent * deposit_months,
        duration_months=duration_months,
    )
