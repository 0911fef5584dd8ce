"""Negotiation domain model — pure dataclass, no SQLAlchemy dependency."""
from dataclasses import dataclass
from datetime import datetime

from src.rn_common.enums import NegotiationStatus

TERMINAL_STATUSES = frozenset(
    {NegotiationStatus.ACCEPTED, NegotiationStatus.REJECTED, NegotiationStatus.EXPIRED}
)


@dataclass
class Negotiation:
    id: str
    listing_id: str
    tenant_id: str  # proposing party
    owner_id: str  # responding party, copied from the listing
    # Listing price at proposal time; never changes afterwards
    original_price: int
    proposed_price: int
    duration_months: int
    status: NegotiationStatus = NegotiationStatus.PROPOSED
    counter_offer: int | None = None
    # Set if and only if status == accepted
    final_price: int | None = None
    message: str | None = None  # tenant's note with the proposal
    owner_response: str | None = None
    created_at: datetime | None = None
    expires_at: datetime | None = None
    response_date: datetime | None = None
    updated_at: datetime | None = None

    @property
    def is_terminal(self) -> bool:
        return self.status in TERMINAL_STATUSES

    @property
    def savings(self) -> int | None:
        """Monthly discount won against the listing price; None until accepted."""
        if self.final_price is None:
            return None
        return self.original_price - self.final_price

    def is_lapsed(self, now: datetime) -> bool:
        """Past its deadline but not yet marked expired."""
        return (
            not self.is_terminal
            and self.expires_at is not None
            and self.expires_at < now
        )
