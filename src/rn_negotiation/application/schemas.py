# src/rn_negotiation/application/schemas.py
from datetime import datetime
from typing import Literal

from pydantic import BaseModel, Field

from src.rn_negotiation.domain.models import Negotiation


class ProposeNegotiationRequest(BaseModel):
    listing_id: str
    proposed_price: int
    duration_months: int = 1
    message: str | None = Field(None, max_length=1000)


class RespondNegotiationRequest(BaseModel):
    """Owner's response to a proposal, or a tenant's rejection of a counter."""

    action: Literal["counter", "accept", "reject"]
    counter_offer: int | None = None
    message: str | None = Field(None, max_length=1000)


class NegotiationResponse(BaseModel):
    id: str
    listing_id: str
    tenant_id: str
    owner_id: str
    original_price: int
    proposed_price: int
    counter_offer: int | None
    final_price: int | None
    savings: int | None
    duration_months: int
    status: str
    message: str | None
    owner_response: str | None
    created_at: datetime | None
    expires_at: datetime | None
    response_date: datetime | None
    updated_at: datetime | None

    @classmethod
    def from_domain(cls, n: Negotiation) -> "NegotiationResponse":
        return cls(
            id=n.id,
            listing_id=n.listing_id,
            tenant_id=n.tenant_id,
            owner_id=n.owner_id,
            original_price=n.original_price,
            proposed_price=n.proposed_price,
            counter_offer=n.counter_offer,
            final_price=n.final_price,
            savings=n.savings,
            duration_months=n.duration_months,
            status=n.status.value,
            message=n.message,
            owner_response=n.owner_response,
            created_at=n.created_at,
            expires_at=n.expires_at,
            response_date=n.response_date,
            updated_at=n.updated_at,
        )


class AcceptCounterResponse(BaseModel):
    negotiation: NegotiationResponse
    can_book: bool
    final_price: int
    savings: int


class NegotiationListResponse(BaseModel):
    items: list[NegotiationResponse]
    next_cursor: str | None
    has_more: bool
