"""NegotiationApplicationService — the negotiation lifecycle.

Every action runs one read-modify-write of a single negotiation row:
load, resolve the caller's side, evaluate expiry, plan the transition,
apply it, save. Expiry is lazy: a lapsed negotiation is marked ``expired``
(and that write is committed) the first time anyone touches it, and the
requested action then fails with NegotiationExpiredError.
"""

import logging
from collections.abc import Callable
from datetime import datetime

from sqlalchemy.ext.asyncio import AsyncSession

from src.rn_common.database import transaction
from src.rn_common.datetime_utils import expiry_from, utc_now
from src.rn_common.enums import NegotiationAction, NegotiationStatus, PartyRole
from src.rn_common.errors import (
    InvalidNegotiationStateError,
    InvalidOfferError,
    NegotiationExpiredError,
    NegotiationNotFoundError,
    UnknownListingError,
)
from src.rn_common.id_generator import NEGOTIATION_PREFIX, generate_id
from src.rn_common.money import validate_amount
from src.rn_common.pagination import cursor_decode, cursor_encode
from src.rn_listing.domain.repository import ListingRepositoryProtocol
from src.rn_negotiation.application.schemas import (
    AcceptCounterResponse,
    NegotiationListResponse,
    NegotiationResponse,
    ProposeNegotiationRequest,
    RespondNegotiationRequest,
)
from src.rn_negotiation.domain.models import Negotiation
from src.rn_negotiation.domain.repository import NegotiationRepositoryProtocol
from src.rn_negotiation.domain.state_machine import (
    apply_transition,
    expire,
    plan_transition,
    require_action_role,
    role_of,
)

logger = logging.getLogger(__name__)


def _check_amount(amount: int, field: str) -> None:
    try:
        validate_amount(amount, field)
    except ValueError as e:
        raise InvalidOfferError(str(e)) from None


class NegotiationApplicationService:
    def __init__(
        self,
        listing_repo: ListingRepositoryProtocol,
        repo: NegotiationRepositoryProtocol,
        ttl_hours: int,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        self._listings = listing_repo
        self._repo = repo
        self._ttl_hours = ttl_hours
        self._clock = clock

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    async def propose(
        self, db: AsyncSession | None, tenant_id: str, req: ProposeNegotiationRequest
    ) -> NegotiationResponse:
        _check_amount(req.proposed_price, "proposed_price")
        if req.duration_months <= 0:
            raise InvalidOfferError(
                f"duration_months must be at least 1, got {req.duration_months}"
            )

        async with transaction(db):
            listing = await self._listings.get_by_id(req.listing_id, db)
            if listing is None:
                raise UnknownListingError(req.listing_id)
            if listing.owner_id == tenant_id:
                raise InvalidOfferError("owners cannot negotiate on their own listing")

            now = self._clock()
            negotiation = Negotiation(
                id=generate_id(NEGOTIATION_PREFIX),
                listing_id=listing.id,
                tenant_id=tenant_id,
                owner_id=listing.owner_id,
                original_price=listing.monthly_price,
                proposed_price=req.proposed_price,
                duration_months=req.duration_months,
                status=NegotiationStatus.PROPOSED,
                message=req.message,
                created_at=now,
                expires_at=expiry_from(now, self._ttl_hours),
                updated_at=now,
            )
            await self._repo.save(negotiation, db)

        logger.info(
            "Negotiation %s proposed on listing %s: %d (listed %d)",
            negotiation.id,
            listing.id,
            negotiation.proposed_price,
            negotiation.original_price,
        )
        return NegotiationResponse.from_domain(negotiation)

    async def respond(
        self,
        db: AsyncSession | None,
        negotiation_id: str,
        actor_id: str,
        req: RespondNegotiationRequest,
    ) -> NegotiationResponse:
        """PATCH entry point: dispatch on ``req.action``."""
        if req.action == "counter":
            if req.counter_offer is None:
                raise InvalidOfferError("counter_offer is required to counter")
            return await self.counter(db, negotiation_id, actor_id, req.counter_offer, req.message)
        if req.action == "accept":
            return await self.accept(db, negotiation_id, actor_id, req.message)
        return await self.reject(db, negotiation_id, actor_id, req.message)

    async def counter(
        self,
        db: AsyncSession | None,
        negotiation_id: str,
        owner_id: str,
        counter_offer: int,
        message: str | None = None,
    ) -> NegotiationResponse:
        _check_amount(counter_offer, "counter_offer")
        negotiation = await self._act(
            db, negotiation_id, owner_id, NegotiationAction.COUNTER,
            counter_offer=counter_offer, message=message,
        )
        return NegotiationResponse.from_domain(negotiation)

    async def accept(
        self,
        db: AsyncSession | None,
        negotiation_id: str,
        owner_id: str,
        message: str | None = None,
    ) -> NegotiationResponse:
        negotiation = await self._act(
            db, negotiation_id, owner_id, NegotiationAction.ACCEPT, message=message
        )
        return NegotiationResponse.from_domain(negotiation)

    async def accept_counter(
        self, db: AsyncSession | None, negotiation_id: str, tenant_id: str
    ) -> AcceptCounterResponse:
        negotiation = await self._act(
            db, negotiation_id, tenant_id, NegotiationAction.ACCEPT_COUNTER
        )
        final_price = negotiation.final_price
        if final_price is None:
            raise InvalidNegotiationStateError("book", negotiation.status.value)
        return AcceptCounterResponse(
            negotiation=NegotiationResponse.from_domain(negotiation),
            can_book=True,
            final_price=final_price,
            savings=negotiation.original_price - final_price,
        )

    async def reject(
        self,
        db: AsyncSession | None,
        negotiation_id: str,
        actor_id: str,
        message: str | None = None,
    ) -> NegotiationResponse:
        negotiation = await self._act(
            db, negotiation_id, actor_id, NegotiationAction.REJECT, message=message
        )
        return NegotiationResponse.from_domain(negotiation)

    # ------------------------------------------------------------------
    # Queries (expiry is still applied lazily)
    # ------------------------------------------------------------------

    async def get_negotiation(
        self, db: AsyncSession | None, negotiation_id: str, actor_id: str
    ) -> NegotiationResponse:
        async with transaction(db):
            negotiation = await self._load(db, negotiation_id)
            role_of(negotiation, actor_id)
            await self._expire_if_lapsed(db, negotiation)
        return NegotiationResponse.from_domain(negotiation)

    async def list_negotiations(
        self,
        db: AsyncSession | None,
        actor_id: str,
        role: PartyRole | None,
        status: NegotiationStatus | None,
        limit: int,
        cursor: str | None,
    ) -> NegotiationListResponse:
        cursor_ts, cursor_id = cursor_decode(cursor)
        async with transaction(db):
            # Expire first so the status filter sees current statuses
            lapsed = await self._repo.list_lapsed_by_user(actor_id, role, self._clock(), db)
            for negotiation in lapsed:
                await self._expire_if_lapsed(db, negotiation)
            if lapsed:
                logger.info("Expired %d lapsed negotiations for %s", len(lapsed), actor_id)

            # Fetch limit+1 to detect has_more without COUNT(*)
            rows = await self._repo.list_by_user(
                actor_id, role, status, limit + 1, cursor_ts, cursor_id, db
            )
            has_more = len(rows) > limit
            page = rows[:limit]
            for negotiation in page:
                await self._expire_if_lapsed(db, negotiation)

        last = page[-1] if page else None
        next_cursor = (
            cursor_encode(last.created_at, last.id)
            if has_more and last is not None and last.created_at is not None
            else None
        )
        return NegotiationListResponse(
            items=[NegotiationResponse.from_domain(n) for n in page],
            next_cursor=next_cursor,
            has_more=has_more,
        )

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    async def _load(self, db: AsyncSession | None, negotiation_id: str) -> Negotiation:
        negotiation = await self._repo.get_by_id(negotiation_id, db)
        if negotiation is None:
            raise NegotiationNotFoundError(negotiation_id)
        return negotiation

    async def _expire_if_lapsed(self, db: AsyncSession | None, negotiation: Negotiation) -> bool:
        now = self._clock()
        if not negotiation.is_lapsed(now):
            return False
        expire(negotiation, now)
        await self._repo.update(negotiation, db)
        return True

    async def _act(
        self,
        db: AsyncSession | None,
        negotiation_id: str,
        actor_id: str,
        action: NegotiationAction,
        counter_offer: int | None = None,
        message: str | None = None,
    ) -> Negotiation:
        expired = False
        async with transaction(db):
            negotiation = await self._load(db, negotiation_id)
            role = role_of(negotiation, actor_id)
            require_action_role(action, role)
            await self._expire_if_lapsed(db, negotiation)
            if negotiation.status == NegotiationStatus.EXPIRED:
                # Leave the block normally so the expiry write commits
                expired = True
            else:
                transition = plan_transition(negotiation.status, action, role)
                apply_transition(
                    negotiation, transition, self._clock(),
                    counter_offer=counter_offer, message=message,
                )
                await self._repo.update(negotiation, db)
        if expired:
            raise NegotiationExpiredError(negotiation_id)
        return negotiation
