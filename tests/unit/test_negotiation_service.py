"""Unit tests for NegotiationApplicationService over in-memory repositories."""

from datetime import UTC, datetime, timedelta

import pytest

from src.rn_common.enums import NegotiationStatus, PartyRole
from src.rn_common.errors import (
    InvalidNegotiationStateError,
    InvalidOfferError,
    NegotiationExpiredError,
    NegotiationNotFoundError,
    NoCounterOfferError,
    NotNegotiationPartyError,
    StateError,
    UnknownListingError,
    WrongNegotiationRoleError,
)
from src.rn_geo.point import GeoPoint
from src.rn_listing.domain.models import Listing
from src.rn_listing.infrastructure.memory import InMemoryListingRepository
from src.rn_negotiation.application.schemas import (
    ProposeNegotiationRequest,
    RespondNegotiationRequest,
)
from src.rn_negotiation.application.service import NegotiationApplicationService
from src.rn_negotiation.infrastructure.memory import InMemoryNegotiationRepository

TENANT = "tenant-1"
OWNER = "owner-1"
START = datetime(2026, 9, 1, 9, 0, tzinfo=UTC)


class _Clock:
    def __init__(self, now: datetime) -> None:
        self.now = now

    def __call__(self) -> datetime:
        return self.now


@pytest.fixture
def clock() -> _Clock:
    return _Clock(START)


@pytest.fixture
def repo() -> InMemoryNegotiationRepository:
    return InMemoryNegotiationRepository()


@pytest.fixture
def svc(clock, repo) -> NegotiationApplicationService:
    listings = InMemoryListingRepository()
    listings.add(Listing(
        id="lst_1", title="Room near campus", address="Hauz Khas", city="Delhi",
        monthly_price=20000, owner_id=OWNER, coordinates=GeoPoint(lat=28.55, lng=77.2),
        created_at=START,
    ))
    return NegotiationApplicationService(listings, repo, ttl_hours=72, clock=clock)


def _propose(price: int = 16000, **kwargs) -> ProposeNegotiationRequest:
    return ProposeNegotiationRequest(listing_id="lst_1", proposed_price=price, **kwargs)


class TestPropose:
    @pytest.mark.asyncio
    async def test_creates_proposed(self, svc) -> None:
        n = await svc.propose(None, TENANT, _propose(duration_months=6, message="Student"))
        assert n.status == "proposed"
        assert n.original_price == 20000
        assert n.proposed_price == 16000
        assert n.owner_id == OWNER
        assert n.final_price is None
        assert n.savings is None
        assert n.expires_at == START + timedelta(hours=72)

    @pytest.mark.asyncio
    async def test_non_positive_price(self, svc) -> None:
        with pytest.raises(InvalidOfferError):
            await svc.propose(None, TENANT, _propose(price=0))

    @pytest.mark.asyncio
    async def test_non_positive_duration(self, svc) -> None:
        with pytest.raises(InvalidOfferError):
            await svc.propose(None, TENANT, _propose(duration_months=0))

    @pytest.mark.asyncio
    async def test_unknown_listing(self, svc) -> None:
        req = ProposeNegotiationRequest(listing_id="lst_nope", proposed_price=15000)
        with pytest.raises(UnknownListingError):
            await svc.propose(None, TENANT, req)

    @pytest.mark.asyncio
    async def test_owner_cannot_negotiate_own_listing(self, svc) -> None:
        with pytest.raises(InvalidOfferError):
            await svc.propose(None, OWNER, _propose())

    @pytest.mark.asyncio
    async def test_proposal_above_listing_price_allowed(self, svc) -> None:
        n = await svc.propose(None, TENANT, _propose(price=21000))
        assert n.proposed_price == 21000


class TestCounterScenario:
    @pytest.mark.asyncio
    async def test_propose_counter_accept_counter(self, svc, clock) -> None:
        n = await svc.propose(None, TENANT, _propose())

        clock.now = START + timedelta(hours=5)
        countered = await svc.counter(None, n.id, OWNER, 18000, "Can do 18k")
        assert countered.status == "countered"
        assert countered.counter_offer == 18000
        assert countered.owner_response == "Can do 18k"
        assert countered.final_price is None

        clock.now = START + timedelta(hours=10)
        result = await svc.accept_counter(None, n.id, TENANT)
        assert result.can_book is True
        assert result.final_price == 18000
        assert result.savings == 2000
        assert result.negotiation.status == "accepted"
        assert result.negotiation.original_price == 20000
        assert result.negotiation.proposed_price == 16000

    @pytest.mark.asyncio
    async def test_owner_accepts_proposal(self, svc) -> None:
        n = await svc.propose(None, TENANT, _propose())
        accepted = await svc.accept(None, n.id, OWNER)
        assert accepted.status == "accepted"
        assert accepted.final_price == 16000

    @pytest.mark.asyncio
    async def test_tenant_rejects_counter(self, svc) -> None:
        n = await svc.propose(None, TENANT, _propose())
        await svc.counter(None, n.id, OWNER, 18000)
        rejected = await svc.reject(None, n.id, TENANT)
        assert rejected.status == "rejected"
        assert rejected.final_price is None
        assert rejected.counter_offer == 18000

    @pytest.mark.asyncio
    async def test_respond_dispatch(self, svc) -> None:
        n = await svc.propose(None, TENANT, _propose())
        req = RespondNegotiationRequest(action="counter", counter_offer=17500)
        assert (await svc.respond(None, n.id, OWNER, req)).counter_offer == 17500

    @pytest.mark.asyncio
    async def test_respond_counter_requires_amount(self, svc) -> None:
        n = await svc.propose(None, TENANT, _propose())
        with pytest.raises(InvalidOfferError):
            await svc.respond(None, n.id, OWNER, RespondNegotiationRequest(action="counter"))


class TestGuards:
    @pytest.mark.asyncio
    async def test_tenant_cannot_counter(self, svc) -> None:
        n = await svc.propose(None, TENANT, _propose())
        with pytest.raises(WrongNegotiationRoleError):
            await svc.counter(None, n.id, TENANT, 18000)

    @pytest.mark.asyncio
    async def test_stranger_cannot_act(self, svc) -> None:
        n = await svc.propose(None, TENANT, _propose())
        with pytest.raises(NotNegotiationPartyError):
            await svc.reject(None, n.id, "intruder")

    @pytest.mark.asyncio
    async def test_accept_counter_without_counter(self, svc) -> None:
        n = await svc.propose(None, TENANT, _propose())
        with pytest.raises(NoCounterOfferError):
            await svc.accept_counter(None, n.id, TENANT)

    @pytest.mark.asyncio
    @pytest.mark.parametrize("close_with", ["accept", "reject"])
    async def test_accept_counter_on_closed_negotiation(self, svc, repo, close_with) -> None:
        n = await svc.propose(None, TENANT, _propose())
        if close_with == "accept":
            await svc.accept(None, n.id, OWNER)
        else:
            await svc.reject(None, n.id, OWNER)
        before = await repo.get_by_id(n.id, None)

        with pytest.raises(StateError):
            await svc.accept_counter(None, n.id, TENANT)

        after = await repo.get_by_id(n.id, None)
        assert after.status == before.status
        assert after.final_price == before.final_price

    @pytest.mark.asyncio
    async def test_counter_must_be_positive(self, svc) -> None:
        n = await svc.propose(None, TENANT, _propose())
        with pytest.raises(InvalidOfferError):
            await svc.counter(None, n.id, OWNER, -1)

    @pytest.mark.asyncio
    async def test_no_actions_after_terminal(self, svc, repo) -> None:
        n = await svc.propose(None, TENANT, _propose())
        await svc.reject(None, n.id, OWNER)
        with pytest.raises(InvalidNegotiationStateError):
            await svc.accept(None, n.id, OWNER)
        stored = await repo.get_by_id(n.id, None)
        assert stored.status == NegotiationStatus.REJECTED

    @pytest.mark.asyncio
    async def test_missing(self, svc) -> None:
        with pytest.raises(NegotiationNotFoundError):
            await svc.get_negotiation(None, "neg_missing", TENANT)


class TestLazyExpiry:
    @pytest.mark.asyncio
    async def test_action_after_deadline_expires_and_raises(self, svc, repo, clock) -> None:
        n = await svc.propose(None, TENANT, _propose())
        await svc.counter(None, n.id, OWNER, 18000)

        clock.now = START + timedelta(hours=73)
        with pytest.raises(NegotiationExpiredError):
            await svc.accept_counter(None, n.id, TENANT)

        stored = await repo.get_by_id(n.id, None)
        assert stored.status == NegotiationStatus.EXPIRED
        assert stored.final_price is None

    @pytest.mark.asyncio
    async def test_read_after_deadline_reports_expired(self, svc, clock) -> None:
        n = await svc.propose(None, TENANT, _propose())
        clock.now = START + timedelta(hours=73)
        fetched = await svc.get_negotiation(None, n.id, OWNER)
        assert fetched.status == "expired"

    @pytest.mark.asyncio
    async def test_expired_stays_expired(self, svc, clock) -> None:
        n = await svc.propose(None, TENANT, _propose())
        clock.now = START + timedelta(hours=73)
        with pytest.raises(NegotiationExpiredError):
            await svc.reject(None, n.id, OWNER)
        with pytest.raises(NegotiationExpiredError):
            await svc.accept(None, n.id, OWNER)

    @pytest.mark.asyncio
    async def test_accepted_never_expires(self, svc, clock) -> None:
        n = await svc.propose(None, TENANT, _propose())
        await svc.accept(None, n.id, OWNER)
        clock.now = START + timedelta(days=30)
        assert (await svc.get_negotiation(None, n.id, TENANT)).status == "accepted"

    @pytest.mark.asyncio
    async def test_zero_ttl_never_expires(self, clock, repo) -> None:
        listings = InMemoryListingRepository()
        listings.add(Listing(
            id="lst_1", title="Room", address="", city="Delhi",
            monthly_price=20000, owner_id=OWNER, created_at=START,
        ))
        svc = NegotiationApplicationService(listings, repo, ttl_hours=0, clock=clock)
        n = await svc.propose(None, TENANT, _propose())
        assert n.expires_at is None
        clock.now = START + timedelta(days=365)
        assert (await svc.counter(None, n.id, OWNER, 18000)).status == "countered"


class TestListNegotiations:
    @pytest.mark.asyncio
    async def test_role_filter_and_paging(self, svc, clock) -> None:
        for i in range(3):
            clock.now = START + timedelta(minutes=i)
            await svc.propose(None, TENANT, _propose(price=15000 + i))

        page1 = await svc.list_negotiations(None, TENANT, PartyRole.TENANT, None, 2, None)
        assert [n.proposed_price for n in page1.items] == [15002, 15001]
        assert page1.has_more is True

        page2 = await svc.list_negotiations(
            None, TENANT, PartyRole.TENANT, None, 2, page1.next_cursor
        )
        assert [n.proposed_price for n in page2.items] == [15000]
        assert page2.has_more is False
        assert page2.next_cursor is None

    @pytest.mark.asyncio
    async def test_owner_sees_incoming(self, svc) -> None:
        await svc.propose(None, TENANT, _propose())
        as_owner = await svc.list_negotiations(None, OWNER, PartyRole.OWNER, None, 20, None)
        as_tenant = await svc.list_negotiations(None, OWNER, PartyRole.TENANT, None, 20, None)
        assert len(as_owner.items) == 1
        assert as_tenant.items == []

    @pytest.mark.asyncio
    async def test_status_filter(self, svc) -> None:
        n = await svc.propose(None, TENANT, _propose())
        await svc.propose(None, TENANT, _propose(price=17000))
        await svc.reject(None, n.id, OWNER)
        rejected = await svc.list_negotiations(
            None, TENANT, None, NegotiationStatus.REJECTED, 20, None
        )
        assert [r.id for r in rejected.items] == [n.id]

    @pytest.mark.asyncio
    async def test_status_filter_sees_lapsed_as_expired(self, svc, repo, clock) -> None:
        n = await svc.propose(None, TENANT, _propose())
        clock.now = START + timedelta(hours=100)

        proposed = await svc.list_negotiations(
            None, TENANT, None, NegotiationStatus.PROPOSED, 20, None
        )
        assert proposed.items == []
        stored = await repo.get_by_id(n.id, None)
        assert stored.status == NegotiationStatus.EXPIRED

    @pytest.mark.asyncio
    async def test_expired_filter_includes_unmarked_lapsed(self, svc, clock) -> None:
        n = await svc.propose(None, TENANT, _propose())
        await svc.counter(None, n.id, OWNER, 18000)
        fresh = await svc.propose(None, TENANT, _propose(price=17000))
        clock.now = START + timedelta(hours=100)

        expired = await svc.list_negotiations(
            None, OWNER, PartyRole.OWNER, NegotiationStatus.EXPIRED, 20, None
        )
        assert {e.id for e in expired.items} == {n.id, fresh.id}
        assert all(e.status == "expired" for e in expired.items)
