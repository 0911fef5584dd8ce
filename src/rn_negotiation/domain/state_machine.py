"""Negotiation state machine.

Each state carries the party whose turn it is; transitions are a lookup
table keyed by (state, action). Nothing here touches storage: the service
loads a record, asks this module for a transition, applies it and saves.

    proposed  --counter (owner)-------->  countered
    proposed  --accept (owner)--------->  accepted   final = proposed
    proposed  --reject (owner)--------->  rejected
    countered --accept-counter (tenant)-> accepted   final = counter
    countered --reject (tenant)-------->  rejected
    proposed|countered --expire (system)-> expired   expires_at < now
"""

import logging
from dataclasses import dataclass
from datetime import datetime

from src.rn_common.enums import NegotiationAction, NegotiationStatus, PartyRole
from src.rn_common.errors import (
    InvalidNegotiationStateError,
    NoCounterOfferError,
    NotNegotiationPartyError,
    WrongNegotiationRoleError,
)
from src.rn_negotiation.domain.models import Negotiation

logger = logging.getLogger(__name__)

S = NegotiationStatus
A = NegotiationAction
R = PartyRole


@dataclass(frozen=True)
class StateSpec:
    status: NegotiationStatus
    acting_role: PartyRole | None  # None for terminal states

    @property
    def is_terminal(self) -> bool:
        return self.acting_role is None


STATES: dict[NegotiationStatus, StateSpec] = {
    S.PROPOSED: StateSpec(S.PROPOSED, R.OWNER),
    S.COUNTERED: StateSpec(S.COUNTERED, R.TENANT),
    S.ACCEPTED: StateSpec(S.ACCEPTED, None),
    S.REJECTED: StateSpec(S.REJECTED, None),
    S.EXPIRED: StateSpec(S.EXPIRED, None),
}


@dataclass(frozen=True)
class Transition:
    source: NegotiationStatus
    action: NegotiationAction
    target: NegotiationStatus
    actor: PartyRole


TRANSITIONS: dict[tuple[NegotiationStatus, NegotiationAction], Transition] = {
    (t.source, t.action): t
    for t in (
        Transition(S.PROPOSED, A.COUNTER, S.COUNTERED, R.OWNER),
        Transition(S.PROPOSED, A.ACCEPT, S.ACCEPTED, R.OWNER),
        Transition(S.PROPOSED, A.REJECT, S.REJECTED, R.OWNER),
        Transition(S.COUNTERED, A.ACCEPT_COUNTER, S.ACCEPTED, R.TENANT),
        Transition(S.COUNTERED, A.REJECT, S.REJECTED, R.TENANT),
        Transition(S.PROPOSED, A.EXPIRE, S.EXPIRED, R.SYSTEM),
        Transition(S.COUNTERED, A.EXPIRE, S.EXPIRED, R.SYSTEM),
    )
}

# Actions only ever performed by one side, whatever the state
_ACTION_ROLES: dict[NegotiationAction, PartyRole] = {
    A.COUNTER: R.OWNER,
    A.ACCEPT: R.OWNER,
    A.ACCEPT_COUNTER: R.TENANT,
    A.EXPIRE: R.SYSTEM,
}


def role_of(negotiation: Negotiation, actor_id: str) -> PartyRole:
    """Which side ``actor_id`` is on; raises if neither."""
    if actor_id == negotiation.tenant_id:
        return R.TENANT
    if actor_id == negotiation.owner_id:
        return R.OWNER
    raise NotNegotiationPartyError(negotiation.id)


def require_action_role(action: NegotiationAction, role: PartyRole) -> None:
    required = _ACTION_ROLES.get(action)
    if required is not None and role != required:
        raise WrongNegotiationRoleError(action.value, required.value)


def plan_transition(
    status: NegotiationStatus, action: NegotiationAction, role: PartyRole
) -> Transition:
    """Resolve (state, action, role) to a legal transition or raise.

    Role is checked before state for role-fixed actions, so a tenant trying
    to counter gets a permission error whatever the state.
    """
    require_action_role(action, role)
    transition = TRANSITIONS.get((status, action))
    if transition is None:
        if action == A.ACCEPT_COUNTER:
            raise NoCounterOfferError(status.value)
        raise InvalidNegotiationStateError(action.value, status.value)
    if transition.actor != role:
        raise WrongNegotiationRoleError(action.value, transition.actor.value)
    return transition


def apply_transition(
    negotiation: Negotiation,
    transition: Transition,
    now: datetime,
    counter_offer: int | None = None,
    message: str | None = None,
) -> None:
    """Mutate ``negotiation`` in place according to ``transition``."""
    if transition.source != negotiation.status:
        raise InvalidNegotiationStateError(transition.action.value, negotiation.status.value)

    if transition.action == A.COUNTER:
        if counter_offer is None:
            raise ValueError("counter transition needs a counter_offer")
        negotiation.counter_offer = counter_offer
    elif transition.action == A.ACCEPT:
        negotiation.final_price = negotiation.proposed_price
    elif transition.action == A.ACCEPT_COUNTER:
        negotiation.final_price = negotiation.counter_offer

    if message is not None and transition.actor == R.OWNER:
        negotiation.owner_response = message

    negotiation.status = transition.target
    if transition.actor != R.SYSTEM:
        negotiation.response_date = now
    negotiation.updated_at = now

    logger.info(
        "Negotiation %s: %s --%s/%s--> %s",
        negotiation.id,
        transition.source.value,
        transition.action.value,
        transition.actor.value,
        transition.target.value,
    )


def expire(negotiation: Negotiation, now: datetime) -> None:
    """System transition for a lapsed negotiation."""
    transition = plan_transition(negotiation.status, A.EXPIRE, R.SYSTEM)
    apply_transition(negotiation, transition, now)
