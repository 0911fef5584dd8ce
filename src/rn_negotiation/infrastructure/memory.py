"""In-memory negotiation store (fixture backend)."""
import copy
from datetime import datetime

from sqlalchemy.ext.asyncio import AsyncSession

from src.rn_common.enums import NegotiationStatus, PartyRole
from src.rn_common.pagination import is_after_cursor
from src.rn_negotiation.domain.models import Negotiation


class InMemoryNegotiationRepository:
    """Stores copies so callers never mutate stored state without ``update``."""

    def __init__(self) -> None:
        self._rows: dict[str, Negotiation] = {}

    async def save(self, negotiation: Negotiation, db: AsyncSession | None) -> None:
        self._rows[negotiation.id] = copy.deepcopy(negotiation)

    async def get_by_id(
        self, negotiation_id: str, db: AsyncSession | None
    ) -> Negotiation | None:
        row = self._rows.get(negotiation_id)
        return copy.deepcopy(row) if row is not None else None

    async def update(self, negotiation: Negotiation, db: AsyncSession | None) -> None:
        if negotiation.id in self._rows:
            self._rows[negotiation.id] = copy.deepcopy(negotiation)

    async def list_by_user(
        self,
        user_id: str,
        role: PartyRole | None,
        status: NegotiationStatus | None,
        limit: int,
        cursor_ts: datetime | None,
        cursor_id: str | None,
        db: AsyncSession | None,
    ) -> list[Negotiation]:
        def _matches(n: Negotiation) -> bool:
            if role == PartyRole.TENANT and n.tenant_id != user_id:
                return False
            if role == PartyRole.OWNER and n.owner_id != user_id:
                return False
            if role is None and user_id not in (n.tenant_id, n.owner_id):
                return False
            if status is not None and n.status != status:
                return False
            return n.created_at is not None and is_after_cursor(
                n.created_at, n.id, cursor_ts, cursor_id
            )

        rows = sorted(
            (n for n in self._rows.values() if _matches(n)),
            key=lambda n: (n.created_at, n.id),
            reverse=True,
        )
        return [copy.deepcopy(n) for n in rows[:limit]]

    async def list_lapsed_by_user(
        self,
        user_id: str,
        role: PartyRole | None,
        now: datetime,
        db: AsyncSession | None,
    ) -> list[Negotiation]:
        def _is_party(n: Negotiation) -> bool:
            if role == PartyRole.TENANT:
                return n.tenant_id == user_id
            if role == PartyRole.OWNER:
                return n.owner_id == user_id
            return user_id in (n.tenant_id, n.owner_id)

        return [
            copy.deepcopy(n)
            for n in self._rows.values()
            if _is_party(n) and n.is_lapsed(now)
        ]
