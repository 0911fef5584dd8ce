# src/rn_negotiation/domain/repository.py
"""NegotiationRepository Protocol — interface contract for persistence layer."""
from datetime import datetime
from typing import Protocol

from sqlalchemy.ext.asyncio import AsyncSession

from src.rn_common.enums import NegotiationStatus, PartyRole
from src.rn_negotiation.domain.models import Negotiation


class NegotiationRepositoryProtocol(Protocol):
    async def save(self, negotiation: Negotiation, db: AsyncSession | None) -> None: ...

    async def get_by_id(
        self, negotiation_id: str, db: AsyncSession | None
    ) -> Negotiation | None: ...

    async def update(self, negotiation: Negotiation, db: AsyncSession | None) -> None: ...

    async def list_by_user(
        self,
        user_id: str,
        role: PartyRole | None,
        status: NegotiationStatus | None,
        limit: int,
        cursor_ts: datetime | None,
        cursor_id: str | None,
        db: AsyncSession | None,
    ) -> list[Negotiation]: ...

    async def list_lapsed_by_user(
        self,
        user_id: str,
        role: PartyRole | None,
        now: datetime,
        db: AsyncSession | None,
    ) -> list[Negotiation]: ...
