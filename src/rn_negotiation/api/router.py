"""rn_negotiation REST endpoints.

POST  /negotiations                              — tenant proposes a price
GET   /negotiations                              — caller's negotiations
GET   /negotiations/{negotiation_id}             — one negotiation
PATCH /negotiations/{negotiation_id}             — counter | accept | reject
POST  /negotiations/{negotiation_id}/accept-counter — tenant accepts the counter
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Query, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from config.settings import settings
from src.rn_common.backend import Repositories, get_repositories
from src.rn_common.database import get_db_session
from src.rn_common.enums import NegotiationStatus, PartyRole
from src.rn_common.response import ApiResponse, request_success
from src.rn_gateway.auth.dependencies import get_current_user_id
from src.rn_negotiation.application.schemas import (
    ProposeNegotiationRequest,
    RespondNegotiationRequest,
)
from src.rn_negotiation.application.service import NegotiationApplicationService

router = APIRouter(prefix="/negotiations", tags=["negotiations"])


def _service(
    repos: Annotated[Repositories, Depends(get_repositories)],
) -> NegotiationApplicationService:
    return NegotiationApplicationService(
        repos.listings, repos.negotiations, settings.NEGOTIATION_TTL_HOURS
    )


@router.post("", status_code=status.HTTP_201_CREATED)
async def propose(
    body: ProposeNegotiationRequest,
    request: Request,
    user_id: Annotated[str, Depends(get_current_user_id)],
    db: Annotated[AsyncSession | None, Depends(get_db_session)],
    service: Annotated[NegotiationApplicationService, Depends(_service)],
) -> ApiResponse:
    result = await service.propose(db, user_id, body)
    return request_success(request, result.model_dump(mode="json"), "Negotiation created")


@router.get("")
async def list_negotiations(
    request: Request,
    user_id: Annotated[str, Depends(get_current_user_id)],
    db: Annotated[AsyncSession | None, Depends(get_db_session)],
    service: Annotated[NegotiationApplicationService, Depends(_service)],
    role: PartyRole | None = Query(None, description="tenant | owner. Default: both"),
    negotiation_status: NegotiationStatus | None = Query(None, alias="status"),
    limit: int = Query(20, ge=1, le=100),
    cursor: str | None = Query(None),
) -> ApiResponse:
    result = await service.list_negotiations(
        db, user_id, role, negotiation_status, limit, cursor
    )
    return request_success(request, result.model_dump(mode="json"))


@router.get("/{negotiation_id}")
async def get_negotiation(
    negotiation_id: str,
    request: Request,
    user_id: Annotated[str, Depends(get_current_user_id)],
    db: Annotated[AsyncSession | None, Depends(get_db_session)],
    service: Annotated[NegotiationApplicationService, Depends(_service)],
) -> ApiResponse:
    result = await service.get_negotiation(db, negotiation_id, user_id)
    return request_success(request, result.model_dump(mode="json"))


@router.patch("/{negotiation_id}")
async def respond(
    negotiation_id: str,
    body: RespondNegotiationRequest,
    request: Request,
    user_id: Annotated[str, Depends(get_current_user_id)],
    db: Annotated[AsyncSession | None, Depends(get_db_session)],
    service: Annotated[NegotiationApplicationService, Depends(_service)],
) -> ApiResponse:
    result = await service.respond(db, negotiation_id, user_id, body)
    return request_success(request, result.model_dump(mode="json"))


@router.post("/{negotiation_id}/accept-counter")
async def accept_counter(
    negotiation_id: str,
    request: Request,
    user_id: Annotated[str, Depends(get_current_user_id)],
    db: Annotated[AsyncSession | None, Depends(get_db_session)],
    service: Annotated[NegotiationApplicationService, Depends(_service)],
) -> ApiResponse:
    result = await service.accept_counter(db, negotiation_id, user_id)
    return request_success(
        request,
        result.model_dump(mode="json"),
        "Counter offer accepted. You can now book at the negotiated price.",
    )
