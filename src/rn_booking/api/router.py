"""rn_booking REST endpoints.

POST  /bookings                              — create from listing (+ accepted negotiation)
GET   /bookings                              — caller's bookings
GET   /bookings/{booking_id}                 — one booking
PATCH /bookings/{booking_id}                 — tenant records payment (online | offline)
POST  /bookings/{booking_id}/confirm-payment — a party confirms an offline payment
POST  /bookings/{booking_id}/cancel          — either party cancels
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Query, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from config.settings import settings
from src.rn_booking.application.payment_service import PaymentApplicationService
from src.rn_booking.application.schemas import CreateBookingRequest, RecordPaymentRequest
from src.rn_booking.application.service import BookingApplicationService
from src.rn_common.backend import Repositories, get_repositories
from src.rn_common.database import get_db_session
from src.rn_common.enums import BookingStatus, PartyRole
from src.rn_common.response import ApiResponse, request_success
from src.rn_gateway.auth.dependencies import get_current_user_id

router = APIRouter(prefix="/bookings", tags=["bookings"])


def _booking_service(
    repos: Annotated[Repositories, Depends(get_repositories)],
) -> BookingApplicationService:
    return BookingApplicationService(
        repos.listings, repos.negotiations, repos.bookings, settings.SECURITY_DEPOSIT_MONTHS
    )


def _payment_service(
    repos: Annotated[Repositories, Depends(get_repositories)],
) -> PaymentApplicationService:
    return PaymentApplicationService(repos.bookings)


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_booking(
    body: CreateBookingRequest,
    request: Request,
    user_id: Annotated[str, Depends(get_current_user_id)],
    db: Annotated[AsyncSession | None, Depends(get_db_session)],
    service: Annotated[BookingApplicationService, Depends(_booking_service)],
) -> ApiResponse:
    result = await service.create_booking(db, user_id, body)
    return request_success(request, result.model_dump(mode="json"), "Booking created")


@router.get("")
async def list_bookings(
    request: Request,
    user_id: Annotated[str, Depends(get_current_user_id)],
    db: Annotated[AsyncSession | None, Depends(get_db_session)],
    service: Annotated[BookingApplicationService, Depends(_booking_service)],
    role: PartyRole | None = Query(None, description="tenant | owner. Default: both"),
    booking_status: BookingStatus | None = Query(None, alias="status"),
    limit: int = Query(20, ge=1, le=100),
    cursor: str | None = Query(None),
) -> ApiResponse:
    result = await service.list_bookings(db, user_id, role, booking_status, limit, cursor)
    return request_success(request, result.model_dump(mode="json"))


@router.get("/{booking_id}")
async def get_booking(
    booking_id: str,
    request: Request,
    user_id: Annotated[str, Depends(get_current_user_id)],
    db: Annotated[AsyncSession | None, Depends(get_db_session)],
    service: Annotated[BookingApplicationService, Depends(_booking_service)],
) -> ApiResponse:
    result = await service.get_booking(db, booking_id, user_id)
    return request_success(request, result.model_dump(mode="json"))


@router.patch("/{booking_id}")
async def record_payment(
    booking_id: str,
    body: RecordPaymentRequest,
    request: Request,
    user_id: Annotated[str, Depends(get_current_user_id)],
    db: Annotated[AsyncSession | None, Depends(get_db_session)],
    service: Annotated[PaymentApplicationService, Depends(_payment_service)],
) -> ApiResponse:
    result = await service.record_payment(db, booking_id, user_id, body)
    return request_success(request, result.model_dump(mode="json"))


@router.post("/{booking_id}/confirm-payment")
async def confirm_payment(
    booking_id: str,
    request: Request,
    user_id: Annotated[str, Depends(get_current_user_id)],
    db: Annotated[AsyncSession | None, Depends(get_db_session)],
    service: Annotated[PaymentApplicationService, Depends(_payment_service)],
) -> ApiResponse:
    result = await service.confirm_offline_payment(db, booking_id, user_id)
    return request_success(request, result.model_dump(mode="json"))


@router.post("/{booking_id}/cancel")
async def cancel_booking(
    booking_id: str,
    request: Request,
    user_id: Annotated[str, Depends(get_current_user_id)],
    db: Annotated[AsyncSession | None, Depends(get_db_session)],
    service: Annotated[PaymentApplicationService, Depends(_payment_service)],
) -> ApiResponse:
    result = await service.cancel_booking(db, booking_id, user_id)
    return request_success(request, result.model_dump(mode="json"))
