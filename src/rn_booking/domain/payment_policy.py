"""Payment confirmation policy for bookings.

The booking materializer only ever creates ``pending/pending`` bookings;
this module is the caller-side contract for settling them:

  online  → paid + confirmed immediately (gateway already captured the money)
  offline → stays pending until tenant AND owner both confirm the hand-over

Cancellation is allowed while a booking is pending or confirmed.
"""

import logging
from datetime import datetime

from src.rn_common.enums import BookingStatus, PartyRole, PaymentMethod, PaymentStatus
from src.rn_common.errors import BookingStateError, InvalidPaymentError
from src.rn_booking.domain.models import Booking

logger = logging.getLogger(__name__)

_CANCELLABLE = (BookingStatus.PENDING, BookingStatus.CONFIRMED)


def _mark_paid(booking: Booking, now: datetime) -> None:
    booking.payment_status = PaymentStatus.PAID
    booking.status = BookingStatus.CONFIRMED
    booking.paid_at = now


def record_payment(
    booking: Booking,
    method: PaymentMethod,
    transaction_id: str | None,
    now: datetime,
) -> None:
    """Tenant chose how to pay. Online payments settle the booking at once."""
    if booking.status != BookingStatus.PENDING:
        raise BookingStateError(
            booking.id, f"cannot pay a booking in status {booking.status.value}"
        )
    if booking.is_paid:
        raise BookingStateError(booking.id, "already paid")

    booking.payment_method = method
    if method == PaymentMethod.ONLINE:
        if not transaction_id:
            raise InvalidPaymentError("online payments need a transaction_id")
        booking.transaction_id = transaction_id
        _mark_paid(booking, now)
        logger.info("Booking %s paid online (txn %s), auto-confirmed", booking.id, transaction_id)
    else:
        # A fresh offline choice resets any earlier confirmations
        booking.tenant_confirmed_payment = False
        booking.owner_confirmed_payment = False
        logger.info("Booking %s set to offline payment, awaiting both parties", booking.id)
    booking.updated_at = now


def confirm_offline_payment(booking: Booking, role: PartyRole, now: datetime) -> None:
    """One side confirms the offline hand-over; both sides settle it."""
    if booking.payment_method != PaymentMethod.OFFLINE:
        raise BookingStateError(booking.id, "offline payment was not selected")
    if booking.status != BookingStatus.PENDING or booking.is_paid:
        raise BookingStateError(booking.id, "payment already settled or booking closed")

    if role == PartyRole.TENANT:
        booking.tenant_confirmed_payment = True
    elif role == PartyRole.OWNER:
        booking.owner_confirmed_payment = True

    if booking.tenant_confirmed_payment and booking.owner_confirmed_payment:
        _mark_paid(booking, now)
        logger.info("Booking %s offline payment confirmed by both parties", booking.id)
    booking.updated_at = now


def cancel(booking: Booking, now: datetime) -> None:
    if booking.status not in _CANCELLABLE:
        raise BookingStateError(
            booking.id, f"cannot cancel a booking in status {booking.status.value}"
        )
    booking.status = BookingStatus.CANCELLED
    booking.updated_at = now
    logger.info("Booking %s cancelled", booking.id)
