"""Unified error codes and custom exceptions.

Every error carries a numeric ``code`` and a ``kind`` naming its family, so
clients can branch without parsing messages.

Error code ranges:
  1xxx: Auth
  2xxx: Listing
  3xxx: Negotiation
  4xxx: Booking
  9xxx: System (reserved)
"""


class AppError(Exception):
    """Base application error."""

    kind = "internal"

    def __init__(
        self,
        code: int,
        message: str,
        http_status: int = 500,
    ) -> None:
        self.code = code
        self.message = message
        self.http_status = http_status
        super().__init__(message)


# --- Error families ---

class InvalidInputError(AppError):
    """Malformed or out-of-range input."""

    kind = "validation"

    def __init__(self, code: int, message: str) -> None:
        super().__init__(code, message, 422)


class NotFoundError(AppError):
    kind = "not_found"

    def __init__(self, code: int, message: str) -> None:
        super().__init__(code, message, 404)


class ForbiddenError(AppError):
    """Actor is not allowed to perform the requested transition."""

    kind = "permission"

    def __init__(self, code: int, message: str) -> None:
        super().__init__(code, message, 403)


class StateError(AppError):
    """Action is invalid for the record's current state."""

    kind = "state"

    def __init__(self, code: int, message: str) -> None:
        super().__init__(code, message, 409)


class ExpiredError(AppError):
    kind = "expired"

    def __init__(self, code: int, message: str) -> None:
        super().__init__(code, message, 410)


# --- 1xxx: Auth ---

class InvalidCredentialsError(AppError):
    kind = "auth"

    def __init__(self) -> None:
        super().__init__(1001, "Invalid or expired token", 401)


# --- 2xxx: Listing ---

class ListingNotFoundError(NotFoundError):
    def __init__(self, listing_id: str) -> None:
        super().__init__(2001, f"Listing not found: {listing_id}")


class InvalidGeoQueryError(InvalidInputError):
    def __init__(self, detail: str) -> None:
        super().__init__(2002, f"Invalid location query: {detail}")


# --- 3xxx: Negotiation ---

class InvalidOfferError(InvalidInputError):
    def __init__(self, detail: str) -> None:
        super().__init__(3001, f"Invalid offer: {detail}")


class UnknownListingError(InvalidInputError):
    """Proposal references a listing that does not exist."""

    def __init__(self, listing_id: str) -> None:
        super().__init__(3002, f"Cannot negotiate on unknown listing: {listing_id}")


class NegotiationNotFoundError(NotFoundError):
    def __init__(self, negotiation_id: str) -> None:
        super().__init__(3003, f"Negotiation not found: {negotiation_id}")


class NotNegotiationPartyError(ForbiddenError):
    def __init__(self, negotiation_id: str) -> None:
        super().__init__(3004, f"Not a party to negotiation {negotiation_id}")


class WrongNegotiationRoleError(ForbiddenError):
    def __init__(self, action: str, required_role: str) -> None:
        super().__init__(3005, f"Only the {required_role} can {action} this negotiation")


class InvalidNegotiationStateError(StateError):
    def __init__(self, action: str, status: str) -> None:
        super().__init__(3006, f"Cannot {action} a negotiation in status {status}")


class NoCounterOfferError(StateError):
    def __init__(self, status: str) -> None:
        super().__init__(3007, f"No counter offer to accept. Status: {status}")


class NegotiationExpiredError(ExpiredError):
    def __init__(self, negotiation_id: str) -> None:
        super().__init__(3008, f"Negotiation {negotiation_id} has expired")


# --- 4xxx: Booking ---

class InvalidBookingRequestError(InvalidInputError):
    def __init__(self, detail: str) -> None:
        super().__init__(4001, f"Invalid booking request: {detail}")


class BookingNotFoundError(NotFoundError):
    def __init__(self, booking_id: str) -> None:
        super().__init__(4002, f"Booking not found: {booking_id}")


class NegotiationNotBookableError(StateError):
    def __init__(self, negotiation_id: str, detail: str) -> None:
        super().__init__(4003, f"Negotiation {negotiation_id} cannot be booked: {detail}")


class NotBookingPartyError(ForbiddenError):
    def __init__(self, booking_id: str) -> None:
        super().__init__(4004, f"Not a party to booking {booking_id}")


class BookingStateError(StateError):
    def __init__(self, booking_id: str, detail: str) -> None:
        super().__init__(4005, f"Booking {booking_id}: {detail}")


class InvalidPaymentError(InvalidInputError):
    def __init__(self, detail: str) -> None:
        super().__init__(4006, f"Invalid payment: {detail}")


class TenantOnlyPaymentError(ForbiddenError):
    def __init__(self, booking_id: str) -> None:
        super().__init__(4007, f"Only the tenant can pay for booking {booking_id}")
