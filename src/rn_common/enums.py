"""Global enums — must match DB CHECK constraints exactly."""

from enum import Enum


class NegotiationStatus(str, Enum):
    PROPOSED = "proposed"
    COUNTERED = "countered"
    ACCEPTED = "accepted"
    REJECTED = "rejected"
    EXPIRED = "expired"


class NegotiationAction(str, Enum):
    COUNTER = "counter"
    ACCEPT = "accept"
    ACCEPT_COUNTER = "accept-counter"
    REJECT = "reject"
    EXPIRE = "expire"


class PartyRole(str, Enum):
    """Which side of a negotiation or booking an actor is on."""
    TENANT = "tenant"
    OWNER = "owner"
    SYSTEM = "system"


class BookingStatus(str, Enum):
    PENDING = "pending"
    CONFIRMED = "confirmed"
    ACTIVE = "active"
    CANCELLED = "cancelled"
    COMPLETED = "completed"


class PaymentStatus(str, Enum):
    PENDING = "pending"
    PAID = "paid"


class PaymentMethod(str, Enum):
    ONLINE = "online"
    OFFLINE = "offline"


class ListingSort(str, Enum):
    DISTANCE = "distance"
    PRICE = "price"
    NEWEST = "newest"
