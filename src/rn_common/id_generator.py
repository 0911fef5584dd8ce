"""Business ID generation.

IDs are opaque strings with a short type prefix so that a negotiation id can
never be mistaken for a booking id in logs or API payloads:
  lst_9f2c4e1a0b7d4c3e8a61   listing
  neg_...                    negotiation
  bkg_...                    booking
"""

import uuid

LISTING_PREFIX = "lst"
NEGOTIATION_PREFIX = "neg"
BOOKING_PREFIX = "bkg"


def generate_id(prefix: str) -> str:
    """Generate a unique prefixed string ID."""
    return f"{prefix}_{uuid.uuid4().hex[:20]}"
