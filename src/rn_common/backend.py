"""Repository wiring — picks the storage backend once, at startup.

    memory   in-process dict stores; listings optionally seeded from a JSON
             fixture (LISTINGS_SEED_PATH). Used by the mobile/demo build and tests.
    postgres raw-SQL repositories over the shared AsyncSession.

Routers never branch on the backend; they receive a ``Repositories`` bundle
from ``app.state`` through the ``get_repositories`` dependency.
"""

import logging
from dataclasses import dataclass

from fastapi import Request

from config.settings import Settings
from src.rn_booking.domain.repository import BookingRepositoryProtocol
from src.rn_booking.infrastructure.memory import InMemoryBookingRepository
from src.rn_booking.infrastructure.persistence import BookingRepository
from src.rn_listing.domain.repository import ListingRepositoryProtocol
from src.rn_listing.infrastructure.memory import InMemoryListingRepository
from src.rn_listing.infrastructure.persistence import ListingRepository
from src.rn_negotiation.domain.repository import NegotiationRepositoryProtocol
from src.rn_negotiation.infrastructure.memory import InMemoryNegotiationRepository
from src.rn_negotiation.infrastructure.persistence import NegotiationRepository

logger = logging.getLogger(__name__)


@dataclass
class Repositories:
    backend: str
    listings: ListingRepositoryProtocol
    negotiations: NegotiationRepositoryProtocol
    bookings: BookingRepositoryProtocol


def build_repositories(settings: Settings) -> Repositories:
    if settings.DATA_BACKEND == "postgres":
        logger.info("Using PostgreSQL repositories")
        return Repositories(
            backend="postgres",
            listings=ListingRepository(),
            negotiations=NegotiationRepository(),
            bookings=BookingRepository(),
        )

    listings = InMemoryListingRepository()
    if settings.LISTINGS_SEED_PATH:
        listings.load_seed(settings.LISTINGS_SEED_PATH)
    logger.info("Using in-memory repositories")
    return Repositories(
        backend="memory",
        listings=listings,
        negotiations=InMemoryNegotiationRepository(),
        bookings=InMemoryBookingRepository(),
    )


def get_repositories(request: Request) -> Repositories:
    """FastAPI dependency: the bundle built in the app lifespan."""
    repos: Repositories = request.app.state.repositories
    return repos
