"""Great-circle distance and distance-based filtering/ranking.

Pure functions, no I/O. Used at listing-query time to rank or narrow
listings around a reference point (campus, user location, map centre).
"""

import math
from dataclasses import dataclass
from typing import Generic, TypeVar

from src.rn_geo.point import GeoPoint, Locatable

EARTH_RADIUS_KM = 6371.0

T = TypeVar("T", bound=Locatable)


@dataclass(frozen=True)
class Ranked(Generic[T]):
    """An item annotated with its distance from the query origin."""

    item: T
    distance_km: float  # math.inf when the item has no coordinates


def distance_km(p1: GeoPoint, p2: GeoPoint) -> float:
    """Haversine distance between two points in kilometres."""
    d_lat = math.radians(p2.lat - p1.lat)
    d_lng = math.radians(p2.lng - p1.lng)
    a = (
        math.sin(d_lat / 2) ** 2
        + math.cos(math.radians(p1.lat))
        * math.cos(math.radians(p2.lat))
        * math.sin(d_lng / 2) ** 2
    )
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))
    return EARTH_RADIUS_KM * c


def filter_by_distance(items: list[T], origin: GeoPoint, radius_km: float) -> list[T]:
    """Items within ``radius_km`` of ``origin``, input order preserved.

    Items without coordinates are excluded.
    """
    return [
        item
        for item in items
        if item.coordinates is not None
        and distance_km(origin, item.coordinates) <= radius_km
    ]


def sort_by_distance(items: list[T], origin: GeoPoint) -> list[Ranked[T]]:
    """All items annotated with distance, nearest first.

    Items without coordinates sort last. ``sorted`` is stable, so equal
    distances keep their input order.
    """
    ranked = [
        Ranked(
            item=item,
            distance_km=(
                distance_km(origin, item.coordinates)
                if item.coordinates is not None
                else math.inf
            ),
        )
        for item in items
    ]
    return sorted(ranked, key=lambda r: r.distance_km)


def format_distance(km: float) -> str:
    """'500 m' below one kilometre, otherwise '2.5 km'."""
    if km < 1:
        return f"{round(km * 1000)} m"
    return f"{km:.1f} km"
