"""Geo point value type — transient, never persisted as its own entity."""

from dataclasses import dataclass
from typing import Protocol


@dataclass(frozen=True)
class GeoPoint:
    lat: float  # decimal degrees, -90..90
    lng: float  # decimal degrees, -180..180

    def __post_init__(self) -> None:
        if not (-90.0 <= self.lat <= 90.0):
            raise ValueError(f"Latitude must be between -90 and 90, got {self.lat}")
        if not (-180.0 <= self.lng <= 180.0):
            raise ValueError(f"Longitude must be between -180 and 180, got {self.lng}")


class Locatable(Protocol):
    """Anything with optional coordinates (listings, map pins)."""

    @property
    def coordinates(self) -> GeoPoint | None: ...
