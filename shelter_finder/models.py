"""Core data models shared by the shelter discovery pipeline."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple


@dataclass(frozen=True, slots=True)
class Coordinate:
    """A (longitude, latitude) pair in decimal degrees."""

    lon: float
    lat: float

    def __post_init__(self) -> None:
        if not -180.0 <= self.lon <= 180.0:
            raise ValueError(f"longitude out of range: {self.lon}")
        if not -90.0 <= self.lat <= 90.0:
            raise ValueError(f"latitude out of range: {self.lat}")

    def as_lon_lat(self) -> Tuple[float, float]:
        return self.lon, self.lat


@dataclass(frozen=True, slots=True)
class RawCandidate:
    """One untouched provider record tagged with the sub-query that returned it."""

    provider: str
    record: Dict[str, Any] = field(repr=False)


@dataclass(frozen=True, slots=True)
class Shelter:
    """Normalized shelter record.

    Every text field holds either provider data or a readable placeholder such
    as ``"Phone not available"``; only ``image_url`` may be ``None``.
    """

    id: str
    name: str
    address: str
    city: str
    state: str
    zip: str
    phone: str
    email: str
    website: str
    coordinates: Coordinate
    description: str
    services: Tuple[str, ...]
    hours: str
    image_url: Optional[str] = None
    is_synthetic: bool = False


@dataclass(frozen=True, slots=True)
class ShelterWithDistance:
    shelter: Shelter
    distance: float


@dataclass(slots=True)
class RadiusFilter:
    label: str
    miles: float
    color: str
    active: bool = True


def default_radius_filters() -> List[RadiusFilter]:
    """Return a fresh copy of the 5/10/25/50 mile filter set, all active."""
    return [
        RadiusFilter(label="5 miles", miles=5, color="#10B981"),
        RadiusFilter(label="10 miles", miles=10, color="#F59E0B"),
        RadiusFilter(label="25 miles", miles=25, color="#EF4444"),
        RadiusFilter(label="50 miles", miles=50, color="#8B5CF6"),
    ]
