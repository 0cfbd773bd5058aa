"""Distance tiers: filter membership and marker colour coding."""

from typing import Iterable, List, Optional, Sequence, Tuple

from shelter_finder.core.geo import haversine_miles
from shelter_finder.models import Coordinate, RadiusFilter, Shelter, ShelterWithDistance

DEFAULT_TIER_COLOR = "#6B7280"
TIER_COLORS: Tuple[Tuple[float, str], ...] = (
    (5, "#10B981"),
    (10, "#F59E0B"),
    (25, "#EF4444"),
    (50, "#8B5CF6"),
)


def tier_color(distance_miles: float) -> str:
    for limit, color in TIER_COLORS:
        if distance_miles <= limit:
            return color
    return DEFAULT_TIER_COLOR


def max_active_radius(filters: Sequence[RadiusFilter]) -> Optional[float]:
    """Largest active radius, or ``None`` when every filter is switched off."""
    active = [f.miles for f in filters if f.active]
    return max(active) if active else None


def classify(
    shelters: Iterable[Shelter], center: Coordinate, filters: Sequence[RadiusFilter]
) -> List[ShelterWithDistance]:
    """Attach distances and keep shelters inside at least one active band."""
    active = [f for f in filters if f.active]
    if not active:
        return []

    results: List[ShelterWithDistance] = []
    for shelter in shelters:
        distance = haversine_miles(center, shelter.coordinates)
        if any(distance <= f.miles for f in active):
            results.append(ShelterWithDistance(shelter=shelter, distance=distance))
    return results
