"""Device location lookup with a fixed fallback center."""

import logging
from typing import Callable, Optional, Tuple

from shelter_finder.core.config import get_settings
from shelter_finder.models import Coordinate

logger = logging.getLogger(__name__)

Geolocator = Callable[[], Coordinate]


class GeolocationError(RuntimeError):
    """Raised when the device location is denied, unavailable or times out."""


def static_locator(coordinate: Optional[Coordinate]) -> Geolocator:
    """Build a geolocator that reports a fixed position, or fails when none is known."""

    def locate() -> Coordinate:
        if coordinate is None:
            raise GeolocationError("device location is not available")
        return coordinate

    return locate


def default_center() -> Coordinate:
    settings = get_settings()
    return Coordinate(lon=settings.default_longitude, lat=settings.default_latitude)


def resolve_location(locator: Geolocator) -> Tuple[Coordinate, bool]:
    """Return ``(coordinate, used_fallback)``.

    Denial or timeout is never surfaced to the caller; the configured default
    center is returned instead.
    """
    try:
        return locator(), False
    except (GeolocationError, TimeoutError, ValueError) as exc:
        fallback = default_center()
        logger.warning("Geolocation failed (%s); falling back to %s,%s", exc, fallback.lat, fallback.lon)
        return fallback, True
