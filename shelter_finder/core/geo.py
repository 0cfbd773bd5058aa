"""Great-circle helpers used for radius filtering and tier classification."""

import math
from typing import Tuple

from shelter_finder.models import Coordinate

EARTH_RADIUS_MILES = 3959.0
MILES_PER_DEGREE_LAT = 69.0
METERS_PER_MILE = 1609.344


def haversine_miles(a: Coordinate, b: Coordinate) -> float:
    """Return the haversine distance between two coordinates in miles."""
    lat1 = math.radians(a.lat)
    lat2 = math.radians(b.lat)
    d_lat = lat2 - lat1
    d_lon = math.radians(b.lon - a.lon)
    h = math.sin(d_lat / 2) ** 2 + math.cos(lat1) * math.cos(lat2) * math.sin(d_lon / 2) ** 2
    # rounding can push h a hair above 1 for antipodal points
    h = min(1.0, max(0.0, h))
    return EARTH_RADIUS_MILES * 2 * math.atan2(math.sqrt(h), math.sqrt(1 - h))


def bounding_box(center: Coordinate, radius_miles: float) -> Tuple[float, float, float, float]:
    """Return (west, north, east, south) degrees covering ``radius_miles`` around center.

    The order matches Nominatim's ``viewbox`` parameter.
    """
    lat_delta = radius_miles / MILES_PER_DEGREE_LAT
    cos_lat = max(math.cos(math.radians(center.lat)), 1e-6)
    lon_delta = radius_miles / (MILES_PER_DEGREE_LAT * cos_lat)
    west = max(-180.0, center.lon - lon_delta)
    east = min(180.0, center.lon + lon_delta)
    north = min(90.0, center.lat + lat_delta)
    south = max(-90.0, center.lat - lat_delta)
    return west, north, east, south


def destination(origin: Coordinate, bearing_radians: float, distance_miles: float) -> Coordinate:
    """Travel ``distance_miles`` from origin along an initial bearing on the sphere."""
    angular = distance_miles / EARTH_RADIUS_MILES
    lat1 = math.radians(origin.lat)
    lon1 = math.radians(origin.lon)

    sin_lat2 = math.sin(lat1) * math.cos(angular) + math.cos(lat1) * math.sin(angular) * math.cos(bearing_radians)
    lat2 = math.asin(min(1.0, max(-1.0, sin_lat2)))
    lon2 = lon1 + math.atan2(
        math.sin(bearing_radians) * math.sin(angular) * math.cos(lat1),
        math.cos(angular) - math.sin(lat1) * math.sin(lat2),
    )
    lon_deg = (math.degrees(lon2) + 540.0) % 360.0 - 180.0
    lat_deg = min(90.0, max(-90.0, math.degrees(lat2)))
    return Coordinate(lon=lon_deg, lat=lat_deg)
