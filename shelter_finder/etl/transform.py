"""Utilities for transforming raw Nominatim and Overpass records into Shelters."""

import logging
from typing import Any, Dict, Iterable, List, Optional, Tuple

from shelter_finder.core.geo import haversine_miles
from shelter_finder.models import Coordinate, RawCandidate, Shelter

logger = logging.getLogger(__name__)

NAME_PLACEHOLDER = "Animal Shelter (Name not available)"
ADDRESS_PLACEHOLDER = "Address not available"
CITY_PLACEHOLDER = "City not available"
STATE_PLACEHOLDER = "State not available"
ZIP_PLACEHOLDER = "ZIP not available"
PHONE_PLACEHOLDER = "Phone not available"
EMAIL_PLACEHOLDER = "Email not available"
WEBSITE_PLACEHOLDER = "Website not available"
HOURS_PLACEHOLDER = "Hours not available"
DEFAULT_DESCRIPTION = "Animal shelter providing care and adoption services."
DEFAULT_SERVICES = ("Adoption", "Basic Care")

PLACEHOLDERS = {
    "name": NAME_PLACEHOLDER,
    "address": ADDRESS_PLACEHOLDER,
    "city": CITY_PLACEHOLDER,
    "state": STATE_PLACEHOLDER,
    "zip": ZIP_PLACEHOLDER,
    "phone": PHONE_PLACEHOLDER,
    "email": EMAIL_PLACEHOLDER,
    "website": WEBSITE_PLACEHOLDER,
    "description": DEFAULT_DESCRIPTION,
    "hours": HOURS_PLACEHOLDER,
}


def _strip_or_none(value: Any) -> Optional[str]:
    if value is None:
        return None
    value_str = str(value).strip()
    return value_str or None


def _safe_float(value: Any) -> Optional[float]:
    try:
        if value is None:
            return None
        return float(value)
    except (TypeError, ValueError):
        return None


def first_present(*values: Any, placeholder: str) -> str:
    """Return the first non-blank value as text, falling back to ``placeholder``."""
    for value in values:
        text = _strip_or_none(value)
        if text:
            return text
    return placeholder


def _join_street(house_number: Any, road: Any) -> Optional[str]:
    parts = [part for part in (_strip_or_none(house_number), _strip_or_none(road)) if part]
    return " ".join(parts) or None


def _services(is_veterinary: bool) -> Tuple[str, ...]:
    if is_veterinary:
        return DEFAULT_SERVICES + ("Veterinary Care",)
    return DEFAULT_SERVICES


def _coordinate(lon: Any, lat: Any) -> Optional[Coordinate]:
    lon_f = _safe_float(lon)
    lat_f = _safe_float(lat)
    if lon_f is None or lat_f is None:
        return None
    try:
        return Coordinate(lon=lon_f, lat=lat_f)
    except ValueError:
        return None


def _from_nominatim(item: Dict[str, Any], coordinate: Coordinate, provider: str) -> Shelter:
    address = item.get("address") or {}
    extratags = item.get("extratags") or {}
    namedetails = item.get("namedetails") or {}
    display_name = _strip_or_none(item.get("display_name"))
    display_head = display_name.split(",")[0] if display_name else None
    identity = item.get("place_id")
    if identity is None and item.get("osm_id") is not None:
        osm_type = _strip_or_none(item.get("osm_type"))
        # node, way and relation ids overlap
        identity = f"{osm_type}-{item['osm_id']}" if osm_type else item["osm_id"]
    if identity is None:
        identity = f"{coordinate.lat},{coordinate.lon}"

    return Shelter(
        id=f"{provider}-{identity}",
        name=first_present(namedetails.get("name"), item.get("name"), display_head, placeholder=NAME_PLACEHOLDER),
        address=first_present(
            _join_street(address.get("house_number"), address.get("road")),
            display_name,
            placeholder=ADDRESS_PLACEHOLDER,
        ),
        city=first_present(
            address.get("city"), address.get("town"), address.get("village"), address.get("hamlet"),
            placeholder=CITY_PLACEHOLDER,
        ),
        state=first_present(address.get("state"), placeholder=STATE_PLACEHOLDER),
        zip=first_present(address.get("postcode"), placeholder=ZIP_PLACEHOLDER),
        phone=first_present(extratags.get("phone"), extratags.get("contact:phone"), placeholder=PHONE_PLACEHOLDER),
        email=first_present(extratags.get("email"), extratags.get("contact:email"), placeholder=EMAIL_PLACEHOLDER),
        website=first_present(
            extratags.get("website"), extratags.get("contact:website"), placeholder=WEBSITE_PLACEHOLDER
        ),
        coordinates=coordinate,
        description=first_present(extratags.get("description"), placeholder=DEFAULT_DESCRIPTION),
        services=_services(item.get("type") == "veterinary"),
        hours=first_present(extratags.get("opening_hours"), placeholder=HOURS_PLACEHOLDER),
        image_url=_strip_or_none(extratags.get("image")),
    )


def _from_overpass(element: Dict[str, Any], coordinate: Coordinate, provider: str) -> Shelter:
    tags = element.get("tags") or {}
    element_type = _strip_or_none(element.get("type"))
    element_id = element.get("id")
    identity = f"{element_type}-{element_id}" if element_type else str(element_id)

    return Shelter(
        id=f"{provider}-{identity}",
        name=first_present(tags.get("name"), tags.get("official_name"), tags.get("alt_name"), placeholder=NAME_PLACEHOLDER),
        address=first_present(
            _join_street(tags.get("addr:housenumber"), tags.get("addr:street")), placeholder=ADDRESS_PLACEHOLDER
        ),
        city=first_present(tags.get("addr:city"), placeholder=CITY_PLACEHOLDER),
        state=first_present(tags.get("addr:state"), placeholder=STATE_PLACEHOLDER),
        zip=first_present(tags.get("addr:postcode"), placeholder=ZIP_PLACEHOLDER),
        phone=first_present(tags.get("phone"), tags.get("contact:phone"), placeholder=PHONE_PLACEHOLDER),
        email=first_present(tags.get("email"), tags.get("contact:email"), placeholder=EMAIL_PLACEHOLDER),
        website=first_present(tags.get("website"), tags.get("contact:website"), placeholder=WEBSITE_PLACEHOLDER),
        coordinates=coordinate,
        description=first_present(tags.get("description"), placeholder=DEFAULT_DESCRIPTION),
        services=_services(tags.get("amenity") == "veterinary"),
        hours=first_present(tags.get("opening_hours"), placeholder=HOURS_PLACEHOLDER),
        image_url=_strip_or_none(tags.get("image")),
    )


def record_coordinate(record: Dict[str, Any]) -> Optional[Coordinate]:
    """Read a coordinate from either record shape; ways and relations carry it under ``center``."""
    center = record.get("center") or {}
    lon = record.get("lon") if record.get("lon") is not None else center.get("lon")
    lat = record.get("lat") if record.get("lat") is not None else center.get("lat")
    return _coordinate(lon, lat)


def normalize(
    record: Dict[str, Any], center: Coordinate, max_radius_miles: float, provider: str
) -> Optional[Shelter]:
    """Map one raw provider record onto a Shelter, or ``None`` when it falls outside the radius."""
    coordinate = record_coordinate(record)
    if coordinate is None:
        logger.debug("Dropping %s record without coordinates", provider)
        return None

    distance = haversine_miles(center, coordinate)
    if distance > max_radius_miles:
        logger.debug("Dropping %s record %.1f miles away (limit %.1f)", provider, distance, max_radius_miles)
        return None

    if provider.startswith("overpass"):
        return _from_overpass(record, coordinate, provider)
    return _from_nominatim(record, coordinate, provider)


def normalize_all(
    candidates: Iterable[RawCandidate], center: Coordinate, max_radius_miles: float
) -> List[Shelter]:
    shelters: List[Shelter] = []
    for candidate in candidates:
        shelter = normalize(candidate.record, center, max_radius_miles, candidate.provider)
        if shelter is not None:
            shelters.append(shelter)
    return shelters
