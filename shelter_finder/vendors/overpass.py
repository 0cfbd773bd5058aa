"""Client utilities for the Overpass API."""

import logging
from typing import Any, Dict, List, Optional

import requests

from shelter_finder.core.config import get_settings
from shelter_finder.core.geo import METERS_PER_MILE
from shelter_finder.models import Coordinate, RawCandidate
from shelter_finder.vendors.http import build_session, default_headers

logger = logging.getLogger(__name__)
_SESSION: Optional[requests.Session] = None

QUERY_TIMEOUT_SECONDS = 25
_ORG_NAMES = "shelter|rescue|humane|spca|animal"
_CLINIC_NAMES = "shelter|rescue|humane|spca|adoption"
_SOCIAL_NAMES = "animal|pet|dog|cat"


class OverpassError(RuntimeError):
    """Raised when Overpass answers without an ``elements`` list."""


def _get_session() -> requests.Session:
    global _SESSION
    if _SESSION is None:
        _SESSION = build_session(get_settings().http_max_retries)
    return _SESSION


def build_query(center: Coordinate, max_radius_miles: float) -> str:
    around = f"(around:{max_radius_miles * METERS_PER_MILE:.0f},{center.lat},{center.lon})"
    statements = [
        f'node["amenity"="animal_shelter"]{around};',
        f'way["amenity"="animal_shelter"]{around};',
        f'relation["amenity"="animal_shelter"]{around};',
    ]
    for office in ("ngo", "charity", "association"):
        for kind in ("node", "way"):
            statements.append(f'{kind}["office"="{office}"]["name"~"{_ORG_NAMES}",i]{around};')
    for kind in ("node", "way"):
        statements.append(f'{kind}["amenity"~"veterinary|clinic"]["name"~"{_CLINIC_NAMES}",i]{around};')
    for kind in ("node", "way"):
        statements.append(f'{kind}["amenity"="social_facility"]["name"~"{_SOCIAL_NAMES}",i]{around};')

    body = "\n  ".join(statements)
    return f"[out:json][timeout:{QUERY_TIMEOUT_SECONDS}];\n(\n  {body}\n);\nout center tags;"


def interpret(query: str) -> List[Dict[str, Any]]:
    settings = get_settings()
    response = _get_session().post(
        settings.overpass_url,
        data={"data": query},
        headers=default_headers(settings),
        timeout=settings.http_timeout_seconds,
    )
    response.raise_for_status()
    payload = response.json()
    elements = payload.get("elements") if isinstance(payload, dict) else None
    if not isinstance(elements, list):
        raise OverpassError("response has no elements list")
    return elements


def search_shelters(center: Coordinate, max_radius_miles: float) -> List[RawCandidate]:
    """Run the single combined shelter query; any failure yields an empty list."""
    try:
        elements = interpret(build_query(center, max_radius_miles))
    except Exception as exc:  # noqa: BLE001
        logger.warning("Overpass search failed: %s", exc)
        return []

    candidates = [
        RawCandidate(provider="overpass", record=element)
        for element in elements
        if isinstance(element, dict) and element.get("tags")
    ]
    logger.info("Overpass found %d elements, %d with tags", len(elements), len(candidates))
    return candidates
