"""Client utilities for the Nominatim text/tag search API.

Nominatim's public instance allows roughly one unauthenticated request per
second per client, so shelter sub-queries run strictly one after another
through a :class:`ThrottledQueue`.
"""

import logging
import time
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional

import requests

from shelter_finder.core.config import get_settings
from shelter_finder.core.geo import bounding_box
from shelter_finder.models import Coordinate, RawCandidate
from shelter_finder.vendors.http import build_session, default_headers
from shelter_finder.vendors.throttle import ThrottledQueue

logger = logging.getLogger(__name__)
_SESSION: Optional[requests.Session] = None

SEARCH_TERMS = (
    "animal shelter",
    "dog shelter",
    "cat shelter",
    "pet shelter",
    "humane society",
    "spca",
    "animal rescue",
    "dog rescue",
    "pet rescue",
    "animal adoption",
    "pet adoption center",
    "animal welfare",
    "rescue organization",
)
SHELTER_NAME_KEYWORDS = ("shelter", "rescue", "humane", "spca", "adoption")
_PLACE_CLASSES = {"place", "amenity"}
_PLACE_OSM_TYPES = {"node", "way"}


class NominatimError(RuntimeError):
    """Raised when Nominatim answers with something other than a result list."""


@dataclass(frozen=True)
class SubQuery:
    provider: str
    params: Dict[str, Any] = field(repr=False)
    accept: Callable[[Dict[str, Any]], bool] = field(default=lambda item: True, repr=False)


@dataclass(frozen=True)
class PlaceMatch:
    coordinate: Coordinate
    display_name: str


def _get_session() -> requests.Session:
    global _SESSION
    if _SESSION is None:
        _SESSION = build_session(get_settings().http_max_retries)
    return _SESSION


def search(params: Dict[str, Any]) -> List[Dict[str, Any]]:
    """Run one GET against ``/search`` and return the decoded result list."""
    settings = get_settings()
    query = {"format": "json", **params}
    response = _get_session().get(
        f"{settings.nominatim_url}/search",
        params=query,
        headers=default_headers(settings),
        timeout=settings.http_timeout_seconds,
    )
    response.raise_for_status()
    payload = response.json()
    if not isinstance(payload, list):
        logger.error("Nominatim search returned %s instead of a list", type(payload).__name__)
        raise NominatimError(f"unexpected payload type {type(payload).__name__}")
    return payload


def looks_like_place(item: Dict[str, Any]) -> bool:
    """Free-text hits can be bare street addresses; keep organisations and places only."""
    return (
        item.get("class") in _PLACE_CLASSES
        or item.get("type") == "yes"
        or item.get("osm_type") in _PLACE_OSM_TYPES
    )


def name_matches_shelter(item: Dict[str, Any]) -> bool:
    namedetails = item.get("namedetails") or {}
    name = (namedetails.get("name") or item.get("name") or item.get("display_name") or "").lower()
    return any(keyword in name for keyword in SHELTER_NAME_KEYWORDS)


def build_subqueries(center: Coordinate, max_radius_miles: float) -> List[SubQuery]:
    """Return the ordered shelter sub-queries: amenity tag, synonym terms, then veterinary."""
    settings = get_settings()
    west, north, east, south = bounding_box(center, max_radius_miles)
    common = {
        "viewbox": f"{west},{north},{east},{south}",
        "bounded": 1,
        "limit": settings.nominatim_result_limit,
        "addressdetails": 1,
        "extratags": 1,
        "namedetails": 1,
    }

    subqueries = [SubQuery("nominatim-amenity", {**common, "amenity": "animal_shelter"})]
    for term in SEARCH_TERMS:
        provider = "nominatim-" + "-".join(term.split())
        subqueries.append(SubQuery(provider, {**common, "q": term}, looks_like_place))
    subqueries.append(SubQuery("nominatim-vet", {**common, "amenity": "veterinary"}, name_matches_shelter))
    return subqueries


def search_shelters(
    center: Coordinate,
    max_radius_miles: float,
    sleep: Optional[Callable[[float], None]] = None,
) -> List[RawCandidate]:
    """Collect raw shelter candidates from every sub-query, skipping the ones that fail."""
    settings = get_settings()
    queue: ThrottledQueue[SubQuery, List[Dict[str, Any]]] = ThrottledQueue(
        lambda sub: search(sub.params),
        delay_seconds=settings.nominatim_delay_seconds,
        sleep=sleep or time.sleep,
    )

    candidates: List[RawCandidate] = []
    for sub, items in queue.run(build_subqueries(center, max_radius_miles)):
        kept = [item for item in items if isinstance(item, dict) and sub.accept(item)]
        logger.info("Nominatim %s returned %d results, kept %d", sub.provider, len(items), len(kept))
        candidates.extend(RawCandidate(provider=sub.provider, record=item) for item in kept)

    logger.info("Total Nominatim candidates before normalization: %d", len(candidates))
    return candidates


def geocode(query: str) -> Optional[PlaceMatch]:
    """Resolve free text to the first matching coordinate, or ``None`` when nothing matches."""
    if not query or not query.strip():
        return None

    results = search({"q": query.strip(), "limit": 1, "addressdetails": 1})
    if not results:
        logger.info("No geocoding match for query=%s", query)
        return None

    first = results[0]
    try:
        coordinate = Coordinate(lon=float(first["lon"]), lat=float(first["lat"]))
    except (KeyError, TypeError, ValueError) as exc:
        raise NominatimError(f"geocoding result without usable coordinates: {exc}") from exc
    return PlaceMatch(coordinate=coordinate, display_name=first.get("display_name") or query.strip())
