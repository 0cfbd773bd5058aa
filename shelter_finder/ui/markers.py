"""Keeps the map's shelter markers in step with the current result set."""

import html
import logging
from typing import Dict, Iterable, Optional
from urllib.parse import urlparse, urlunparse

from shelter_finder.etl.tiers import tier_color
from shelter_finder.etl.transform import EMAIL_PLACEHOLDER, PHONE_PLACEHOLDER, WEBSITE_PLACEHOLDER
from shelter_finder.models import Coordinate, ShelterWithDistance
from shelter_finder.ui.map_surface import MapSurface, MarkerHandle

logger = logging.getLogger(__name__)

USER_MARKER_COLOR = "#3B82F6"
SEARCH_MARKER_COLOR = "#EF4444"
SHELTER_MARKER_SCALE = 1.2


def sanitize_website(raw_url: str) -> Optional[str]:
    """Normalise raw website strings into absolute https URLs."""
    if not raw_url or raw_url == WEBSITE_PLACEHOLDER:
        return None

    url = raw_url.strip()
    if not url:
        return None

    parsed = urlparse(url)
    if not parsed.netloc and "//" not in url:
        # "host:8080/path" parses with "host" as the scheme
        parsed = urlparse(f"https://{url}")
    if parsed.scheme not in {"http", "https"} or not parsed.netloc or parsed.username:
        return None
    try:
        parsed.port
    except ValueError:
        return None

    return urlunparse(parsed._replace(fragment=""))


def shelter_popup(item: ShelterWithDistance) -> str:
    shelter = item.shelter
    esc = html.escape
    actions = []
    if shelter.phone != PHONE_PLACEHOLDER:
        actions.append(f'<a class="action call" href="tel:{esc(shelter.phone)}">Call</a>')
    if shelter.email != EMAIL_PLACEHOLDER:
        actions.append(f'<a class="action email" href="mailto:{esc(shelter.email)}">Email</a>')
    website = sanitize_website(shelter.website)
    if website:
        actions.append(f'<a class="action website" href="{esc(website)}" target="_blank" rel="noopener">Website</a>')

    notice = ""
    if shelter.is_synthetic:
        notice = '<p class="notice">Placeholder listing: not a verified shelter.</p>'

    return (
        '<div class="shelter-popup">'
        f"<h3>{esc(shelter.name)}</h3>"
        f"{notice}"
        f"<p>{esc(shelter.address)}, {esc(shelter.city)}, {esc(shelter.state)} {esc(shelter.zip)}</p>"
        f'<p class="distance">{item.distance:.1f} miles away</p>'
        f"<p>{esc(shelter.description)}</p>"
        f"<p><strong>Phone:</strong> {esc(shelter.phone)}</p>"
        f"<p><strong>Hours:</strong> {esc(shelter.hours)}</p>"
        f"<p><strong>Services:</strong> {esc(', '.join(shelter.services))}</p>"
        f'<div class="actions">{"".join(actions)}</div>'
        "</div>"
    )


class MarkerManager:
    """Owns three kinds of marker: shelters, the user's location, and one place-search result.

    Shelter markers live in a registry keyed by shelter id, so clearing them
    never touches the other two.
    """

    def __init__(self, surface: MapSurface) -> None:
        self.surface = surface
        self.shelter_markers: Dict[str, MarkerHandle] = {}
        self.user_marker: Optional[MarkerHandle] = None
        self.search_marker: Optional[MarkerHandle] = None

    def clear_shelters(self) -> None:
        for handle in self.shelter_markers.values():
            self.surface.remove_marker(handle)
        self.shelter_markers.clear()

    def render(self, shelters: Iterable[ShelterWithDistance]) -> None:
        self.clear_shelters()
        for item in shelters:
            key = item.shelter.id
            suffix = 1
            while key in self.shelter_markers:
                suffix += 1
                key = f"{item.shelter.id}~{suffix}"
            if key != item.shelter.id:
                logger.warning("Shelter id %s is not unique; registering marker as %s", item.shelter.id, key)
            handle = self.surface.add_marker(
                item.shelter.coordinates,
                tier_color(item.distance),
                shelter_popup(item),
                scale=SHELTER_MARKER_SCALE,
            )
            self.shelter_markers[key] = handle
        logger.info("Rendered %d shelter markers", len(self.shelter_markers))

    def clear_user_location(self) -> None:
        if self.user_marker is not None:
            self.surface.remove_marker(self.user_marker)
            self.user_marker = None

    def set_user_location(self, coordinate: Coordinate) -> None:
        if self.user_marker is not None:
            self.surface.remove_marker(self.user_marker)
        self.user_marker = self.surface.add_marker(
            coordinate, USER_MARKER_COLOR, "<h3>Your Location</h3>", scale=1.2
        )

    def set_search_result(self, coordinate: Coordinate, label: str) -> None:
        if self.search_marker is not None:
            self.surface.remove_marker(self.search_marker)
        self.search_marker = self.surface.add_marker(
            coordinate, SEARCH_MARKER_COLOR, f"<h3>{html.escape(label)}</h3>", scale=1.1
        )
