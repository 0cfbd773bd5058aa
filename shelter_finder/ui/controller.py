"""User-facing triggers: mount, filter toggles, my-location and place search."""

import logging
from typing import Optional

import requests

from shelter_finder.core.config import get_settings
from shelter_finder.core.geolocation import Geolocator, default_center, resolve_location
from shelter_finder.jobs.discovery import DiscoveryOrchestrator, DiscoveryState
from shelter_finder.models import Coordinate, Shelter
from shelter_finder.ui.map_surface import MapSurface
from shelter_finder.ui.markers import MarkerManager
from shelter_finder.vendors import nominatim

logger = logging.getLogger(__name__)

INITIAL_ZOOM = 4
LOCATION_ZOOM = 10
SEARCH_ZOOM = 12
SHELTER_ZOOM = 15


class InteractionController:
    def __init__(
        self,
        surface: MapSurface,
        orchestrator: DiscoveryOrchestrator,
        locator: Geolocator,
        markers: Optional[MarkerManager] = None,
    ) -> None:
        self.surface = surface
        self.orchestrator = orchestrator
        self.locator = locator
        self.markers = markers or MarkerManager(surface)
        self.selected: Optional[Shelter] = None
        self.searching = False

    @property
    def state(self) -> DiscoveryState:
        return self.orchestrator.state

    def mount(self) -> None:
        """Set up the map; the first discovery cycle waits for its load event."""
        settings = get_settings()
        self.surface.initialize(default_center(), INITIAL_ZOOM, settings.map_tiles_url, settings.map_tiles_attribution)
        self.surface.add_control("navigation", "top-right")
        self.surface.add_control("scale", "bottom-left", max_width=100, unit="imperial")
        self.surface.on_load(self.use_my_location)

    def unmount(self) -> None:
        self.markers.clear_shelters()
        self.orchestrator.reset()
        self.selected = None

    def _run(self, center: Coordinate) -> DiscoveryState:
        state = self.orchestrator.discover(center)
        self.markers.render(state.results)
        return state

    def use_my_location(self) -> DiscoveryState:
        """Re-acquire the device location (or the default center) and run a full cycle."""
        center, used_fallback = resolve_location(self.locator)
        if used_fallback:
            self.markers.clear_user_location()
        else:
            self.markers.set_user_location(center)
        self.surface.fly_to(center, LOCATION_ZOOM)
        return self._run(center)

    def toggle_filter(self, index: int) -> DiscoveryState:
        radius_filter = self.state.filters[index]
        radius_filter.active = not radius_filter.active
        logger.info("Radius filter %s is now %s", radius_filter.label, "on" if radius_filter.active else "off")

        if self.state.center is None:
            return self.state
        state = self.orchestrator.reclassify()
        self.markers.render(state.results)
        return state

    def search_place(self, query: str) -> Optional[nominatim.PlaceMatch]:
        """Recenter on a geocoded place and mark it. No shelter discovery is triggered."""
        if not query or not query.strip():
            return None

        self.searching = True
        try:
            match = nominatim.geocode(query)
        except (requests.RequestException, nominatim.NominatimError, ValueError) as exc:
            logger.warning("Place search failed for query=%s: %s", query, exc)
            return None
        finally:
            self.searching = False

        if match is None:
            return None
        self.surface.fly_to(match.coordinate, SEARCH_ZOOM)
        self.markers.set_search_result(match.coordinate, match.display_name)
        return match

    def select_shelter(self, shelter: Shelter) -> None:
        self.selected = shelter
        self.surface.fly_to(shelter.coordinates, SHELTER_ZOOM)
