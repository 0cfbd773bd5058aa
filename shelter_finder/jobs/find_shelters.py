"""CLI job that discovers shelters around a location and writes an HTML map."""

import argparse
import logging
from typing import List, Optional, Sequence

from shelter_finder.core.geolocation import static_locator
from shelter_finder.jobs.discovery import DiscoveryOrchestrator, DiscoveryPhase
from shelter_finder.models import Coordinate
from shelter_finder.ui.controller import InteractionController
from shelter_finder.ui.map_surface import LeafletMapSurface

logger = logging.getLogger(__name__)


def run_find_shelters(
    *,
    lat: Optional[float],
    lon: Optional[float],
    disabled_miles: Sequence[float],
    search: Optional[str],
    output: str,
) -> InteractionController:
    if (lat is None) != (lon is None):
        raise ValueError("--lat and --lon must be given together")
    device = Coordinate(lon=lon, lat=lat) if lat is not None and lon is not None else None

    surface = LeafletMapSurface()
    orchestrator = DiscoveryOrchestrator()
    for radius_filter in orchestrator.state.filters:
        if radius_filter.miles in disabled_miles:
            radius_filter.active = False

    controller = InteractionController(surface, orchestrator, static_locator(device))
    controller.mount()
    surface.load()

    state = controller.state
    log = logger.error if state.phase is DiscoveryPhase.FAILED else logger.info
    log("%s", state.status)
    for item in sorted(state.results, key=lambda r: r.distance):
        shelter = item.shelter
        logger.info("%5.1f mi  %s | %s, %s | %s", item.distance, shelter.name, shelter.address, shelter.city, shelter.phone)

    if search:
        match = controller.search_place(search)
        if match is None:
            logger.warning("No place found for %r", search)
        else:
            logger.info("Centered map on %s", match.display_name)

    surface.save(output)
    return controller


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Find animal shelters near a location")
    parser.add_argument("--lat", type=float, help="Device latitude; omitted means location unavailable")
    parser.add_argument("--lon", type=float, help="Device longitude")
    parser.add_argument(
        "--disable",
        dest="disabled_miles",
        type=float,
        action="append",
        default=[],
        help="Switch off the radius filter with this many miles (repeatable)",
    )
    parser.add_argument("--search", help="Place to center the map on after discovery")
    parser.add_argument("--output", default="shelters_map.html", help="Where to write the HTML map")
    return parser


def main(argv: Optional[List[str]] = None) -> None:
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s - %(message)s")
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        run_find_shelters(
            lat=args.lat,
            lon=args.lon,
            disabled_miles=args.disabled_miles,
            search=args.search,
            output=args.output,
        )
    except ValueError as exc:
        parser.error(str(exc))


if __name__ == "__main__":
    main()
