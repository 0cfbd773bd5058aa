"""Collapse shelters that several sub-queries or providers returned for the same place."""

import logging
from typing import Iterable, List, Set, Tuple

from shelter_finder.models import Shelter

logger = logging.getLogger(__name__)

COORDINATE_PRECISION = 4


def coordinate_key(shelter: Shelter) -> Tuple[str, str]:
    """Quantize to 4 decimals (~11 m); providers rarely agree on the exact position."""
    lon, lat = shelter.coordinates.as_lon_lat()
    return f"{lon:.{COORDINATE_PRECISION}f}", f"{lat:.{COORDINATE_PRECISION}f}"


def remove_duplicates(shelters: Iterable[Shelter]) -> List[Shelter]:
    """Keep the first shelter seen for every rounded coordinate, preserving order."""
    seen: Set[Tuple[str, str]] = set()
    unique: List[Shelter] = []
    total = 0
    for shelter in shelters:
        total += 1
        key = coordinate_key(shelter)
        if key in seen:
            logger.debug("Dropping duplicate %s at %s", shelter.id, key)
            continue
        seen.add(key)
        unique.append(shelter)

    logger.info("Deduplicated %d shelters down to %d", total, len(unique))
    return unique
