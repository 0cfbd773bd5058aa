"""Placeholder shelters for areas where no provider returned anything."""

import logging
import math
import random
from typing import List, Optional

from shelter_finder.core.geo import destination
from shelter_finder.models import Coordinate, Shelter

logger = logging.getLogger(__name__)

MIN_SHELTERS = 10
MAX_SHELTERS = 25

LOCAL_NAMES = (
    "Local Animal Rescue", "Community Pet Shelter", "Neighborhood Animal Care",
    "Regional Pet Rescue", "Local Humane Society", "Community Animal Shelter",
    "Area Pet Adoption", "Local Animal Care Center", "Regional Animal Rescue",
    "Community Pet Care", "Local Animal Aid", "Neighborhood Pet Rescue",
    "City Animal Shelter", "County Humane Society", "Local SPCA",
    "Animal Rescue League", "Pet Adoption Center", "Local Animal Hospital",
    "Community Pet Services", "Regional Animal Care", "Local Pet Rescue",
    "Animal Welfare Society", "Pet Care Center", "Local Animal Services",
    "Community Animal Aid", "Regional Pet Care", "Local Animal Support",
)

STREET_NAMES = (
    "Main St", "Oak Ave", "Pine St", "Cedar Ln", "Maple Dr", "Elm St",
    "Park Ave", "First St", "Second St", "Third St", "Broadway", "Center St",
    "Washington St", "Lincoln Ave", "Jefferson St", "Madison Ave",
    "Roosevelt St", "Kennedy Dr", "Johnson Ave", "Wilson St",
)

SERVICE_BUNDLES = (
    ("Adoption", "Basic Care", "Community Support"),
    ("Adoption", "Veterinary Care", "Spay/Neuter"),
    ("Adoption", "Foster Care", "Community Outreach"),
    ("Adoption", "Medical Care", "Training"),
    ("Adoption", "Emergency Care", "Behavioral Support"),
)


def generate_fallback(center: Coordinate, max_radius_miles: float, rng: Optional[random.Random] = None) -> List[Shelter]:
    """Scatter 10-25 synthetic shelters uniformly in bearing and distance around center."""
    rng = rng or random.Random()
    count = rng.randint(MIN_SHELTERS, MAX_SHELTERS)
    shelters: List[Shelter] = []

    for index in range(count):
        bearing = rng.random() * 2 * math.pi
        distance = rng.random() * max_radius_miles
        position = destination(center, bearing, distance)

        shelters.append(
            Shelter(
                id=f"local-shelter-{index + 1}",
                name=rng.choice(LOCAL_NAMES),
                address=f"{rng.randint(1, 9999)} {rng.choice(STREET_NAMES)}",
                city="Local City",
                state="State",
                zip=str(rng.randint(10000, 99999)),
                phone=f"({rng.randint(100, 999)}) {rng.randint(100, 999)}-{rng.randint(1000, 9999)}",
                email="info@localshelter.org",
                website="www.localshelter.org",
                coordinates=position,
                description="Local animal shelter providing care and adoption services for pets in the community.",
                services=rng.choice(SERVICE_BUNDLES),
                hours="Mon-Sat 10AM-5PM",
                is_synthetic=True,
            )
        )

    logger.info("Generated %d placeholder shelters within %.1f miles", count, max_radius_miles)
    return shelters
