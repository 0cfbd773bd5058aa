"""Discovery cycle: query providers, normalize, deduplicate, fall back, classify."""

from __future__ import annotations

import enum
import logging
import threading
from dataclasses import dataclass, field
from typing import Callable, List, Optional, Sequence, Tuple

from shelter_finder.etl.dedupe import remove_duplicates
from shelter_finder.etl.fallback import generate_fallback
from shelter_finder.etl.tiers import classify, max_active_radius
from shelter_finder.etl.transform import normalize_all
from shelter_finder.models import (
    Coordinate,
    RadiusFilter,
    RawCandidate,
    Shelter,
    ShelterWithDistance,
    default_radius_filters,
)
from shelter_finder.vendors import nominatim, overpass

logger = logging.getLogger(__name__)

Provider = Callable[[Coordinate, float], List[RawCandidate]]
FallbackGenerator = Callable[[Coordinate, float], List[Shelter]]

SEARCHING_MESSAGE = "Searching for real shelters..."
ERROR_MESSAGE = "Error searching for shelters. Please try again."


class DiscoveryPhase(str, enum.Enum):
    IDLE = "idle"
    QUERYING = "querying"
    CLASSIFYING = "classifying"
    READY = "ready"
    FAILED = "failed"


@dataclass
class DiscoveryState:
    """Mutable state of the shelter view, owned by one orchestrator."""

    filters: List[RadiusFilter] = field(default_factory=default_radius_filters)
    center: Optional[Coordinate] = None
    phase: DiscoveryPhase = DiscoveryPhase.IDLE
    loading: bool = False
    status: str = ""
    results: List[ShelterWithDistance] = field(default_factory=list)
    candidates: List[Shelter] = field(default_factory=list)
    queried_radius: float = 0.0
    synthetic: bool = False
    generation: int = 0


def default_providers() -> List[Provider]:
    return [nominatim.search_shelters, overpass.search_shelters]


def _ready_message(count: int, synthetic: bool) -> str:
    if synthetic:
        return f"No shelters found nearby; showing {count} placeholder listings"
    return f"Found {count} real shelters nearby"


class DiscoveryOrchestrator:
    """Sequences providers and holds the latest result set.

    Each cycle takes a generation number when it starts. A cycle that finishes
    after a newer one has started discards its results instead of committing.
    """

    def __init__(
        self,
        providers: Optional[Sequence[Provider]] = None,
        fallback: FallbackGenerator = generate_fallback,
        state: Optional[DiscoveryState] = None,
    ) -> None:
        self.providers = list(providers) if providers is not None else default_providers()
        self.fallback = fallback
        self.state = state or DiscoveryState()
        self._lock = threading.Lock()

    def _next_generation(self) -> int:
        with self._lock:
            self.state.generation += 1
            return self.state.generation

    def _is_current(self, generation: int) -> bool:
        with self._lock:
            return generation == self.state.generation

    def _query(self, center: Coordinate, radius: float) -> Tuple[List[Shelter], bool]:
        raw: List[RawCandidate] = []
        for provider in self.providers:
            raw.extend(provider(center, radius))

        shelters = remove_duplicates(normalize_all(raw, center, radius))
        if shelters:
            return shelters, False

        logger.info("No provider results within %.1f miles; generating placeholders", radius)
        return self.fallback(center, radius), True

    def discover(self, center: Coordinate) -> DiscoveryState:
        """Run a full cycle around center: Querying, then Classifying, ending Ready or Failed."""
        generation = self._next_generation()
        state = self.state
        state.center = center
        state.phase = DiscoveryPhase.QUERYING
        state.loading = True
        state.status = SEARCHING_MESSAGE

        radius = max_active_radius(state.filters)
        try:
            if radius is None:
                logger.info("No radius filters active; skipping provider queries")
                candidates, synthetic, radius = [], False, 0.0
            else:
                logger.info("Discovering shelters within %.1f miles of %s,%s", radius, center.lat, center.lon)
                candidates, synthetic = self._query(center, radius)

            if not self._is_current(generation):
                logger.info("Discarding results of superseded discovery cycle %d", generation)
                return state

            state.phase = DiscoveryPhase.CLASSIFYING
            state.candidates = candidates
            state.queried_radius = radius
            state.synthetic = synthetic
            state.results = classify(candidates, center, state.filters)
            state.status = _ready_message(len(state.results), synthetic)
            state.phase = DiscoveryPhase.READY
        except Exception:  # noqa: BLE001
            logger.exception("Discovery cycle %d failed", generation)
            if self._is_current(generation):
                state.phase = DiscoveryPhase.FAILED
                state.status = ERROR_MESSAGE
                state.results = []
                state.candidates = []
                state.queried_radius = 0.0
        finally:
            if self._is_current(generation):
                state.loading = False

        logger.info("Discovery cycle %d: %s", generation, state.status)
        return state

    def reclassify(self) -> DiscoveryState:
        """Re-apply the current filters to the cached candidates.

        Falls through to a full cycle when the widest active band now exceeds
        the radius the cache was queried with.
        """
        state = self.state
        if state.center is None:
            logger.debug("No center known yet; nothing to reclassify")
            return state

        radius = max_active_radius(state.filters)
        if radius is not None and (state.phase is not DiscoveryPhase.READY or radius > state.queried_radius):
            return self.discover(state.center)

        self._next_generation()
        state.phase = DiscoveryPhase.CLASSIFYING
        state.results = classify(state.candidates, state.center, state.filters)
        state.status = _ready_message(len(state.results), state.synthetic)
        state.phase = DiscoveryPhase.READY
        return state

    def reset(self) -> None:
        """Drop every result; the filters survive."""
        self._next_generation()
        state = self.state
        state.center = None
        state.phase = DiscoveryPhase.IDLE
        state.loading = False
        state.status = ""
        state.results = []
        state.candidates = []
        state.queried_radius = 0.0
        state.synthetic = False
