"""Map surface boundary and a static Leaflet implementation of it."""

import abc
import itertools
import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Dict, List, Optional, Tuple

from shelter_finder.models import Coordinate

logger = logging.getLogger(__name__)

MarkerHandle = int


class MapSurface(abc.ABC):
    """What the shelter view needs from an interactive map."""

    @abc.abstractmethod
    def initialize(self, center: Coordinate, zoom: float, tiles_url: str, attribution: str) -> None: ...

    @abc.abstractmethod
    def add_control(self, kind: str, position: str, **options: object) -> None: ...

    @abc.abstractmethod
    def add_marker(self, coordinate: Coordinate, color: str, popup_html: str, scale: float = 1.0) -> MarkerHandle: ...

    @abc.abstractmethod
    def remove_marker(self, handle: MarkerHandle) -> None: ...

    @abc.abstractmethod
    def fly_to(self, coordinate: Coordinate, zoom: float) -> None: ...

    @abc.abstractmethod
    def on_load(self, callback: Callable[[], None]) -> None: ...


@dataclass(frozen=True)
class PlacedMarker:
    coordinate: Coordinate
    color: str
    popup_html: str
    scale: float


class LeafletMapSurface(MapSurface):
    """Keeps markers in memory and writes them out as a standalone Leaflet page."""

    def __init__(self) -> None:
        self.center: Optional[Coordinate] = None
        self.zoom: float = 0
        self.tiles_url = ""
        self.attribution = ""
        self.controls: List[Tuple[str, str, Dict[str, object]]] = []
        self.markers: Dict[MarkerHandle, PlacedMarker] = {}
        self.loaded = False
        self._listeners: List[Callable[[], None]] = []
        self._handles = itertools.count(1)

    def initialize(self, center: Coordinate, zoom: float, tiles_url: str, attribution: str) -> None:
        self.center = center
        self.zoom = zoom
        self.tiles_url = tiles_url
        self.attribution = attribution

    def add_control(self, kind: str, position: str, **options: object) -> None:
        self.controls.append((kind, position, dict(options)))

    def add_marker(self, coordinate: Coordinate, color: str, popup_html: str, scale: float = 1.0) -> MarkerHandle:
        handle = next(self._handles)
        self.markers[handle] = PlacedMarker(coordinate, color, popup_html, scale)
        return handle

    def remove_marker(self, handle: MarkerHandle) -> None:
        if self.markers.pop(handle, None) is None:
            logger.debug("Marker %s was already removed", handle)

    def fly_to(self, coordinate: Coordinate, zoom: float) -> None:
        self.center = coordinate
        self.zoom = zoom

    def on_load(self, callback: Callable[[], None]) -> None:
        if self.loaded:
            callback()
            return
        self._listeners.append(callback)

    def load(self) -> None:
        """Fire the load event; the page is ready once tiles and controls are set up."""
        if self.loaded:
            return
        self.loaded = True
        listeners, self._listeners = self._listeners, []
        for callback in listeners:
            callback()

    def render_html(self) -> str:
        if self.center is None:
            raise RuntimeError("map surface was never initialized")

        markers = [
            [m.coordinate.lat, m.coordinate.lon, m.color, m.popup_html, m.scale] for m in self.markers.values()
        ]
        scale_control = any(kind == "scale" for kind, _, _ in self.controls)
        return f"""<!doctype html><html><head>
<meta charset="utf-8"><meta name="viewport" content="width=device-width,initial-scale=1">
<link rel="stylesheet" href="https://unpkg.com/leaflet@1.9.4/dist/leaflet.css">
<style>#map{{height:100vh}}</style>
</head><body><div id="map"></div>
<script src="https://unpkg.com/leaflet@1.9.4/dist/leaflet.js"></script>
<script>
var map=L.map('map').setView([{self.center.lat},{self.center.lon}],{self.zoom});
L.tileLayer({json.dumps(self.tiles_url)},{{attribution:{json.dumps(self.attribution)}}}).addTo(map);
{"L.control.scale({imperial:true,metric:false}).addTo(map);" if scale_control else ""}
var m={json.dumps(markers)};
m.forEach(function(p){{L.circleMarker([p[0],p[1]],{{color:p[2],fillColor:p[2],radius:7*p[4],fillOpacity:.8}}).bindPopup(p[3],{{offset:[0,-10]}}).addTo(map);}});
</script></body></html>"""

    def save(self, path: str) -> Path:
        target = Path(path)
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(self.render_html(), encoding="utf-8")
        logger.info("Wrote map with %d markers to %s", len(self.markers), target)
        return target
