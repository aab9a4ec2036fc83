"""Map composition surface.

A :class:`MapView` is the long-lived map hosting one shipment marker and
the route overlays. It is built once per mounted session; afterwards only
the marker position, popup and polylines change. Tile rendering belongs
to whatever widget consumes :meth:`MapView.to_geojson`.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Any

from shiptrack._constants import DEFAULT_ZOOM, TILE_ATTRIBUTION, TILE_URL
from shiptrack.models._base import LatLng
from shiptrack.models.route import RouteSource


def is_finite_point(point: Any) -> bool:
    """Return ``True`` for a 2-sequence of finite real numbers."""
    if not isinstance(point, (list, tuple)) or len(point) != 2:
        return False
    return all(
        isinstance(coord, (int, float)) and not isinstance(coord, bool) and math.isfinite(coord) for coord in point
    )


@dataclass
class Marker:
    """Mutable marker handle. Moved in place, never replaced."""

    position: LatLng
    popup: str = ""
    moves: int = 0

    def set_lat_lng(self, position: LatLng) -> None:
        self.position = (float(position[0]), float(position[1]))
        self.moves += 1

    def set_popup(self, content: str) -> None:
        self.popup = content


@dataclass(frozen=True)
class PolylineStyle:
    color: str
    weight: int = 3
    dash_array: str | None = None


ROUTE_STYLES: dict[RouteSource, PolylineStyle] = {
    RouteSource.SIMULATED: PolylineStyle(color="blue"),
    RouteSource.OPTIMIZED: PolylineStyle(color="red", dash_array="8 4"),
}


@dataclass
class Polyline:
    points: tuple[LatLng, ...]
    style: PolylineStyle


@dataclass
class MapView:
    """Base layer, initial viewport, one marker and route overlays.

    The marker is created together with the view and starts at *center*.
    """

    center: LatLng
    zoom: int = DEFAULT_ZOOM
    tile_url: str = TILE_URL
    attribution: str = TILE_ATTRIBUTION
    marker: Marker = field(init=False)
    overlays: dict[RouteSource, Polyline] = field(init=False, default_factory=dict)

    def __post_init__(self) -> None:
        self.marker = Marker(position=self.center)

    def set_route(self, source: RouteSource, points: tuple[LatLng, ...]) -> None:
        """Replace the overlay for *source*; an empty route removes it."""
        if not points:
            self.clear_route(source)
            return
        self.overlays[source] = Polyline(points=points, style=ROUTE_STYLES[source])

    def clear_route(self, source: RouteSource) -> None:
        self.overlays.pop(source, None)

    def to_geojson(self) -> dict[str, Any]:
        """Export marker and overlays as a GeoJSON FeatureCollection.

        GeoJSON positions are ``[lng, lat]``.
        """
        lat, lng = self.marker.position
        features: list[dict[str, Any]] = [
            {
                "type": "Feature",
                "geometry": {"type": "Point", "coordinates": [lng, lat]},
                "properties": {"kind": "marker", "popup": self.marker.popup},
            }
        ]
        for source, line in self.overlays.items():
            properties: dict[str, Any] = {
                "kind": "route",
                "source": source.value,
                "color": line.style.color,
                "weight": line.style.weight,
            }
            if line.style.dash_array is not None:
                properties["dashArray"] = line.style.dash_array
            features.append(
                {
                    "type": "Feature",
                    "geometry": {"type": "LineString", "coordinates": [[p[1], p[0]] for p in line.points]},
                    "properties": properties,
                }
            )
        return {
            "type": "FeatureCollection",
            "features": features,
            "properties": {
                "center": list(self.center),
                "zoom": self.zoom,
                "tileUrl": self.tile_url,
                "attribution": self.attribution,
            },
        }
