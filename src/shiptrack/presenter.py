"""Live marker presenter.

Turns successive :class:`TrackingView` values into a display decision and
keeps a single map marker in sync with the latest valid snapshot. The
:class:`MapView` is built once for the first valid snapshot and then only
mutated, so a widget bound to it keeps the user's pan and zoom.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass
from enum import StrEnum
from typing import Any

from shiptrack._constants import DEFAULT_ZOOM
from shiptrack.map_view import MapView, is_finite_point
from shiptrack.models._base import LatLng
from shiptrack.models.route import RouteSource
from shiptrack.models.snapshot import TrackingSnapshot
from shiptrack.models.view import TrackingView

_logger = logging.getLogger(__name__)

MapFactory = Callable[[LatLng, int], MapView]


class DisplayState(StrEnum):
    LOADING = "loading"
    ERROR = "error"
    NO_DATA = "no_data"
    INVALID_LOCATION = "invalid_location"
    MAP = "map"


@dataclass(frozen=True)
class Presentation:
    """What the hosting view should show."""

    state: DisplayState
    message: str | None = None
    map_view: MapView | None = None


def popup_text(snapshot: TrackingSnapshot) -> str:
    eta = snapshot.estimated_delivery.isoformat() if snapshot.estimated_delivery is not None else "N/A"
    return f"Shipment is here.\nStatus: {snapshot.status or 'N/A'}\nEstimated Delivery: {eta}"


class LiveMarkerPresenter:
    """Keeps one marker on one map in step with the tracking view."""

    def __init__(self, *, map_factory: MapFactory | None = None, zoom: int = DEFAULT_ZOOM) -> None:
        self._map_factory: MapFactory = map_factory or MapView
        self._zoom = zoom
        self._map: MapView | None = None
        self._last = Presentation(DisplayState.LOADING, "Loading tracking data...")

    @property
    def map_view(self) -> MapView | None:
        return self._map

    @property
    def presentation(self) -> Presentation:
        return self._last

    def reset(self) -> None:
        """Forget the map; the next valid snapshot builds a new one."""
        self._map = None
        self._last = Presentation(DisplayState.LOADING, "Loading tracking data...")

    def reposition(self, point: Any) -> bool:
        """Move the marker in place. Points without two finite coordinates are ignored."""
        if self._map is None or not is_finite_point(point):
            _logger.debug("Ignoring marker update to %r", point)
            return False
        self._map.marker.set_lat_lng(point)
        return True

    def present(self, view: TrackingView) -> Presentation:
        """Apply *view* to the map (if renderable) and return the display decision."""
        if view.loading:
            result = Presentation(DisplayState.LOADING, "Loading tracking data...")
        elif view.error is not None:
            result = Presentation(DisplayState.ERROR, f"Error fetching data: {view.error}")
        elif view.invalid_location is not None:
            result = Presentation(DisplayState.INVALID_LOCATION, "Invalid location data received from backend.")
        elif view.current_snapshot is None:
            result = Presentation(DisplayState.NO_DATA, "No tracking data available.")
        else:
            result = Presentation(DisplayState.MAP, map_view=self._render(view, view.current_snapshot))
        self._last = result
        return result

    def _render(self, view: TrackingView, snapshot: TrackingSnapshot) -> MapView:
        if self._map is None:
            self._map = self._map_factory(snapshot.position, self._zoom)
            _logger.debug("Built map view centred on %s", snapshot.position)
        else:
            self.reposition(snapshot.position)
        self._map.marker.set_popup(popup_text(snapshot))
        for source in RouteSource:
            self._map.set_route(source, view.route(source).points)
        return self._map
