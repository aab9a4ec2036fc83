"""Route geometry model."""

from __future__ import annotations

from enum import StrEnum

from shiptrack.models._base import LatLng, TrackingBaseModel


class RouteSource(StrEnum):
    """Where a route geometry was computed."""

    SIMULATED = "simulated"
    OPTIMIZED = "optimized"


class RouteGeometry(TrackingBaseModel):
    """Ordered route points in canonical ``(lat, lng)`` order.

    An empty ``points`` tuple is valid and means "no route available".
    """

    source: RouteSource
    points: tuple[LatLng, ...] = ()

    @classmethod
    def empty(cls, source: RouteSource) -> RouteGeometry:
        return cls(source=source)

    @property
    def is_empty(self) -> bool:
        return not self.points
