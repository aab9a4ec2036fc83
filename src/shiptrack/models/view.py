"""Read-only projection of the tracking state for the hosting view."""

from __future__ import annotations

from shiptrack.models._base import TrackingBaseModel
from shiptrack.models.route import RouteGeometry, RouteSource
from shiptrack.models.snapshot import TrackingSnapshot


class TrackingView(TrackingBaseModel):
    """What the hosting view may read.

    Parameters
    ----------
    subject_id : str or None
        Shipment currently tracked.
    loading : bool
        ``True`` until the first position result for the subject arrives.
    error : str or None
        Last position transport/schema error, cleared by the next success.
    current_snapshot : TrackingSnapshot or None
        Latest valid snapshot.
    invalid_location : str or None
        Reason the latest position payload could not be rendered.
    simulated_route, optimized_route : RouteGeometry
        Latest route overlays; empty when unavailable.
    """

    subject_id: str | None = None
    loading: bool = False
    error: str | None = None
    current_snapshot: TrackingSnapshot | None = None
    invalid_location: str | None = None
    simulated_route: RouteGeometry = RouteGeometry.empty(RouteSource.SIMULATED)
    optimized_route: RouteGeometry = RouteGeometry.empty(RouteSource.OPTIMIZED)

    def route(self, source: RouteSource) -> RouteGeometry:
        if source == RouteSource.SIMULATED:
            return self.simulated_route
        return self.optimized_route
