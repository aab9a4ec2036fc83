"""shiptrack - Async live shipment tracking for map views."""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("shiptrack")
except PackageNotFoundError:
    __version__ = "0+local"
from shiptrack.client import ShipmentTracker
from shiptrack.config import TrackerConfig
from shiptrack.exceptions import (
    TrackingConfigError,
    TrackingError,
    TrackingNotFoundError,
    TrackingSchemaError,
    TrackingSessionError,
    TrackingTransportError,
)
from shiptrack.map_view import MapView, Marker
from shiptrack.models import InvalidLocation, RouteGeometry, RouteSource, TrackingSnapshot, TrackingView
from shiptrack.presenter import DisplayState, LiveMarkerPresenter, Presentation
from shiptrack.session import PollingSession
from shiptrack.state.store import TrackingStore

__all__ = [
    "__version__",
    "DisplayState",
    "InvalidLocation",
    "LiveMarkerPresenter",
    "MapView",
    "Marker",
    "PollingSession",
    "Presentation",
    "RouteGeometry",
    "RouteSource",
    "ShipmentTracker",
    "TrackerConfig",
    "TrackingConfigError",
    "TrackingError",
    "TrackingNotFoundError",
    "TrackingSchemaError",
    "TrackingSessionError",
    "TrackingSnapshot",
    "TrackingStore",
    "TrackingTransportError",
    "TrackingView",
]
