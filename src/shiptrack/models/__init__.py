"""Canonical models for shipment tracking."""

from shiptrack.models._base import FiniteFloat, LatLng, TrackingBaseModel
from shiptrack.models.outcome import EndpointOutcome, Fetched, NotFound, SchemaFailure, TransportFailure
from shiptrack.models.route import RouteGeometry, RouteSource
from shiptrack.models.snapshot import InvalidLocation, TrackingSnapshot
from shiptrack.models.view import TrackingView

__all__ = [
    "EndpointOutcome",
    "Fetched",
    "FiniteFloat",
    "InvalidLocation",
    "LatLng",
    "NotFound",
    "RouteGeometry",
    "RouteSource",
    "SchemaFailure",
    "TrackingBaseModel",
    "TrackingSnapshot",
    "TrackingView",
    "TransportFailure",
]
