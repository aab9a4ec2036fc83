"""Tracking snapshot model."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import UTC, datetime

from pydantic import Field, field_validator

from shiptrack.models._base import FiniteFloat, LatLng, TrackingBaseModel


class TrackingSnapshot(TrackingBaseModel):
    """A single point-in-time position-and-status record for a shipment.

    Parameters
    ----------
    latitude : float
        Latitude in degrees. Always finite.
    longitude : float
        Longitude in degrees. Always finite.
    status : str or None
        Backend status label (e.g. ``"in_transit"``).
    estimated_delivery : datetime or None
        Estimated delivery time, timezone aware.
    """

    latitude: FiniteFloat
    longitude: FiniteFloat
    status: str | None = None
    estimated_delivery: datetime | None = Field(default=None)

    @field_validator("estimated_delivery")
    @classmethod
    def _ensure_tz_aware(cls, value: datetime | None) -> datetime | None:
        if value is not None and value.tzinfo is None:
            return value.replace(tzinfo=UTC)
        return value

    @property
    def position(self) -> LatLng:
        """The snapshot coordinate in ``(lat, lng)`` order."""
        return (self.latitude, self.longitude)


@dataclass(frozen=True, slots=True)
class InvalidLocation:
    """Normalization result for a payload without usable coordinates."""

    reason: str
