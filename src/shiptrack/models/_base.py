"""Base model shared by the canonical tracking models.

Every canonical model inherits from :class:`TrackingBaseModel` which is
frozen (snapshots are superseded, never mutated) and ignores unknown
keys so that backend additions never break validation.
"""

from __future__ import annotations

import math
from typing import Annotated

from pydantic import AfterValidator, BaseModel, ConfigDict


def _require_finite(value: float) -> float:
    if not math.isfinite(value):
        raise ValueError(f"coordinate must be finite, got {value}")
    return value


FiniteFloat = Annotated[float, AfterValidator(_require_finite)]
"""A float that rejects NaN and +/- infinity."""

LatLng = tuple[float, float]
"""A coordinate in canonical ``(latitude, longitude)`` order."""


class TrackingBaseModel(BaseModel):
    """Base for canonical tracking models."""

    model_config = ConfigDict(
        frozen=True,
        extra="ignore",
        populate_by_name=True,
    )
