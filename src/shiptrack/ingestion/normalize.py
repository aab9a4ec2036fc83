"""Normalization helpers.

Centralizes defensive parsing of the loosely-typed backend payloads into
the canonical models. Every public function here is pure and total: bad
input yields ``None``, an empty route or :class:`InvalidLocation`, never
an exception.
"""

from __future__ import annotations

import math
from collections.abc import Callable, Mapping, Sequence
from datetime import UTC, datetime
from typing import Any

from pydantic import ValidationError

from shiptrack.models.route import RouteGeometry, RouteSource
from shiptrack.models.snapshot import InvalidLocation, TrackingSnapshot

Extractor = Callable[[Any], Any]
Candidates = Sequence[tuple[str, Extractor]]

# Threshold to distinguish seconds from milliseconds.
_MS_THRESHOLD = 1e11


def safe_float(value: Any) -> float | None:
    """Return *value* as a finite float, or ``None``.

    Accepts real numbers and numeric strings. Booleans are rejected even
    though Python treats them as ints.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, str):
        value = value.strip()
        if not value:
            return None
    elif not isinstance(value, (int, float)):
        return None
    try:
        result = float(value)
    except (TypeError, ValueError, OverflowError):
        return None
    if not math.isfinite(result):
        return None
    return result


def safe_str(value: Any) -> str | None:
    if value is None or isinstance(value, (dict, list)):
        return None
    text = str(value).strip()
    return text if text else None


def parse_timestamp(value: Any) -> datetime | None:
    """Convert an ISO-8601 string or epoch seconds/milliseconds to a UTC datetime.

    Returns ``None`` when the value is absent or unparseable.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, datetime):
        return value if value.tzinfo is not None else value.replace(tzinfo=UTC)
    epoch = safe_float(value)
    if epoch is not None:
        if epoch <= 0:
            return None
        if epoch > _MS_THRESHOLD:
            epoch /= 1000.0
        try:
            return datetime.fromtimestamp(epoch, tz=UTC)
        except (OverflowError, OSError, ValueError):
            return None
    if not isinstance(value, str):
        return None
    try:
        parsed = datetime.fromisoformat(value.strip())
    except ValueError:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=UTC)
    return parsed


def first_match(payload: Mapping[str, Any], candidates: Candidates) -> Any:
    """Try ``(field, extractor)`` pairs in order and return the first non-``None`` result."""
    for name, extract in candidates:
        if name not in payload:
            continue
        result = extract(payload[name])
        if result is not None:
            return result
    return None


def _chain(names: Sequence[str], extract: Extractor) -> Candidates:
    return tuple((name, extract) for name in names)


# ---------------------------------------------------------------------------
# Field candidate tables, highest priority first.
# ---------------------------------------------------------------------------

LATITUDE_CANDIDATES: Candidates = _chain(
    ("CurrentLatitude", "CurrentLat", "currentLatitude", "current_latitude", "Latitude", "latitude", "lat"),
    safe_float,
)
LONGITUDE_CANDIDATES: Candidates = _chain(
    ("CurrentLongitude", "CurrentLng", "currentLongitude", "current_longitude", "Longitude", "longitude", "lng", "lon"),
    safe_float,
)
STATUS_CANDIDATES: Candidates = _chain(("currentStatus", "current_state", "CurrentStatus", "status"), safe_str)
ESTIMATED_DELIVERY_CANDIDATES: Candidates = _chain(
    ("estimatedDelivery", "estimated_delivery", "EstimatedDelivery"),
    parse_timestamp,
)

# Labeled route points are already in (lat, lng) order; only the key names vary.
POINT_LATITUDE_CANDIDATES: Candidates = _chain(("lat", "latitude"), safe_float)
POINT_LONGITUDE_CANDIDATES: Candidates = _chain(("lng", "lon", "longitude"), safe_float)


def normalize_position(payload: Any) -> TrackingSnapshot | InvalidLocation:
    """Map a tracking payload to a :class:`TrackingSnapshot`.

    Returns :class:`InvalidLocation` when either coordinate cannot be
    resolved to a finite number.
    """
    if not isinstance(payload, Mapping):
        return InvalidLocation(f"expected a JSON object, got {type(payload).__name__}")

    latitude = first_match(payload, LATITUDE_CANDIDATES)
    longitude = first_match(payload, LONGITUDE_CANDIDATES)
    if latitude is None or longitude is None:
        missing = [name for name, value in (("latitude", latitude), ("longitude", longitude)) if value is None]
        return InvalidLocation(f"no usable {' or '.join(missing)} in payload")

    try:
        return TrackingSnapshot(
            latitude=latitude,
            longitude=longitude,
            status=first_match(payload, STATUS_CANDIDATES),
            estimated_delivery=first_match(payload, ESTIMATED_DELIVERY_CANDIDATES),
        )
    except ValidationError as exc:
        return InvalidLocation(str(exc))


def _pair_point(item: Any) -> tuple[float, float] | None:
    """``[lon, lat, ...]`` -> ``(lat, lon)``."""
    if not isinstance(item, (list, tuple)) or len(item) < 2:
        return None
    if isinstance(item[0], str) or isinstance(item[1], str):
        return None
    lon, lat = safe_float(item[0]), safe_float(item[1])
    if lat is None or lon is None:
        return None
    return (lat, lon)


def _labeled_point(item: Any) -> tuple[float, float] | None:
    """``{"lat": .., "lng": ..}`` -> ``(lat, lng)``."""
    if not isinstance(item, Mapping):
        return None
    lat = first_match(item, POINT_LATITUDE_CANDIDATES)
    lng = first_match(item, POINT_LONGITUDE_CANDIDATES)
    if lat is None or lng is None:
        return None
    return (lat, lng)


def _is_labeled(item: Any) -> bool:
    if not isinstance(item, Mapping):
        return False
    lat = item.get("lat", item.get("latitude"))
    return isinstance(lat, (int, float)) and not isinstance(lat, bool)


def extract_geometry(payload: Any) -> Sequence[Any]:
    """Pull the coordinate sequence out of a route payload.

    Accepts ``{"geometry": [...]}`` and a GeoJSON geometry object under
    ``geometry``. Anything else yields an empty sequence.
    """
    if not isinstance(payload, Mapping):
        return ()
    geometry = payload.get("geometry")
    if isinstance(geometry, Mapping):
        geometry = geometry.get("coordinates")
    if isinstance(geometry, (list, tuple)):
        return geometry
    return ()


def normalize_route(payload: Any, source: RouteSource) -> RouteGeometry:
    """Map a route payload to a :class:`RouteGeometry` tagged with *source*.

    The coordinate convention is detected from the first element:
    ordered pairs are GeoJSON ``[lon, lat]`` and get swapped, labeled
    objects are already ``{lat, lng}``. Unrecognized shapes, including
    a route whose later points do not match its first, yield an empty
    route.
    """
    geometry = extract_geometry(payload)
    if not geometry:
        return RouteGeometry.empty(source)

    first = geometry[0]
    convert: Callable[[Any], tuple[float, float] | None]
    if isinstance(first, (list, tuple)):
        convert = _pair_point
    elif _is_labeled(first):
        convert = _labeled_point
    else:
        return RouteGeometry.empty(source)

    points: list[tuple[float, float]] = []
    for item in geometry:
        point = convert(item)
        if point is None:
            return RouteGeometry.empty(source)
        points.append(point)
    return RouteGeometry(source=source, points=tuple(points))
