from __future__ import annotations

from datetime import UTC, datetime

import pytest

from shiptrack.ingestion.normalize import (
    first_match,
    normalize_position,
    normalize_route,
    parse_timestamp,
    safe_float,
)
from shiptrack.models.route import RouteGeometry, RouteSource
from shiptrack.models.snapshot import InvalidLocation, TrackingSnapshot


@pytest.mark.parametrize(
    "payload",
    [
        {"CurrentLatitude": 40.7, "CurrentLongitude": -74.0},
        {"CurrentLat": 40.7, "CurrentLng": -74.0},
        {"latitude": 40.7, "longitude": -74.0},
        {"Latitude": 40.7, "Longitude": -74.0},
        {"CurrentLatitude": "40.7", "CurrentLongitude": "-74.0"},
        {"lat": " 40.7 ", "lng": "-74"},
    ],
)
def test_coordinate_variants_yield_identical_snapshot(payload: dict[str, object]) -> None:
    assert normalize_position(payload) == TrackingSnapshot(latitude=40.7, longitude=-74.0)


def test_tracking_scenario_with_current_state() -> None:
    result = normalize_position({"CurrentLat": 40.7, "CurrentLng": -74.0, "current_state": "in_transit"})

    assert isinstance(result, TrackingSnapshot)
    assert result.latitude == 40.7
    assert result.longitude == -74.0
    assert result.status == "in_transit"
    assert result.estimated_delivery is None


def test_first_satisfied_candidate_wins() -> None:
    # An unparseable primary field falls through to the next candidate.
    result = normalize_position({"CurrentLatitude": "n/a", "CurrentLat": 1.5, "latitude": 9.0, "lng": 2.5})

    assert isinstance(result, TrackingSnapshot)
    assert result.position == (1.5, 2.5)


def test_status_and_eta_fallback_chain() -> None:
    result = normalize_position(
        {
            "latitude": 1,
            "longitude": 2,
            "currentStatus": "",
            "status": "delivered",
            "estimated_delivery": "2026-01-02T03:04:05Z",
        }
    )

    assert isinstance(result, TrackingSnapshot)
    assert result.status == "delivered"
    assert result.estimated_delivery == datetime(2026, 1, 2, 3, 4, 5, tzinfo=UTC)


@pytest.mark.parametrize(
    "payload",
    [
        {},
        {"status": "in_transit"},
        {"latitude": 40.7},
        {"latitude": "north", "longitude": -74.0},
        {"latitude": float("nan"), "longitude": -74.0},
        {"latitude": True, "longitude": False},
        {"lat": 10**400, "lng": 1.0},
        [40.7, -74.0],
        None,
        "40.7,-74.0",
    ],
)
def test_unusable_position_yields_invalid_location(payload: object) -> None:
    assert isinstance(normalize_position(payload), InvalidLocation)


def test_normalization_is_idempotent() -> None:
    payload = {"CurrentLat": "40.7", "CurrentLng": -74, "status": "x", "estimatedDelivery": 1_770_928_447_000}

    assert normalize_position(payload) == normalize_position(payload)
    route = {"geometry": [[-74.0, 40.7], [-73.9, 40.8]]}
    assert normalize_route(route, RouteSource.OPTIMIZED) == normalize_route(route, RouteSource.OPTIMIZED)


def test_optimized_route_pairs_are_swapped_to_lat_lng() -> None:
    route = normalize_route({"geometry": [[-74.0, 40.7], [-73.9, 40.8]]}, RouteSource.OPTIMIZED)

    assert route.source == RouteSource.OPTIMIZED
    assert route.points == ((40.7, -74.0), (40.8, -73.9))


def test_labeled_points_kept_in_order() -> None:
    route = normalize_route(
        {"geometry": [{"lat": 40.7, "lng": -74.0}, {"lat": 40.8, "lng": -73.9}, {"lat": 41.0, "lon": -73.5}]},
        RouteSource.SIMULATED,
    )

    assert route.points == ((40.7, -74.0), (40.8, -73.9), (41.0, -73.5))


def test_geojson_line_string_geometry() -> None:
    route = normalize_route(
        {"geometry": {"type": "LineString", "coordinates": [[4.9, 52.37], [4.48, 51.92]]}},
        RouteSource.OPTIMIZED,
    )

    assert route.points == ((52.37, 4.9), (51.92, 4.48))


@pytest.mark.parametrize(
    "payload",
    [
        None,
        {},
        {"geometry": None},
        {"geometry": []},
        {"geometry": "LINESTRING(0 0, 1 1)"},
        {"geometry": [{"lat": "40.7", "lng": -74.0}]},
        {"geometry": [42]},
        {"geometry": [[-74.0, 40.7], {"lat": 40.8, "lng": -73.9}]},
        {"geometry": [[-74.0]]},
        {"geometry": [[10**400, 1.0]]},
    ],
)
def test_absent_or_unrecognized_geometry_is_empty_route(payload: object) -> None:
    route = normalize_route(payload, RouteSource.SIMULATED)

    assert route == RouteGeometry.empty(RouteSource.SIMULATED)
    assert route.points == ()
    assert route.is_empty


def test_safe_float_rejects_non_finite_and_bool() -> None:
    assert safe_float("1e3") == 1000.0
    assert safe_float(" ") is None
    assert safe_float("inf") is None
    assert safe_float(True) is None
    assert safe_float({"x": 1}) is None
    assert safe_float(10**400) is None


def test_parse_timestamp_seconds_and_milliseconds() -> None:
    expected = datetime.fromtimestamp(1_770_928_447, tz=UTC)

    assert parse_timestamp(1_770_928_447) == expected
    assert parse_timestamp(1_770_928_447_000) == expected
    assert parse_timestamp("not a date") is None
    assert parse_timestamp(0) is None


def test_first_match_skips_empty_candidates() -> None:
    candidates = (("a", safe_float), ("b", safe_float))

    assert first_match({"a": "", "b": "2"}, candidates) == 2.0
    assert first_match({"c": 1}, candidates) is None
    assert first_match({"a": 3}, candidates) == 3.0
