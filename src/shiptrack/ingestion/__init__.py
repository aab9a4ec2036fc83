"""Ingestion layer.

This package contains the pure adapters that turn raw backend payloads
into canonical snapshots and route geometries.
"""

from shiptrack.ingestion.normalize import normalize_position, normalize_route

__all__ = ["normalize_position", "normalize_route"]
