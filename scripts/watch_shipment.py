#!/usr/bin/env python3
"""Watch a shipment live against a running backend.

Starts a tracker for one shipment and prints every view change (or the
map as GeoJSON) until interrupted or ``--duration`` elapses.

Usage
-----
::

    export SHIPTRACK_API_BASE="http://localhost:3001"
    python scripts/watch_shipment.py MSCU1234567

Options::

    --interval SECONDS   Poll interval (default: config / 3s)
    --duration SECONDS   Stop after this many seconds (default: run forever)
    --geojson            Print the map as GeoJSON instead of a one-line summary
    --verbose            Enable debug logging
"""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path
from typing import Any

# Allow running from the repo root without installing the package.
_repo = Path(__file__).resolve().parent.parent
_src = _repo / "src"
if _src.is_dir():
    sys.path.insert(0, str(_src))

from shiptrack import ShipmentTracker, TrackerConfig, TrackingView  # noqa: E402


def _summary(view: TrackingView) -> str:
    snapshot = view.current_snapshot
    position = f"{snapshot.latitude:.5f},{snapshot.longitude:.5f}" if snapshot else "-"
    status = snapshot.status if snapshot else None
    return (
        f"[{view.subject_id}] loading={view.loading} error={view.error!r} invalid={view.invalid_location!r} "
        f"position={position} status={status} "
        f"simulated={len(view.simulated_route.points)}pts optimized={len(view.optimized_route.points)}pts"
    )


async def main() -> None:
    parser = argparse.ArgumentParser(description="Watch a shipment's live position and routes.")
    parser.add_argument("subject_id", help="Shipment/container id to track")
    parser.add_argument("--interval", type=float, help="Poll interval in seconds")
    parser.add_argument("--duration", type=float, help="Stop after this many seconds")
    parser.add_argument("--geojson", action="store_true", help="Print the map as GeoJSON")
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")
    args = parser.parse_args()

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")
    else:
        logging.basicConfig(level=logging.WARNING)

    overrides: dict[str, Any] = {}
    if args.interval is not None:
        overrides["poll_interval"] = args.interval
    config = TrackerConfig.from_env(**overrides)

    async with ShipmentTracker(config) as tracker:

        def _print(view: TrackingView) -> None:
            if args.geojson and tracker.map_view is not None:
                print(json.dumps(tracker.map_view.to_geojson(), indent=2))
            else:
                print(_summary(view))
                if tracker.presentation.message:
                    print(f"  {tracker.presentation.message}")

        tracker.subscribe(_print)
        tracker.track(args.subject_id)
        try:
            if args.duration is not None:
                await asyncio.sleep(args.duration)
            else:
                await asyncio.Event().wait()
        finally:
            tracker.untrack()


if __name__ == "__main__":
    try:
        asyncio.run(main())
    except KeyboardInterrupt:
        pass
