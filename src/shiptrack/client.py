"""High-level async tracker for a hosting view."""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Any

import aiohttp

from shiptrack._transport import HttpReader
from shiptrack.config import TrackerConfig
from shiptrack.exceptions import TrackingError
from shiptrack.map_view import MapView
from shiptrack.models.view import TrackingView
from shiptrack.presenter import LiveMarkerPresenter, Presentation
from shiptrack.session import PollingSession
from shiptrack.state.store import TrackingStore, ViewListener

_logger = logging.getLogger(__name__)


class ShipmentTracker:
    """Live shipment position and routes, ready for a map widget.

    Usage::

        async with ShipmentTracker(TrackerConfig.from_env()) as tracker:
            tracker.track("MSCU1234567")
            ...
            geojson = tracker.map_view.to_geojson()
    """

    def __init__(
        self,
        config: TrackerConfig | None = None,
        *,
        session: aiohttp.ClientSession | None = None,
    ) -> None:
        self._config = config or TrackerConfig()
        self._external_session = session is not None
        self._http_session = session
        self._store = TrackingStore()
        self._presenter = LiveMarkerPresenter(
            map_factory=self._build_map,
            zoom=self._config.initial_zoom,
        )
        self._polling: PollingSession | None = None
        self._store.subscribe(self._presenter.present)

    # ------------------------------------------------------------------
    # Context manager lifecycle
    # ------------------------------------------------------------------

    async def __aenter__(self) -> ShipmentTracker:
        if self._http_session is None:
            self._http_session = aiohttp.ClientSession()
        reader = HttpReader(self._config, self._http_session)
        self._polling = PollingSession(reader, self._store, interval=self._config.poll_interval)
        return self

    async def __aexit__(self, *exc: Any) -> None:
        if self._polling is not None:
            await self._polling.aclose()
            self._polling = None
        if not self._external_session and self._http_session is not None:
            await self._http_session.close()
            self._http_session = None

    # ------------------------------------------------------------------
    # Lifecycle controls
    # ------------------------------------------------------------------

    def track(self, subject_id: str) -> None:
        """Start tracking *subject_id*, replacing any subject tracked so far."""
        polling = self._require_polling()
        self._presenter.reset()
        polling.start(subject_id)
        _logger.info("Tracking shipment %s", polling.subject_id)

    def untrack(self) -> None:
        """Stop polling. The last view stays readable."""
        self._require_polling().stop()

    async def refresh(self) -> None:
        """Run one poll cycle now instead of waiting for the next tick."""
        await self._require_polling().poll_once()

    # ------------------------------------------------------------------
    # Read-only projection
    # ------------------------------------------------------------------

    @property
    def view(self) -> TrackingView:
        return self._store.view

    @property
    def presentation(self) -> Presentation:
        return self._presenter.presentation

    @property
    def map_view(self) -> MapView | None:
        return self._presenter.map_view

    @property
    def active(self) -> bool:
        return self._polling is not None and self._polling.active

    def subscribe(self, listener: ViewListener) -> Callable[[], None]:
        """Call *listener* with every new view; returns an unsubscribe callable."""
        return self._store.subscribe(listener)

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _require_polling(self) -> PollingSession:
        if self._polling is None:
            raise TrackingError("Tracker not initialized. Use 'async with ShipmentTracker(...) as tracker:'")
        return self._polling

    def _build_map(self, center: tuple[float, float], zoom: int) -> MapView:
        return MapView(
            center,
            zoom,
            tile_url=self._config.tile_url,
            attribution=self._config.tile_attribution,
        )
