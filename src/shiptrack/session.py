"""Polling session lifecycle.

A :class:`PollingSession` owns exactly one repeating timer task. Every
``start``/``stop`` bumps a generation counter; results produced by a
cycle are only applied while the cycle's generation is still current,
so a slow response from a stopped or switched session can never touch
the store. Within one generation each cycle also carries a sequence
number, and a resource only accepts results newer than the last one it
applied, so a slow cycle cannot overwrite a faster later one.
"""

from __future__ import annotations

import asyncio
import contextlib
import logging
from collections.abc import AsyncIterator, Awaitable, Callable
from typing import Any
from urllib.parse import quote

from shiptrack._constants import DEFAULT_POLL_INTERVAL, ROUTE_PATH, TRACKING_PATH
from shiptrack._transport import Reader
from shiptrack.exceptions import TrackingSessionError
from shiptrack.ingestion.normalize import normalize_position, normalize_route
from shiptrack.models.outcome import EndpointOutcome, Fetched, NotFound, SchemaFailure, TransportFailure
from shiptrack.models.route import RouteGeometry, RouteSource
from shiptrack.state.store import TrackingStore

_logger = logging.getLogger(__name__)


def tracking_path(subject_id: str) -> str:
    return TRACKING_PATH.format(subject_id=quote(subject_id, safe=""))


def route_path(source: RouteSource, subject_id: str) -> str:
    return ROUTE_PATH.format(source=source.value, subject_id=quote(subject_id, safe=""))


class PollingSession:
    """Polls the position and route endpoints of one subject on a fixed period.

    Usage::

        async with PollingSession(reader, store) as polling:
            polling.start("MSCU1234567")
            ...

    Parameters
    ----------
    reader : Reader
        Endpoint reader (usually :class:`~shiptrack._transport.HttpReader`).
    store : TrackingStore
        Receives every accepted result.
    interval : float
        Default seconds between poll cycles.
    route_sources : tuple of RouteSource
        Route endpoints polled alongside the position.
    """

    def __init__(
        self,
        reader: Reader,
        store: TrackingStore,
        *,
        interval: float = DEFAULT_POLL_INTERVAL,
        route_sources: tuple[RouteSource, ...] = (RouteSource.SIMULATED, RouteSource.OPTIMIZED),
    ) -> None:
        self._reader = reader
        self._store = store
        self._interval = interval
        self._route_sources = route_sources
        self._subject_id: str | None = None
        self._generation = 0
        self._sequence = 0
        self._applied: dict[str, int] = {}
        self._timer: asyncio.Task[None] | None = None
        self._in_flight: set[asyncio.Task[None]] = set()
        self._closed = False

    # ------------------------------------------------------------------
    # Context manager lifecycle
    # ------------------------------------------------------------------

    async def __aenter__(self) -> PollingSession:
        return self

    async def __aexit__(self, *exc: Any) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        """Stop polling and cancel cycles still in flight. The session cannot be restarted."""
        self.stop()
        self._closed = True
        pending = list(self._in_flight)
        for task in pending:
            task.cancel()
        if pending:
            await asyncio.gather(*pending, return_exceptions=True)

    @contextlib.asynccontextmanager
    async def tracking(self, subject_id: str, interval: float | None = None) -> AsyncIterator[PollingSession]:
        """Poll *subject_id* for the duration of the ``async with`` block."""
        self.start(subject_id, interval)
        try:
            yield self
        finally:
            self.stop()

    # ------------------------------------------------------------------
    # Properties
    # ------------------------------------------------------------------

    @property
    def active(self) -> bool:
        return self._timer is not None and not self._timer.done()

    @property
    def subject_id(self) -> str | None:
        return self._subject_id

    @property
    def generation(self) -> int:
        return self._generation

    # ------------------------------------------------------------------
    # Start / stop
    # ------------------------------------------------------------------

    def start(self, subject_id: str, interval: float | None = None) -> None:
        """Begin polling *subject_id*, retiring any polling already running.

        The first cycle is issued immediately; later cycles follow every
        *interval* seconds.

        Raises
        ------
        TrackingSessionError
            If the session is closed or there is no running event loop.
        ValueError
            If *subject_id* is blank or *interval* is not positive.
        """
        if self._closed:
            raise TrackingSessionError("Polling session is closed")
        subject_id = subject_id.strip()
        if not subject_id:
            raise ValueError("subject_id must be non-empty")
        period = self._interval if interval is None else interval
        if period <= 0:
            raise ValueError(f"interval must be positive, got {period}")
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError as exc:
            raise TrackingSessionError("PollingSession.start() requires a running event loop") from exc

        self.stop()
        self._subject_id = subject_id
        self._applied.clear()
        self._store.reset(subject_id)
        _logger.debug("Start polling %s every %.1fs (generation=%d)", subject_id, period, self._generation)
        self._timer = loop.create_task(self._run_timer(self._generation, subject_id, period))

    def stop(self) -> None:
        """Stop polling. Results of cycles already in flight are discarded."""
        self._generation += 1
        timer, self._timer = self._timer, None
        if timer is not None and not timer.done():
            timer.cancel()
            _logger.debug("Stopped polling %s", self._subject_id)

    async def poll_once(self) -> None:
        """Run one full cycle for the current subject and wait for it."""
        if self._subject_id is None or not self.active:
            raise TrackingSessionError("No active subject to poll")
        await self._cycle(self._generation, self._next_sequence(), self._subject_id)

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _is_current(self, generation: int) -> bool:
        return generation == self._generation

    def _next_sequence(self) -> int:
        self._sequence += 1
        return self._sequence

    async def _run_timer(self, generation: int, subject_id: str, period: float) -> None:
        loop = asyncio.get_running_loop()
        next_tick = loop.time()
        while self._is_current(generation):
            self._spawn_cycle(generation, subject_id)
            next_tick += period
            await asyncio.sleep(max(0.0, next_tick - loop.time()))

    def _spawn_cycle(self, generation: int, subject_id: str) -> None:
        cycle = self._cycle(generation, self._next_sequence(), subject_id)
        task = asyncio.get_running_loop().create_task(cycle)
        self._in_flight.add(task)
        task.add_done_callback(self._in_flight.discard)

    async def _cycle(self, generation: int, sequence: int, subject_id: str) -> None:
        _logger.debug("Poll cycle %d for %s (generation=%d)", sequence, subject_id, generation)
        refreshers: list[Awaitable[None]] = [self._refresh_position(generation, sequence, subject_id)]
        refreshers.extend(
            self._refresh_route(generation, sequence, subject_id, source) for source in self._route_sources
        )
        results = await asyncio.gather(*refreshers, return_exceptions=True)
        for result in results:
            if isinstance(result, asyncio.CancelledError):
                raise result
            if isinstance(result, BaseException):
                _logger.warning(
                    "Unexpected error while refreshing %s",
                    subject_id,
                    exc_info=(type(result), result, result.__traceback__),
                )

    def _guarded(self, generation: int, sequence: int, apply: Callable[[], None], what: str) -> None:
        if not self._is_current(generation):
            _logger.debug("Dropping stale %s result (generation=%d, current=%d)", what, generation, self._generation)
            return
        latest = self._applied.get(what, 0)
        if sequence < latest:
            _logger.debug("Dropping out-of-order %s result (cycle=%d, applied=%d)", what, sequence, latest)
            return
        self._applied[what] = sequence
        apply()

    async def _refresh_position(self, generation: int, sequence: int, subject_id: str) -> None:
        outcome: EndpointOutcome = await self._reader.read(tracking_path(subject_id))
        store = self._store

        if isinstance(outcome, Fetched):
            result = normalize_position(outcome.payload)
            self._guarded(generation, sequence, lambda: store.apply_position(result), "position")
        elif isinstance(outcome, NotFound):
            self._guarded(generation, sequence, store.clear_position, "position")
        elif isinstance(outcome, (TransportFailure, SchemaFailure)):
            message = outcome.message
            self._guarded(generation, sequence, lambda: store.fail_position(message), "position")

    async def _refresh_route(self, generation: int, sequence: int, subject_id: str, source: RouteSource) -> None:
        outcome = await self._reader.read(route_path(source, subject_id))
        if isinstance(outcome, Fetched):
            route = normalize_route(outcome.payload, source)
        else:
            if isinstance(outcome, (TransportFailure, SchemaFailure)):
                _logger.debug("%s route unavailable for %s: %s", source.value, subject_id, outcome.message)
            route = RouteGeometry.empty(source)
        self._guarded(generation, sequence, lambda: self._store.apply_route(route), f"{source.value} route")
