"""In-memory tracking state.

This is the only component allowed to hold the last-known-good value of
each resource. Every mutation replaces a value wholesale and publishes a
fresh :class:`TrackingView` to the subscribers.
"""

from __future__ import annotations

import logging
from collections.abc import Callable

from shiptrack.models.route import RouteGeometry, RouteSource
from shiptrack.models.snapshot import InvalidLocation, TrackingSnapshot
from shiptrack.models.view import TrackingView

_logger = logging.getLogger(__name__)

ViewListener = Callable[[TrackingView], None]


class TrackingStore:
    """Holds the current :class:`TrackingView` and notifies listeners on change."""

    def __init__(self) -> None:
        self._view = TrackingView()
        self._listeners: list[ViewListener] = []

    @property
    def view(self) -> TrackingView:
        return self._view

    def subscribe(self, listener: ViewListener) -> Callable[[], None]:
        """Register *listener* and return a callable that unregisters it."""
        self._listeners.append(listener)

        def _unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return _unsubscribe

    def _publish(self, view: TrackingView) -> None:
        if view == self._view:
            return
        self._view = view
        for listener in list(self._listeners):
            try:
                listener(view)
            except Exception:
                _logger.exception("Tracking view listener %r failed", listener)

    def reset(self, subject_id: str | None) -> None:
        """Discard all state and begin loading *subject_id* (or go idle for ``None``)."""
        self._publish(TrackingView(subject_id=subject_id, loading=subject_id is not None))

    def apply_position(self, result: TrackingSnapshot | InvalidLocation) -> None:
        """Replace the position with a freshly normalized result and clear the error."""
        if isinstance(result, InvalidLocation):
            update = {"current_snapshot": None, "invalid_location": result.reason}
        else:
            update = {"current_snapshot": result, "invalid_location": None}
        self._publish(self._view.model_copy(update={**update, "loading": False, "error": None}))

    def clear_position(self) -> None:
        """The backend has no position for the subject yet."""
        self._publish(
            self._view.model_copy(
                update={"current_snapshot": None, "invalid_location": None, "loading": False, "error": None}
            )
        )

    def fail_position(self, message: str) -> None:
        """Record a position error; the last snapshot stays in place."""
        self._publish(self._view.model_copy(update={"loading": False, "error": message}))

    def apply_route(self, route: RouteGeometry) -> None:
        field_name = "simulated_route" if route.source == RouteSource.SIMULATED else "optimized_route"
        self._publish(self._view.model_copy(update={field_name: route}))
