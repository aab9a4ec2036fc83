"""Custom exception hierarchy for shiptrack."""

from __future__ import annotations


class TrackingError(Exception):
    """Base exception for all shiptrack errors."""


class TrackingConfigError(TrackingError):
    """Invalid or missing configuration."""


class TrackingSessionError(TrackingError):
    """Polling session used outside of its lifecycle.

    Raised when polling is started without a running event loop or after
    the session has been closed.
    """


class TrackingTransportError(TrackingError):
    """HTTP-level failure (network, timeout, non-success status)."""

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        endpoint: str = "",
    ) -> None:
        self.status_code = status_code
        self.endpoint = endpoint
        super().__init__(message)


class TrackingSchemaError(TrackingError):
    """Backend answered successfully but not with parseable JSON.

    Usually a misconfigured server or proxy returning an HTML page.
    """

    def __init__(self, message: str, *, endpoint: str = "") -> None:
        self.endpoint = endpoint
        super().__init__(message)


class TrackingNotFoundError(TrackingTransportError):
    """Resource does not exist (HTTP 404).

    The polling layer treats this as "no data yet", not as a failure.
    """
