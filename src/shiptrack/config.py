"""Client configuration for shiptrack."""

from __future__ import annotations

import dataclasses
import os
from collections.abc import Mapping
from typing import Any

from shiptrack._constants import (
    BASE_URL,
    DEFAULT_ERROR_BODY_LIMIT,
    DEFAULT_POLL_INTERVAL,
    DEFAULT_REQUEST_TIMEOUT,
    DEFAULT_ZOOM,
    TILE_ATTRIBUTION,
    TILE_URL,
)
from shiptrack.exceptions import TrackingConfigError


def _env_number(env: Mapping[str, str], key: str, cast: type) -> Any:
    raw = env.get(key)
    if raw is None:
        return None
    try:
        return cast(raw.strip())
    except ValueError as exc:
        raise TrackingConfigError(f"{key} must be a number, got {raw!r}") from exc


@dataclasses.dataclass(frozen=True)
class TrackerConfig:
    """Tracker configuration.

    Parameters
    ----------
    base_url : str
        Backend base URL. Resource paths are appended to it.
    poll_interval : float
        Seconds between poll cycles.
    request_timeout : float
        Total timeout in seconds for a single HTTP request.
    error_body_limit : int
        Maximum number of response-body characters kept in error messages.
    initial_zoom : int
        Zoom level used when the map view is first built.
    tile_url : str
        Tile URL template handed to the external map widget.
    tile_attribution : str
        Attribution HTML for the tile layer.
    """

    base_url: str = BASE_URL
    poll_interval: float = DEFAULT_POLL_INTERVAL
    request_timeout: float = DEFAULT_REQUEST_TIMEOUT
    error_body_limit: int = DEFAULT_ERROR_BODY_LIMIT
    initial_zoom: int = DEFAULT_ZOOM
    tile_url: str = TILE_URL
    tile_attribution: str = TILE_ATTRIBUTION

    def __post_init__(self) -> None:
        if not self.base_url:
            raise TrackingConfigError("base_url must be non-empty")
        if self.poll_interval <= 0:
            raise TrackingConfigError(f"poll_interval must be positive, got {self.poll_interval}")
        if self.request_timeout <= 0:
            raise TrackingConfigError(f"request_timeout must be positive, got {self.request_timeout}")
        if self.error_body_limit < 0:
            raise TrackingConfigError(f"error_body_limit must not be negative, got {self.error_body_limit}")
        if self.initial_zoom < 0:
            raise TrackingConfigError(f"initial_zoom must not be negative, got {self.initial_zoom}")
        # Trailing slashes would double up with the leading slash of resource paths.
        object.__setattr__(self, "base_url", self.base_url.rstrip("/"))

    @classmethod
    def from_env(cls, **overrides: Any) -> TrackerConfig:
        """Create configuration from environment variables.

        Reads ``SHIPTRACK_API_BASE``, ``SHIPTRACK_POLL_INTERVAL``,
        ``SHIPTRACK_REQUEST_TIMEOUT``, ``SHIPTRACK_ERROR_BODY_LIMIT``,
        ``SHIPTRACK_INITIAL_ZOOM`` and ``SHIPTRACK_TILE_URL``. Explicit
        keyword arguments override environment values.

        Raises
        ------
        TrackingConfigError
            If a numeric variable cannot be parsed or a value is out of range.
        """
        env = os.environ
        config_kwargs: dict[str, Any] = {}

        base_url = env.get("SHIPTRACK_API_BASE")
        if base_url:
            config_kwargs["base_url"] = base_url
        tile_url = env.get("SHIPTRACK_TILE_URL")
        if tile_url:
            config_kwargs["tile_url"] = tile_url

        _ENV_NUMERIC_MAP: dict[str, tuple[str, type]] = {
            "SHIPTRACK_POLL_INTERVAL": ("poll_interval", float),
            "SHIPTRACK_REQUEST_TIMEOUT": ("request_timeout", float),
            "SHIPTRACK_ERROR_BODY_LIMIT": ("error_body_limit", int),
            "SHIPTRACK_INITIAL_ZOOM": ("initial_zoom", int),
        }
        for env_key, (field_name, cast) in _ENV_NUMERIC_MAP.items():
            if field_name in overrides:
                continue
            value = _env_number(env, env_key, cast)
            if value is not None:
                config_kwargs[field_name] = value

        config_kwargs.update(overrides)

        return cls(**config_kwargs)
