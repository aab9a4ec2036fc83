"""HTTP response reader.

Performs one GET per call and classifies the result as an
:data:`~shiptrack.models.outcome.EndpointOutcome`. No retries happen
here; the next poll tick is the retry.
"""

from __future__ import annotations

import json
import logging
from typing import Any, Protocol

import aiohttp

from shiptrack._constants import JSON_MEDIA_SUFFIX, JSON_MEDIA_TYPE, USER_AGENT
from shiptrack.config import TrackerConfig
from shiptrack.exceptions import TrackingNotFoundError, TrackingSchemaError, TrackingTransportError
from shiptrack.models.outcome import EndpointOutcome, Fetched, NotFound, SchemaFailure, TransportFailure

_logger = logging.getLogger(__name__)


class Reader(Protocol):
    """Structural reader interface used by the polling session.

    Having a protocol here makes it easy to pass test doubles while
    keeping the production implementation (`HttpReader`) concrete.
    """

    async def read(self, path: str) -> EndpointOutcome:
        ...


def is_json_media_type(content_type: str) -> bool:
    """Return ``True`` for ``application/json`` and ``*/*+json`` media types."""
    media_type = content_type.split(";", 1)[0].strip().lower()
    return media_type == JSON_MEDIA_TYPE or media_type.endswith(JSON_MEDIA_SUFFIX)


class HttpReader:
    """Reader backed by an :class:`aiohttp.ClientSession`."""

    def __init__(self, config: TrackerConfig, http_session: aiohttp.ClientSession) -> None:
        self._config = config
        self._http = http_session
        self._timeout = aiohttp.ClientTimeout(total=config.request_timeout)

    def _clip(self, text: str) -> str:
        return text[: self._config.error_body_limit]

    async def get_json(self, path: str) -> Any:
        """GET *path* and return the decoded JSON body.

        Raises
        ------
        TrackingNotFoundError
            HTTP 404.
        TrackingTransportError
            Network failure, timeout or any other non-success status.
        TrackingSchemaError
            Success status but the body is not JSON.
        """
        url = f"{self._config.base_url}{path}"
        headers = {"accept": JSON_MEDIA_TYPE, "user-agent": USER_AGENT}

        _logger.debug("GET %s", url)

        try:
            async with self._http.get(url, headers=headers, timeout=self._timeout) as resp:
                if resp.status == 404:
                    raise TrackingNotFoundError(f"{path} not found", status_code=404, endpoint=path)
                text = await resp.text(errors="replace")
                if not 200 <= resp.status < 300:
                    raise TrackingTransportError(
                        f"HTTP {resp.status} from {path}: {self._clip(text) or resp.reason or 'request failed'}",
                        status_code=resp.status,
                        endpoint=path,
                    )
                content_type = resp.headers.get("content-type", "")
        except TrackingTransportError:
            raise
        except TimeoutError as exc:
            raise TrackingTransportError(f"Request to {path} timed out", endpoint=path) from exc
        except aiohttp.ClientError as exc:
            raise TrackingTransportError(f"Request to {path} failed: {exc}", endpoint=path) from exc

        if not is_json_media_type(content_type):
            raise TrackingSchemaError(f"Expected JSON but got: {self._clip(text)}", endpoint=path)

        try:
            return json.loads(text)
        except json.JSONDecodeError as exc:
            raise TrackingSchemaError(f"Invalid JSON from {path}: {self._clip(text)}", endpoint=path) from exc

    async def read(self, path: str) -> EndpointOutcome:
        """GET *path* and classify the result. Never raises for HTTP problems."""
        try:
            payload = await self.get_json(path)
        except TrackingNotFoundError:
            return NotFound()
        except TrackingTransportError as exc:
            _logger.debug("Transport failure on %s: %s", path, exc)
            return TransportFailure(str(exc), status_code=exc.status_code)
        except TrackingSchemaError as exc:
            _logger.debug("Schema failure on %s: %s", path, exc)
            return SchemaFailure(str(exc))
        return Fetched(payload)
