from __future__ import annotations

import asyncio
import contextlib
from collections.abc import AsyncIterator

import aiohttp
import pytest
from aiohttp import web
from aiohttp.test_utils import TestServer

from shiptrack._transport import HttpReader, is_json_media_type
from shiptrack.config import TrackerConfig
from shiptrack.exceptions import TrackingNotFoundError, TrackingSchemaError, TrackingTransportError
from shiptrack.models.outcome import Fetched, NotFound, SchemaFailure, TransportFailure


async def _json(_request: web.Request) -> web.Response:
    return web.json_response({"CurrentLat": 40.7, "CurrentLng": -74.0})


async def _missing(_request: web.Request) -> web.Response:
    return web.Response(status=404, text="Not Found")


async def _boom(_request: web.Request) -> web.Response:
    return web.Response(status=500, text="x" * 1000)


async def _html(_request: web.Request) -> web.Response:
    return web.Response(text="<!doctype html><html><body>index</body></html>", content_type="text/html")


async def _broken_json(_request: web.Request) -> web.Response:
    return web.Response(text="{not json", content_type="application/json")


async def _vendor_json(_request: web.Request) -> web.Response:
    return web.Response(text='{"geometry": []}', content_type="application/vnd.api+json")


async def _binary(request: web.Request) -> web.Response:
    status = int(request.query.get("status", "200"))
    content_type = request.query.get("type", "application/json")
    return web.Response(status=status, body=b"\xff\xfe\xfa", content_type=content_type, charset="utf-8")


async def _slow(_request: web.Request) -> web.Response:
    await asyncio.sleep(5)
    return web.json_response({})


@contextlib.asynccontextmanager
async def _reader(**config_kwargs: object) -> AsyncIterator[HttpReader]:
    app = web.Application()
    app.router.add_get("/json", _json)
    app.router.add_get("/missing", _missing)
    app.router.add_get("/boom", _boom)
    app.router.add_get("/html", _html)
    app.router.add_get("/broken", _broken_json)
    app.router.add_get("/vendor", _vendor_json)
    app.router.add_get("/binary", _binary)
    app.router.add_get("/slow", _slow)
    async with TestServer(app) as server:
        config = TrackerConfig(base_url=str(server.make_url("")), **config_kwargs)  # type: ignore[arg-type]
        async with aiohttp.ClientSession() as http:
            yield HttpReader(config, http)


@pytest.mark.asyncio
async def test_json_success_is_fetched() -> None:
    async with _reader() as reader:
        outcome = await reader.read("/json")

    assert outcome == Fetched({"CurrentLat": 40.7, "CurrentLng": -74.0})


@pytest.mark.asyncio
async def test_404_is_not_found_not_error() -> None:
    async with _reader() as reader:
        assert await reader.read("/missing") == NotFound()
        with pytest.raises(TrackingNotFoundError):
            await reader.get_json("/missing")


@pytest.mark.asyncio
async def test_server_error_is_transport_failure_with_truncated_body() -> None:
    async with _reader(error_body_limit=50) as reader:
        outcome = await reader.read("/boom")

    assert isinstance(outcome, TransportFailure)
    assert outcome.status_code == 500
    assert "HTTP 500" in outcome.message
    assert "x" * 50 in outcome.message
    assert "x" * 51 not in outcome.message


@pytest.mark.asyncio
async def test_html_success_is_schema_failure() -> None:
    async with _reader() as reader:
        outcome = await reader.read("/html")
        with pytest.raises(TrackingSchemaError):
            await reader.get_json("/html")

    assert isinstance(outcome, SchemaFailure)
    assert outcome.message.startswith("Expected JSON but got: <!doctype html>")


@pytest.mark.asyncio
async def test_unparseable_json_is_schema_failure() -> None:
    async with _reader() as reader:
        outcome = await reader.read("/broken")

    assert isinstance(outcome, SchemaFailure)
    assert "Invalid JSON" in outcome.message


@pytest.mark.asyncio
async def test_undecodable_error_body_is_transport_failure() -> None:
    async with _reader() as reader:
        outcome = await reader.read("/binary?status=500&type=text/plain")

    assert isinstance(outcome, TransportFailure)
    assert outcome.status_code == 500
    assert "HTTP 500" in outcome.message


@pytest.mark.asyncio
async def test_undecodable_json_body_is_schema_failure() -> None:
    async with _reader() as reader:
        outcome = await reader.read("/binary")
        with pytest.raises(TrackingSchemaError):
            await reader.get_json("/binary")

    assert isinstance(outcome, SchemaFailure)
    assert "Invalid JSON" in outcome.message


@pytest.mark.asyncio
async def test_structured_json_suffix_is_accepted() -> None:
    async with _reader() as reader:
        assert await reader.read("/vendor") == Fetched({"geometry": []})


@pytest.mark.asyncio
async def test_timeout_is_transport_failure() -> None:
    async with _reader(request_timeout=0.05) as reader:
        outcome = await reader.read("/slow")

    assert isinstance(outcome, TransportFailure)
    assert outcome.status_code is None
    assert "timed out" in outcome.message


@pytest.mark.asyncio
async def test_connection_refused_is_transport_failure() -> None:
    app = web.Application()
    async with TestServer(app) as server:
        base_url = str(server.make_url(""))

    async with aiohttp.ClientSession() as http:
        reader = HttpReader(TrackerConfig(base_url=base_url), http)
        outcome = await reader.read("/json")
        with pytest.raises(TrackingTransportError):
            await reader.get_json("/json")

    assert isinstance(outcome, TransportFailure)
    assert outcome.message.startswith("Request to /json failed")


def test_is_json_media_type() -> None:
    assert is_json_media_type("application/json; charset=utf-8")
    assert is_json_media_type("application/geo+json")
    assert not is_json_media_type("text/html")
    assert not is_json_media_type("")
