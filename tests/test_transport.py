from __future__ import annotations

import aiohttp
import pytest
from aiohttp import web
from aiohttp.test_utils import TestServer as AiohttpTestServer

from fleetlive._transport import HttpTransport, build_url
from fleetlive.exceptions import FleetLiveTransportError


def test_build_url_joins_with_single_slash() -> None:
    assert build_url("https://x.example.com/api/", "/live-map") == "https://x.example.com/api/live-map"
    assert build_url("https://x.example.com/api", "live-map") == "https://x.example.com/api/live-map"


async def _snapshot(request: web.Request) -> web.Response:
    if request.headers.get("Authorization") != "Bearer good":
        return web.json_response({"message": "Invalid token"}, status=401)
    return web.json_response({"drivers": [], "trips": [{"id": 1}]})


async def _broken(_request: web.Request) -> web.Response:
    return web.Response(text="<html>bad gateway</html>", status=502)


async def _not_json(_request: web.Request) -> web.Response:
    return web.Response(text="hello", status=200)


def _app() -> web.Application:
    app = web.Application()
    app.router.add_get("/api/snapshot", _snapshot)
    app.router.add_get("/api/broken", _broken)
    app.router.add_get("/api/text", _not_json)
    return app


@pytest.mark.asyncio
async def test_get_json_sends_bearer_token() -> None:
    async with AiohttpTestServer(_app()) as server, aiohttp.ClientSession() as session:
        transport = HttpTransport(str(server.make_url("/api")), session)

        body = await transport.get_json("/snapshot", token="good")

    assert body == {"drivers": [], "trips": [{"id": 1}]}


@pytest.mark.asyncio
async def test_error_status_uses_backend_message() -> None:
    async with AiohttpTestServer(_app()) as server, aiohttp.ClientSession() as session:
        transport = HttpTransport(str(server.make_url("/api")), session)

        with pytest.raises(FleetLiveTransportError) as excinfo:
            await transport.get_json("/snapshot", token="bad")

    assert str(excinfo.value) == "Invalid token"
    assert excinfo.value.status_code == 401
    assert excinfo.value.endpoint == "/snapshot"


@pytest.mark.asyncio
async def test_error_status_without_json_body() -> None:
    async with AiohttpTestServer(_app()) as server, aiohttp.ClientSession() as session:
        transport = HttpTransport(str(server.make_url("/api")), session)

        with pytest.raises(FleetLiveTransportError, match=r"Request failed \(502\)"):
            await transport.get_json("/broken")


@pytest.mark.asyncio
async def test_invalid_json_is_transport_error() -> None:
    async with AiohttpTestServer(_app()) as server, aiohttp.ClientSession() as session:
        transport = HttpTransport(str(server.make_url("/api")), session)

        with pytest.raises(FleetLiveTransportError, match="Invalid JSON"):
            await transport.get_json("/text")


@pytest.mark.asyncio
async def test_connection_failure_is_transport_error() -> None:
    async with aiohttp.ClientSession() as session:
        transport = HttpTransport("http://127.0.0.1:1", session, timeout=2.0)

        with pytest.raises(FleetLiveTransportError, match="failed"):
            await transport.get_json("/snapshot")
