from __future__ import annotations

from typing import Any

import pytest

from fleetlive.config import FleetLiveConfig
from fleetlive.exceptions import FleetLiveTransportError
from fleetlive.snapshot import Snapshot, load_snapshot, open_live_map


class _FakeTransport:
    def __init__(self, response: Any = None, error: Exception | None = None) -> None:
        self.response = response
        self.error = error
        self.calls: list[tuple[str, str | None]] = []

    async def get_json(self, endpoint: str, *, token: str | None = None) -> Any:
        self.calls.append((endpoint, token))
        if self.error is not None:
            raise self.error
        return self.response


def _config(**overrides: Any) -> FleetLiveConfig:
    values: dict[str, Any] = {
        "socket_url": "https://realtime.example.com",
        "api_base_url": "https://backend.example.com/api",
        "token": "secret-token",
    }
    values.update(overrides)
    return FleetLiveConfig(**values)


@pytest.mark.asyncio
async def test_snapshot_requested_with_bearer_token() -> None:
    transport = _FakeTransport({"drivers": [{"driverId": 1, "lat": 1, "lng": 2}], "trips": [{"id": 3}]})

    snapshot = await load_snapshot(_config(), transport)

    assert transport.calls == [("/live-map/snapshot", "secret-token")]
    assert snapshot.drivers == [{"driverId": 1, "lat": 1, "lng": 2}]
    assert snapshot.trips == [{"id": 3}]


@pytest.mark.asyncio
async def test_snapshot_fails_open_on_transport_error() -> None:
    transport = _FakeTransport(error=FleetLiveTransportError("Request failed (502)", status_code=502))

    snapshot = await load_snapshot(_config(), transport)

    assert snapshot.is_empty


@pytest.mark.asyncio
@pytest.mark.parametrize("body", [None, [], "oops", {"drivers": "nope", "trips": {"id": 1}}])
async def test_snapshot_tolerates_malformed_bodies(body: Any) -> None:
    snapshot = await load_snapshot(_config(), _FakeTransport(body))

    assert snapshot == Snapshot()


@pytest.mark.asyncio
async def test_snapshot_skipped_without_token() -> None:
    transport = _FakeTransport({"drivers": [], "trips": []})

    snapshot = await load_snapshot(_config(token=None), transport)

    assert snapshot.is_empty
    assert transport.calls == []


@pytest.mark.asyncio
async def test_open_live_map_seeds_before_streaming(socket_factory) -> None:
    transport = _FakeTransport(
        {
            "drivers": [{"driverId": 1, "lat": 1, "lng": 2}, {"driverId": 2, "lat": "bad", "lng": 2}],
            "trips": [{"id": i} for i in range(25, 0, -1)],
        }
    )

    client = await open_live_map(_config(max_trips=20), transport=transport, socket_factory=socket_factory)
    try:
        assert [d.driver_id for d in client.drivers] == [1]
        assert len(client.trips) == 20
        assert client.trips[0].id == 25
        assert client.connected is True
    finally:
        await client.close()


@pytest.mark.asyncio
async def test_open_live_map_without_token_serves_empty_model(socket_factory) -> None:
    client = await open_live_map(_config(token=None), transport=_FakeTransport({}), socket_factory=socket_factory)

    assert client.connected is False
    assert client.connection_error is None
    assert client.drivers == []
    assert socket_factory.created == []
