"""Snapshot loading and live map session bootstrap.

The snapshot is a one-time REST read of the drivers online and the trips
pending at connect time. It seeds the live model before the push channel
takes over. A failed snapshot is not fatal: the session starts empty.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Any

import aiohttp
from pydantic import BaseModel, ConfigDict, Field, field_validator

from fleetlive._transport import HttpTransport, Transport
from fleetlive.client import LiveMapClient
from fleetlive.config import FleetLiveConfig
from fleetlive.exceptions import FleetLiveError
from fleetlive.models.view import LiveMapView

_logger = logging.getLogger(__name__)


class Snapshot(BaseModel):
    """Raw seed lists as returned by the backend.

    Entries stay in wire shape; :class:`LiveMapClient` normalizes them.
    Anything that is not a list becomes an empty list.
    """

    model_config = ConfigDict(frozen=True, extra="ignore")

    drivers: list[Any] = Field(default_factory=list)
    trips: list[Any] = Field(default_factory=list)

    @field_validator("drivers", "trips", mode="before")
    @classmethod
    def _coerce_list(cls, value: Any) -> list[Any]:
        return value if isinstance(value, list) else []

    @property
    def is_empty(self) -> bool:
        return not self.drivers and not self.trips


async def load_snapshot(config: FleetLiveConfig, transport: Transport) -> Snapshot:
    """Fetch the snapshot, failing open to an empty :class:`Snapshot`."""
    if not config.api_base_url or not config.token:
        _logger.debug("Snapshot skipped: api_base_url or token missing")
        return Snapshot()

    try:
        body = await transport.get_json(config.snapshot_path, token=config.token)
    except FleetLiveError as exc:
        _logger.warning("Snapshot request failed: %s", exc)
        return Snapshot()

    if not isinstance(body, dict):
        _logger.warning("Snapshot response is not an object; starting empty")
        return Snapshot()

    snapshot = Snapshot.model_validate(body)
    _logger.debug("Snapshot loaded drivers=%d trips=%d", len(snapshot.drivers), len(snapshot.trips))
    return snapshot


async def fetch_snapshot(config: FleetLiveConfig, *, session: aiohttp.ClientSession | None = None) -> Snapshot:
    """Convenience wrapper that manages an ``aiohttp`` session when none is given."""
    if not config.api_base_url:
        return Snapshot()
    if session is not None:
        return await load_snapshot(config, HttpTransport(config.api_base_url, session, timeout=config.request_timeout))
    async with aiohttp.ClientSession() as owned:
        return await load_snapshot(config, HttpTransport(config.api_base_url, owned, timeout=config.request_timeout))


async def open_live_map(
    config: FleetLiveConfig,
    *,
    transport: Transport | None = None,
    session: aiohttp.ClientSession | None = None,
    on_change: Callable[[LiveMapView], None] | None = None,
    **client_kwargs: Any,
) -> LiveMapClient:
    """Load the snapshot, seed a :class:`LiveMapClient` and start streaming.

    The caller owns the returned client and must ``await client.close()``.
    """
    if transport is not None:
        snapshot = await load_snapshot(config, transport)
    else:
        snapshot = await fetch_snapshot(config, session=session)

    client = LiveMapClient.from_config(
        config,
        initial_drivers=snapshot.drivers,
        initial_trips=snapshot.trips,
        on_change=on_change,
        **client_kwargs,
    )
    await client.start()
    return client
