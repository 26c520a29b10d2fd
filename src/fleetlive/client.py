"""Live map event stream client."""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable
from typing import Any

from fleetlive._constants import MAX_EVENTS, MAX_TRIPS
from fleetlive._redact import mask_token, redact_for_log
from fleetlive._socket import SocketHandlers, SocketRuntime, default_client_factory
from fleetlive.config import FleetLiveConfig
from fleetlive.ingestion.wire import (
    category_for,
    driver_patch,
    normalize_drivers,
    normalize_trips,
    parse_driver_location,
    parse_trip,
    trip_patch,
)
from fleetlive.models.connection import ConnectionState
from fleetlive.models.driver import DriverLocation
from fleetlive.models.event_log import EventCategory, EventLogEntry
from fleetlive.models.trip import PendingTrip
from fleetlive.models.view import LiveMapView
from fleetlive.state.store import LiveStore

_logger = logging.getLogger(__name__)

_UNSET: Any = object()

#: Reason recorded when the client itself tears the connection down.
CLIENT_DISCONNECT_REASON = "io client disconnect"


class LiveMapClient:
    """Owns one push-channel connection and the live projection it feeds.

    Usage::

        async with LiveMapClient(url, token=token, initial_drivers=snapshot.drivers) as client:
            view = client.view()

    Without a URL or a token the client never connects: it serves the seeded
    data with ``connected=False`` and no error. Transport failures are turned
    into :attr:`connection_error`; nothing on the event path raises to the
    caller. There is no automatic reconnection; call :meth:`reinitialize`
    with fresh inputs (e.g. after a token refresh).
    """

    def __init__(
        self,
        url: str | None = None,
        *,
        token: str | None = None,
        initial_drivers: Iterable[Any] | None = None,
        initial_trips: Iterable[Any] | None = None,
        max_trips: int = MAX_TRIPS,
        max_events: int = MAX_EVENTS,
        connect_timeout: float = 10.0,
        on_change: Callable[[LiveMapView], None] | None = None,
        socket_factory: Callable[[], Any] = default_client_factory,
    ) -> None:
        self._url = url
        self._token = token
        self._store = LiveStore(max_trips=max_trips, max_events=max_events)
        self._on_change = on_change
        self._runtime = SocketRuntime(
            handlers=SocketHandlers(
                on_event=self._on_event,
                on_connect=self._on_connect,
                on_disconnect=self._on_disconnect,
                on_connect_error=self._on_connect_error,
            ),
            client_factory=socket_factory,
            connect_timeout=connect_timeout,
            logger=_logger,
        )
        self.seed(
            drivers=initial_drivers if initial_drivers is not None else [],
            trips=initial_trips if initial_trips is not None else [],
        )

    @classmethod
    def from_config(
        cls,
        config: FleetLiveConfig,
        *,
        initial_drivers: Iterable[Any] | None = None,
        initial_trips: Iterable[Any] | None = None,
        **kwargs: Any,
    ) -> LiveMapClient:
        """Build a client from a :class:`FleetLiveConfig`."""
        return cls(
            config.socket_url,
            token=config.token,
            initial_drivers=initial_drivers,
            initial_trips=initial_trips,
            max_trips=config.max_trips,
            max_events=config.max_events,
            connect_timeout=config.socket_connect_timeout,
            **kwargs,
        )

    # ------------------------------------------------------------------
    # Context manager lifecycle
    # ------------------------------------------------------------------

    async def __aenter__(self) -> LiveMapClient:
        await self.start()
        return self

    async def __aexit__(self, *exc: Any) -> None:
        await self.close()

    # ------------------------------------------------------------------
    # Read model
    # ------------------------------------------------------------------

    @property
    def url(self) -> str | None:
        return self._url

    @property
    def drivers(self) -> list[DriverLocation]:
        return self._store.drivers

    @property
    def trips(self) -> list[PendingTrip]:
        return self._store.trips

    @property
    def events(self) -> list[EventLogEntry]:
        return self._store.events

    @property
    def connection(self) -> ConnectionState:
        return self._store.connection

    @property
    def connected(self) -> bool:
        return self._store.connection.connected

    @property
    def connection_error(self) -> str | None:
        return self._store.connection.connection_error

    @property
    def store(self) -> LiveStore:
        """Underlying store (e.g. for opt-in stale driver pruning)."""
        return self._store

    def view(self) -> LiveMapView:
        return self._store.view()

    # ------------------------------------------------------------------
    # Seeding and lifecycle
    # ------------------------------------------------------------------

    def seed(self, *, drivers: Any = None, trips: Any = None) -> None:
        """Replace the seeded driver and/or trip lists in full.

        ``None`` leaves the corresponding list untouched. Entries are
        normalized like live events; unusable ones are dropped.
        """
        if drivers is not None:
            self._store.seed_drivers(normalize_drivers(drivers))
        if trips is not None:
            self._store.seed_trips(normalize_trips(trips))
        if drivers is not None or trips is not None:
            self._notify()

    async def start(self) -> None:
        """Connect if both URL and token are present, otherwise stay idle."""
        if not self._url or not self._token:
            _logger.debug("Live map stream not started: url or token missing")
            await self._runtime.stop()
            self._store.set_connection(connected=False, connection_error=None)
            self._notify()
            return

        _logger.info("Connecting live map stream url=%s token=%s", self._url, mask_token(self._token))
        await self._runtime.start(self._url, self._token)

    async def reinitialize(self, *, url: str | None = _UNSET, token: str | None = _UNSET) -> None:
        """Apply a new endpoint and/or token.

        The previous connection is torn down before a new one is opened.
        Unchanged inputs with a live, connected socket are a no-op; after a
        server-side drop the same inputs open a fresh connection.
        """
        new_url = self._url if url is _UNSET else url
        new_token = self._token if token is _UNSET else token
        if new_url == self._url and new_token == self._token and self._runtime.is_running and self.connected:
            return

        await self.close()
        self._url = new_url
        self._token = new_token
        await self.start()

    async def close(self) -> None:
        """Sever the connection. Idempotent and safe without a prior connection."""
        was_running = self._runtime.is_running
        await self._runtime.stop()
        if was_running and self._store.connection.connected:
            self._store.set_connection(connected=False, connection_error=None)
            self._store.append_event(
                EventCategory.SOCKET,
                {"message": "Disconnected", "reason": CLIENT_DISCONNECT_REASON},
            )
            self._notify()
        if was_running:
            _logger.info("Live map stream closed")

    # ------------------------------------------------------------------
    # Inbound handling (each call completes before the next message)
    # ------------------------------------------------------------------

    def handle_driver_location(self, payload: Any) -> DriverLocation | None:
        location = parse_driver_location(payload)
        if location is None:
            return None
        merged = self._store.upsert_driver(location, driver_patch(location))
        self._store.append_event(EventCategory.LOCATION, location.model_dump())
        self._notify()
        return merged

    def handle_trip(self, payload: Any) -> PendingTrip | None:
        trip = parse_trip(payload)
        if trip is None:
            return None
        merged = self._store.upsert_trip(trip, trip_patch(trip))
        self._store.append_event(EventCategory.TRIP, trip.model_dump())
        self._notify()
        return merged

    def _log_only(self, category: EventCategory, payload: Any) -> None:
        self._store.append_event(category, payload)
        self._notify()

    def _on_event(self, name: str, payload: Any) -> None:
        category = category_for(name)
        if category is None:
            _logger.debug("Ignoring unknown live map event name=%s", name)
            return
        _logger.debug("Live map event name=%s payload=%s", name, redact_for_log(payload))
        try:
            if category == EventCategory.LOCATION:
                self.handle_driver_location(payload)
            elif category == EventCategory.TRIP:
                self.handle_trip(payload)
            else:
                self._log_only(category, payload)
        except Exception:
            _logger.debug("Live map event handling failed name=%s", name, exc_info=True)

    def _on_connect(self, sid: str | None) -> None:
        _logger.info("Live map stream connected sid=%s", sid)
        self._store.set_connection(connected=True, connection_error=None)
        self._store.append_event(EventCategory.SOCKET, {"message": "Connected", "sid": sid})
        self._notify()

    def _on_disconnect(self, reason: Any) -> None:
        reason_text = str(reason) if reason is not None else None
        _logger.info("Live map stream disconnected reason=%s", reason_text)
        # Keep the last error visible; only a successful connect clears it.
        self._store.set_connection(connected=False, connection_error=self._store.connection.connection_error)
        self._store.append_event(EventCategory.SOCKET, {"message": "Disconnected", "reason": reason_text})
        self._notify()

    def _on_connect_error(self, message: str) -> None:
        _logger.warning("Live map stream connection error: %s", message)
        self._store.set_connection(connected=False, connection_error=message)
        self._store.append_event(EventCategory.SOCKET, {"message": "Connection error", "error": message})
        self._notify()

    def _notify(self) -> None:
        listener = self._on_change
        if listener is None:
            return
        try:
            listener(self._store.view())
        except Exception:
            _logger.warning("Live map change listener failed", exc_info=True)
