"""Internal Socket.IO runtime for the live map push channel."""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

import socketio
from socketio.exceptions import ConnectionError as SocketConnectionError

from fleetlive._constants import DEFAULT_CONNECT_ERROR
from fleetlive.ingestion.wire import WIRE_EVENTS


@dataclass(frozen=True)
class SocketHandlers:
    """Callbacks the runtime invokes on the event loop, one message at a time."""

    on_event: Callable[[str, Any], None]
    on_connect: Callable[[str | None], None]
    on_disconnect: Callable[[Any], None]
    on_connect_error: Callable[[str], None]


def default_client_factory() -> socketio.AsyncClient:
    # Reconnection is the caller's job (reinitialize with fresh inputs).
    return socketio.AsyncClient(reconnection=False, logger=False, engineio_logger=False)


def connect_error_message(data: Any) -> str:
    """Extract a human-readable message from a ``connect_error`` payload."""
    if isinstance(data, dict):
        message = data.get("message")
        if message:
            return str(message)
        return DEFAULT_CONNECT_ERROR
    if isinstance(data, BaseException):
        return str(data) or DEFAULT_CONNECT_ERROR
    if data:
        return str(data)
    return DEFAULT_CONNECT_ERROR


class SocketRuntime:
    """Owns at most one ``socketio.AsyncClient`` at a time."""

    def __init__(
        self,
        *,
        handlers: SocketHandlers,
        client_factory: Callable[[], Any] = default_client_factory,
        connect_timeout: float = 10.0,
        logger: logging.Logger | None = None,
    ) -> None:
        self._handlers = handlers
        self._client_factory = client_factory
        self._connect_timeout = connect_timeout
        self._logger = logger or logging.getLogger(__name__)
        self._client: Any | None = None
        self._error_reported = False

    @property
    def is_running(self) -> bool:
        """Whether a client instance is currently owned."""
        return self._client is not None

    def _register(self, client: Any) -> None:
        handlers = self._handlers

        def is_current() -> bool:
            # Late callbacks from a client that was already replaced are ignored.
            return self._client is client

        def make_event_handler(name: str) -> Callable[..., None]:
            def handler(*args: Any) -> None:
                if is_current():
                    handlers.on_event(name, args[0] if args else None)

            return handler

        for event_name in WIRE_EVENTS:
            client.on(event_name, make_event_handler(event_name))

        def on_connect() -> None:
            if not is_current():
                return
            self._error_reported = False
            handlers.on_connect(getattr(client, "sid", None))

        def on_disconnect(reason: Any = None) -> None:
            if is_current():
                handlers.on_disconnect(reason)

        def on_connect_error(data: Any = None) -> None:
            if not is_current():
                return
            self._error_reported = True
            handlers.on_connect_error(connect_error_message(data))

        client.on("connect", on_connect)
        client.on("disconnect", on_disconnect)
        client.on("connect_error", on_connect_error)

    async def start(self, url: str, token: str) -> None:
        """Stop any previous client, then connect a new one.

        Connection failures are reported through ``on_connect_error`` and are
        never raised.
        """
        await self.stop()
        self._logger.debug("Socket runtime start requested url=%s", url)

        client = self._client_factory()
        self._register(client)
        self._client = client
        self._error_reported = False

        try:
            await client.connect(
                url,
                auth={"token": token},
                transports=["websocket"],
                wait_timeout=self._connect_timeout,
            )
        except (SocketConnectionError, OSError, TimeoutError, ValueError) as exc:
            self._logger.debug("Socket connect failed url=%s", url, exc_info=True)
            self._client = None
            if not self._error_reported:
                self._error_reported = True
                self._handlers.on_connect_error(connect_error_message(exc))

    async def stop(self) -> None:
        """Disconnect the current client if any. Safe to call repeatedly."""
        client = self._client
        self._client = None
        if client is None:
            return
        self._logger.debug("Socket disconnect requested")
        await client.disconnect()
