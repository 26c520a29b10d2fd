from __future__ import annotations

from collections.abc import Callable
from typing import Any

import pytest
from socketio.exceptions import ConnectionError as SocketConnectionError


class FakeSocketClient:
    """Stand-in for ``socketio.AsyncClient`` that never touches the network."""

    def __init__(
        self,
        *,
        fail_with: Any = None,
        raise_on_connect: Exception | None = None,
        sid: str = "sid-1",
    ) -> None:
        self.handlers: dict[str, Callable[..., Any]] = {}
        self.connect_calls: list[tuple[str, dict[str, Any]]] = []
        self.disconnect_calls = 0
        self.sid = sid
        self._fail_with = fail_with
        self._raise_on_connect = raise_on_connect

    def on(self, event: str, handler: Callable[..., Any]) -> None:
        self.handlers[event] = handler

    async def connect(self, url: str, **kwargs: Any) -> None:
        self.connect_calls.append((url, kwargs))
        if self._raise_on_connect is not None:
            raise self._raise_on_connect
        if self._fail_with is not None:
            self.handlers["connect_error"](self._fail_with)
            raise SocketConnectionError("One or more namespaces failed to connect")
        self.handlers["connect"]()

    async def disconnect(self) -> None:
        self.disconnect_calls += 1

    def server_emit(self, event: str, *args: Any) -> None:
        self.handlers[event](*args)


class FakeSocketFactory:
    def __init__(self) -> None:
        self.created: list[FakeSocketClient] = []
        self.fail_with: Any = None
        self.raise_on_connect: Exception | None = None

    def __call__(self) -> FakeSocketClient:
        client = FakeSocketClient(
            fail_with=self.fail_with,
            raise_on_connect=self.raise_on_connect,
            sid=f"sid-{len(self.created) + 1}",
        )
        self.created.append(client)
        return client

    @property
    def last(self) -> FakeSocketClient:
        return self.created[-1]


@pytest.fixture
def socket_factory() -> FakeSocketFactory:
    return FakeSocketFactory()
