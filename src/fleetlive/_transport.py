"""HTTP transport for backend REST reads."""

from __future__ import annotations

import json
import logging
from typing import Any, Protocol

import aiohttp

from fleetlive._constants import USER_AGENT
from fleetlive.exceptions import FleetLiveTransportError

_logger = logging.getLogger(__name__)


class Transport(Protocol):
    """Structural transport interface used by the snapshot loader.

    Having a protocol here makes it easy to pass test doubles while keeping
    the production implementation (`HttpTransport`) concrete.
    """

    async def get_json(self, endpoint: str, *, token: str | None = None) -> Any: ...


def build_url(base_url: str, path: str) -> str:
    """Join *base_url* and *path* with exactly one slash."""
    base = base_url[:-1] if base_url.endswith("/") else base_url
    route = path if path.startswith("/") else f"/{path}"
    return f"{base}{route}"


def _error_message(status: int, text: str) -> str:
    """Prefer the backend's ``message`` field over a generic status line."""
    try:
        body = json.loads(text)
    except json.JSONDecodeError:
        body = None
    if isinstance(body, dict) and body.get("message"):
        return str(body["message"])
    return f"Request failed ({status})"


class HttpTransport:
    """JSON-over-HTTP transport with bearer authentication."""

    def __init__(
        self,
        base_url: str,
        http_session: aiohttp.ClientSession,
        *,
        timeout: float = 10.0,
    ) -> None:
        self._base_url = base_url
        self._http = http_session
        self._timeout = aiohttp.ClientTimeout(total=timeout)

    async def get_json(self, endpoint: str, *, token: str | None = None) -> Any:
        """GET *endpoint* and return the decoded JSON body.

        Raises :class:`FleetLiveTransportError` on network failure, non-2xx
        status or a body that is not JSON.
        """
        headers: dict[str, str] = {
            "accept": "application/json",
            "user-agent": USER_AGENT,
        }
        if token:
            headers["authorization"] = f"Bearer {token}"

        url = build_url(self._base_url, endpoint)
        _logger.debug("GET %s", url)

        try:
            async with self._http.get(url, headers=headers, timeout=self._timeout) as resp:
                text = await resp.text()
                if not 200 <= resp.status < 300:
                    raise FleetLiveTransportError(
                        _error_message(resp.status, text),
                        status_code=resp.status,
                        endpoint=endpoint,
                    )
        except FleetLiveTransportError:
            raise
        except (aiohttp.ClientError, TimeoutError) as exc:
            raise FleetLiveTransportError(
                f"Request to {endpoint} failed: {exc}",
                endpoint=endpoint,
            ) from exc

        try:
            return json.loads(text)
        except json.JSONDecodeError as exc:
            raise FleetLiveTransportError(
                f"Invalid JSON from {endpoint}: {text[:200]}",
                endpoint=endpoint,
            ) from exc
