"""Client configuration for fleetlive."""

from __future__ import annotations

import dataclasses
import os
from typing import Any

from fleetlive._constants import MAX_EVENTS, MAX_TRIPS, SNAPSHOT_PATH
from fleetlive.exceptions import FleetLiveConfigError


def _env_int(name: str, value: str) -> int:
    try:
        return int(value)
    except ValueError as exc:
        raise FleetLiveConfigError(f"{name} must be an integer, got {value!r}") from exc


def _env_float(name: str, value: str) -> float:
    try:
        return float(value)
    except ValueError as exc:
        raise FleetLiveConfigError(f"{name} must be a number, got {value!r}") from exc


def _blank_to_none(value: str | None) -> str | None:
    if value is None:
        return None
    stripped = value.strip()
    return stripped or None


@dataclasses.dataclass(frozen=True)
class FleetLiveConfig:
    """Live map configuration.

    Parameters
    ----------
    socket_url : str or None
        Push-channel endpoint (Socket.IO server URL). Required to stream.
    api_base_url : str or None
        Backend REST base URL used by the snapshot loader
        (e.g. ``"https://backend.example.com/api"``).
    token : str or None
        Bearer token used for both the snapshot request and the socket
        handshake. A missing token gates the connection; it is not an error.
    snapshot_path : str
        Path of the snapshot endpoint relative to ``api_base_url``.
    max_trips : int
        Capacity of the pending trip list.
    max_events : int
        Capacity of the rolling event log.
    request_timeout : float
        Total timeout in seconds for the snapshot request.
    socket_connect_timeout : float
        Seconds to wait for the socket handshake before giving up.
    """

    socket_url: str | None = None
    api_base_url: str | None = None
    token: str | None = None
    snapshot_path: str = SNAPSHOT_PATH
    max_trips: int = MAX_TRIPS
    max_events: int = MAX_EVENTS
    request_timeout: float = 10.0
    socket_connect_timeout: float = 10.0

    def __post_init__(self) -> None:
        if self.max_trips < 1:
            raise FleetLiveConfigError(f"max_trips must be >= 1, got {self.max_trips}")
        if self.max_events < 1:
            raise FleetLiveConfigError(f"max_events must be >= 1, got {self.max_events}")

    @property
    def can_stream(self) -> bool:
        """Whether both the socket endpoint and the token are present."""
        return bool(self.socket_url) and bool(self.token)

    @classmethod
    def from_env(cls, **overrides: Any) -> FleetLiveConfig:
        """Create configuration from environment variables.

        Reads ``FLEETLIVE_SOCKET_URL``, ``FLEETLIVE_API_BASE_URL``,
        ``FLEETLIVE_TOKEN`` and the optional tuning variables. Explicit
        keyword arguments override environment values.

        Returns
        -------
        FleetLiveConfig
            Populated configuration.
        """
        env = os.environ

        _ENV_CONFIG_MAP = {
            "FLEETLIVE_SOCKET_URL": "socket_url",
            "FLEETLIVE_API_BASE_URL": "api_base_url",
            "FLEETLIVE_TOKEN": "token",
            "FLEETLIVE_SNAPSHOT_PATH": "snapshot_path",
        }
        config_kwargs: dict[str, Any] = {}
        for env_key, field_name in _ENV_CONFIG_MAP.items():
            val = _blank_to_none(env.get(env_key))
            if val is not None:
                config_kwargs[field_name] = val

        # Numeric fields are parsed separately so a bad value names its variable.
        trips_env = env.get("FLEETLIVE_MAX_TRIPS")
        if trips_env is not None and "max_trips" not in overrides:
            config_kwargs["max_trips"] = _env_int("FLEETLIVE_MAX_TRIPS", trips_env)

        events_env = env.get("FLEETLIVE_MAX_EVENTS")
        if events_env is not None and "max_events" not in overrides:
            config_kwargs["max_events"] = _env_int("FLEETLIVE_MAX_EVENTS", events_env)

        timeout_env = env.get("FLEETLIVE_REQUEST_TIMEOUT")
        if timeout_env is not None and "request_timeout" not in overrides:
            config_kwargs["request_timeout"] = _env_float("FLEETLIVE_REQUEST_TIMEOUT", timeout_env)

        config_kwargs.update(overrides)

        return cls(**config_kwargs)
