"""Custom exception hierarchy for fleetlive."""

from __future__ import annotations


class FleetLiveError(Exception):
    """Base exception for all fleetlive errors."""


class FleetLiveConfigError(FleetLiveError):
    """Invalid or missing configuration."""


class FleetLiveTransportError(FleetLiveError):
    """HTTP-level failure (network, non-2xx, invalid JSON)."""

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        endpoint: str = "",
    ) -> None:
        self.status_code = status_code
        self.endpoint = endpoint
        super().__init__(message)
