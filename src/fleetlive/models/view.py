"""Read-only projection handed to the presentation layer."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from fleetlive.models.connection import ConnectionState
from fleetlive.models.driver import DriverLocation
from fleetlive.models.event_log import EventLogEntry
from fleetlive.models.trip import PendingTrip


class LiveMapView(BaseModel):
    """Point-in-time copy of the live model.

    ``drivers`` keep insertion/update order; ``trips`` and ``events`` are
    most-recent-first.
    """

    model_config = ConfigDict(frozen=True)

    drivers: tuple[DriverLocation, ...] = ()
    trips: tuple[PendingTrip, ...] = ()
    events: tuple[EventLogEntry, ...] = ()
    connection: ConnectionState = Field(default_factory=ConnectionState)

    @property
    def online_driver_count(self) -> int:
        return sum(1 for driver in self.drivers if driver.is_online)
