"""Pending trip model."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict

from fleetlive._constants import DEFAULT_DROPOFF, DEFAULT_PICKUP, DEFAULT_RIDE_MODE, DEFAULT_TRIP_STATUS


class PendingTrip(BaseModel):
    """A trip shown in the pending trip panel.

    ``assigned_to_driver`` references a :class:`DriverLocation` identity for
    display only; the trip does not own the driver.
    """

    model_config = ConfigDict(frozen=True, extra="ignore")

    id: int
    status: str = DEFAULT_TRIP_STATUS
    pickup_location: str = DEFAULT_PICKUP
    dropoff_location: str = DEFAULT_DROPOFF
    ride_mode: str = DEFAULT_RIDE_MODE
    assigned_to_driver: int | None = None
