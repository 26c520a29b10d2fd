"""Rolling event log entries.

Entries are diagnostic records of what arrived on the push channel. They
carry no source identity and are never merged or mutated after insertion.
"""

from __future__ import annotations

import uuid
from enum import StrEnum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from fleetlive._constants import DEFAULT_TRIP_STATUS
from fleetlive.ingestion.normalize import now_ms


class EventCategory(StrEnum):
    LOCATION = "location"
    TRIP = "trip"
    DRIVER_STATUS = "driver_status"
    SESSION = "session"
    SOCKET = "socket"


def _new_event_id() -> str:
    return uuid.uuid4().hex


class EventLogEntry(BaseModel):
    """A single entry of the rolling event log.

    Parameters
    ----------
    id : str
        Opaque token generated at receipt time.
    type : EventCategory
        Category the entry was logged under.
    payload : Any
        The event body as it was logged (normalized record for location/trip,
        raw body otherwise).
    ts : float
        Receipt time in epoch milliseconds.
    """

    model_config = ConfigDict(frozen=True)

    id: str = Field(default_factory=_new_event_id)
    type: EventCategory
    payload: Any = None
    ts: float = Field(default_factory=now_ms)

    def describe(self) -> str:
        """One-line human readable summary for a side panel."""
        payload: dict[str, Any] = self.payload if isinstance(self.payload, dict) else {}
        if self.type == EventCategory.LOCATION:
            return f"Driver #{payload.get('driver_id', payload.get('driverId'))} updated location."
        if self.type == EventCategory.TRIP:
            return f"Trip #{payload.get('id')} {payload.get('status') or DEFAULT_TRIP_STATUS}."
        if self.type == EventCategory.DRIVER_STATUS:
            return f"Driver #{payload.get('driverId')} status {payload.get('status')}."
        if self.type == EventCategory.SESSION:
            return f"Session event vehicle #{payload.get('vehicleId')} driver #{payload.get('driverId')}."
        message = payload.get("message")
        return str(message) if message else "Event"
