"""Canonical live map models."""

from fleetlive.models.connection import ConnectionState
from fleetlive.models.driver import DriverLocation, DriverStatus
from fleetlive.models.event_log import EventCategory, EventLogEntry
from fleetlive.models.trip import PendingTrip
from fleetlive.models.view import LiveMapView

__all__ = [
    "ConnectionState",
    "DriverLocation",
    "DriverStatus",
    "EventCategory",
    "EventLogEntry",
    "LiveMapView",
    "PendingTrip",
]
