"""Deterministic in-memory live map store.

This is the only component allowed to mutate the live projection. Every
method completes synchronously, so a message handled by the stream client is
fully merged and logged before the next one runs.
"""

from __future__ import annotations

from collections import deque
from collections.abc import Callable, Iterable
from datetime import UTC, datetime, timedelta
from typing import Any

from fleetlive._constants import MAX_EVENTS, MAX_TRIPS
from fleetlive.exceptions import FleetLiveConfigError
from fleetlive.ingestion.normalize import parse_iso
from fleetlive.models.connection import ConnectionState
from fleetlive.models.driver import DriverLocation
from fleetlive.models.event_log import EventCategory, EventLogEntry
from fleetlive.models.trip import PendingTrip
from fleetlive.models.view import LiveMapView


def _utcnow() -> datetime:
    return datetime.now(UTC)


class LiveStore:
    """In-memory projection of drivers, pending trips, the event log and connection health.

    Given the same sequence of calls, the store produces the same view
    (apart from generated event ids and receipt timestamps).
    """

    def __init__(
        self,
        *,
        max_trips: int = MAX_TRIPS,
        max_events: int = MAX_EVENTS,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        if max_trips < 1:
            raise FleetLiveConfigError(f"max_trips must be >= 1, got {max_trips}")
        if max_events < 1:
            raise FleetLiveConfigError(f"max_events must be >= 1, got {max_events}")
        self._max_trips = max_trips
        self._clock = clock
        # dicts keep insertion order; an update keeps the driver's position.
        self._drivers: dict[int, DriverLocation] = {}
        self._trips: list[PendingTrip] = []
        self._events: deque[EventLogEntry] = deque(maxlen=max_events)
        self._connection = ConnectionState()

    # ------------------------------------------------------------------
    # Seeding
    # ------------------------------------------------------------------

    def seed_drivers(self, drivers: Iterable[DriverLocation]) -> None:
        """Replace the driver set in full (later duplicates win)."""
        self._drivers = {}
        for driver in drivers:
            self._drivers[driver.driver_id] = driver

    def seed_trips(self, trips: Iterable[PendingTrip]) -> None:
        """Replace the trip list in full, keeping the first ``max_trips`` unique ids."""
        seeded: list[PendingTrip] = []
        seen: set[int] = set()
        for trip in trips:
            if len(seeded) >= self._max_trips:
                break
            if trip.id in seen:
                continue
            seen.add(trip.id)
            seeded.append(trip)
        self._trips = seeded

    # ------------------------------------------------------------------
    # Incremental updates
    # ------------------------------------------------------------------

    def upsert_driver(self, location: DriverLocation, patch: dict[str, Any]) -> DriverLocation:
        """Merge *patch* into the record for ``location.driver_id`` or insert *location*."""
        existing = self._drivers.get(location.driver_id)
        merged = location if existing is None else existing.model_copy(update=patch)
        self._drivers[location.driver_id] = merged
        return merged

    def upsert_trip(self, trip: PendingTrip, patch: dict[str, Any]) -> PendingTrip:
        """Merge *patch* into the trip with the same id, or prepend *trip*.

        A merged trip keeps its position; a new trip goes to the front and the
        oldest entries beyond ``max_trips`` are evicted.
        """
        for index, current in enumerate(self._trips):
            if current.id == trip.id:
                merged = current.model_copy(update=patch)
                self._trips[index] = merged
                return merged

        self._trips.insert(0, trip)
        del self._trips[self._max_trips :]
        return trip

    def append_event(self, category: EventCategory, payload: Any) -> EventLogEntry:
        entry = EventLogEntry(type=category, payload=payload)
        self._events.appendleft(entry)
        return entry

    def set_connection(self, *, connected: bool, connection_error: str | None = None) -> None:
        self._connection = ConnectionState(connected=connected, connection_error=connection_error)

    def prune_stale_drivers(self, max_age: timedelta) -> list[int]:
        """Remove drivers whose ``updated_at`` is older than *max_age*.

        Opt-in only; the stream itself never removes drivers. Records with an
        unparseable ``updated_at`` are kept. Returns the removed ids.
        """
        cutoff = self._clock() - max_age
        removed: list[int] = []
        for driver_id, driver in list(self._drivers.items()):
            updated = parse_iso(driver.updated_at)
            if updated is not None and updated < cutoff:
                del self._drivers[driver_id]
                removed.append(driver_id)
        return removed

    # ------------------------------------------------------------------
    # Read model
    # ------------------------------------------------------------------

    @property
    def drivers(self) -> list[DriverLocation]:
        return list(self._drivers.values())

    @property
    def trips(self) -> list[PendingTrip]:
        return list(self._trips)

    @property
    def events(self) -> list[EventLogEntry]:
        return list(self._events)

    @property
    def connection(self) -> ConnectionState:
        return self._connection

    def get_driver(self, driver_id: int) -> DriverLocation | None:
        return self._drivers.get(driver_id)

    def view(self) -> LiveMapView:
        return LiveMapView(
            drivers=tuple(self._drivers.values()),
            trips=tuple(self._trips),
            events=tuple(self._events),
            connection=self._connection,
        )
