"""Push-channel wire shapes.

The backend emits the same semantic events under a legacy flat name and a
namespaced ``live_map:*`` name, with tolerant field naming inside the body.
This module is the only place that knows about those shapes: it maps event
names to categories and turns raw bodies into canonical models. Nothing
downstream sees a wire dict.
"""

from __future__ import annotations

import logging
from datetime import UTC, datetime
from typing import Any

from pydantic import ValidationError

from fleetlive._redact import redact_for_log
from fleetlive.ingestion.normalize import first_present, prune_patch, safe_float, safe_int, safe_str
from fleetlive.models.driver import DriverLocation, DriverStatus
from fleetlive.models.event_log import EventCategory
from fleetlive.models.trip import PendingTrip

_logger = logging.getLogger(__name__)

#: Every accepted event name, legacy first, then the namespaced variant.
WIRE_EVENTS: dict[str, EventCategory] = {
    "updateDriverLocation": EventCategory.LOCATION,
    "live_map:driver_location": EventCategory.LOCATION,
    "trip_request": EventCategory.TRIP,
    "live_map:trip": EventCategory.TRIP,
    "driver_status": EventCategory.DRIVER_STATUS,
    "live_map:driver_status": EventCategory.DRIVER_STATUS,
    "session_event": EventCategory.SESSION,
    "live_map:session": EventCategory.SESSION,
}

# Field-name fallbacks, in priority order.
_DRIVER_ID_KEYS = ("driverId", "id")
_LAT_KEYS = ("lat", "latitude")
_LNG_KEYS = ("lng", "longitude")
_TRIP_ID_KEYS = ("id", "tripId")
_PICKUP_KEYS = ("pickupLocation", "pickup")
_DROPOFF_KEYS = ("dropoffLocation", "dropoff")
_RIDE_MODE_KEYS = ("rideMode", "mode")

# Seconds vs. milliseconds threshold for numeric timestamps.
_MS_THRESHOLD = 1_000_000_000_000


def category_for(event_name: str) -> EventCategory | None:
    """Return the category for an inbound event name, or ``None`` if unknown."""
    return WIRE_EVENTS.get(event_name)


def _derive_status(payload: dict[str, Any]) -> str | None:
    status = safe_str(payload.get("status"))
    if status:
        return status
    available = payload.get("isAvailable")
    if isinstance(available, bool):
        return DriverStatus.ONLINE.value if available else DriverStatus.OFFLINE.value
    return None


def _coerce_updated_at(value: Any) -> str | None:
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        ts = safe_float(value)
        if ts is None or ts <= 0:
            return None
        if ts >= _MS_THRESHOLD:
            ts /= 1000.0
        try:
            return datetime.fromtimestamp(ts, tz=UTC).isoformat()
        except (OverflowError, OSError, ValueError):
            return None
    return safe_str(value)


def parse_driver_location(payload: Any) -> DriverLocation | None:
    """Normalize a location body into a :class:`DriverLocation`.

    Returns ``None`` when the identity or either coordinate does not parse
    as a finite number. Never raises.
    """
    if not isinstance(payload, dict):
        return None

    driver_id = safe_int(first_present(payload, *_DRIVER_ID_KEYS))
    lat = safe_float(first_present(payload, *_LAT_KEYS))
    lng = safe_float(first_present(payload, *_LNG_KEYS))
    if driver_id is None or lat is None or lng is None:
        _logger.debug("Dropping location event without usable identity/coordinates: %s", redact_for_log(payload))
        return None

    fields: dict[str, Any] = {
        "driver_id": driver_id,
        "lat": lat,
        "lng": lng,
        "status": _derive_status(payload),
        "updated_at": _coerce_updated_at(payload.get("updatedAt")),
    }
    available = payload.get("isAvailable")
    if isinstance(available, bool):
        fields["is_available"] = available

    try:
        return DriverLocation(**prune_patch(fields))
    except ValidationError:
        _logger.debug("Dropping invalid location event", exc_info=True)
        return None


def parse_trip(payload: Any) -> PendingTrip | None:
    """Normalize a trip body into a :class:`PendingTrip`.

    Returns ``None`` when no identity parses. Fields the body does not carry
    are left unset so that :func:`trip_patch` only reports what arrived.
    """
    if not isinstance(payload, dict):
        return None

    trip_id = safe_int(first_present(payload, *_TRIP_ID_KEYS))
    if trip_id is None:
        _logger.debug("Dropping trip event without identity: %s", redact_for_log(payload))
        return None

    fields = prune_patch(
        {
            "id": trip_id,
            "status": safe_str(payload.get("status")),
            "pickup_location": safe_str(first_present(payload, *_PICKUP_KEYS)),
            "dropoff_location": safe_str(first_present(payload, *_DROPOFF_KEYS)),
            "ride_mode": safe_str(first_present(payload, *_RIDE_MODE_KEYS)),
            "assigned_to_driver": safe_int(payload.get("assignedToDriver")),
        }
    )

    try:
        return PendingTrip(**fields)
    except ValidationError:
        _logger.debug("Dropping invalid trip event", exc_info=True)
        return None


def driver_patch(location: DriverLocation) -> dict[str, Any]:
    """Fields to merge into an existing record for this update.

    ``updated_at`` is always part of the patch: an update without a source
    timestamp is stamped with its receipt time.
    """
    keys = set(location.model_fields_set) | {"updated_at"}
    return location.model_dump(include=keys)


def trip_patch(trip: PendingTrip) -> dict[str, Any]:
    """Fields the wire actually carried; defaults never overwrite known values."""
    return trip.model_dump(include=set(trip.model_fields_set))


def normalize_drivers(items: Any) -> list[DriverLocation]:
    """Normalize a snapshot driver list, dropping unusable entries."""
    if not isinstance(items, (list, tuple)):
        return []
    drivers: list[DriverLocation] = []
    for item in items:
        location = parse_driver_location(item)
        if location is not None:
            drivers.append(location)
    return drivers


def normalize_trips(items: Any) -> list[PendingTrip]:
    """Normalize a snapshot trip list, dropping entries without identity."""
    if not isinstance(items, (list, tuple)):
        return []
    trips: list[PendingTrip] = []
    for item in items:
        trip = parse_trip(item)
        if trip is not None:
            trips.append(trip)
    return trips
