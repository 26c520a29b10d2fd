"""fleetlive - Async live map client for ride-hailing fleet dashboards."""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("fleetlive")
except PackageNotFoundError:
    __version__ = "0+local"
from fleetlive.client import LiveMapClient
from fleetlive.config import FleetLiveConfig
from fleetlive.exceptions import FleetLiveConfigError, FleetLiveError, FleetLiveTransportError
from fleetlive.models import (
    ConnectionState,
    DriverLocation,
    DriverStatus,
    EventCategory,
    EventLogEntry,
    LiveMapView,
    PendingTrip,
)
from fleetlive.snapshot import Snapshot, fetch_snapshot, load_snapshot, open_live_map
from fleetlive.state.store import LiveStore

__all__ = [
    "__version__",
    "ConnectionState",
    "DriverLocation",
    "DriverStatus",
    "EventCategory",
    "EventLogEntry",
    "FleetLiveConfig",
    "FleetLiveConfigError",
    "FleetLiveError",
    "FleetLiveTransportError",
    "LiveMapClient",
    "LiveMapView",
    "LiveStore",
    "PendingTrip",
    "Snapshot",
    "fetch_snapshot",
    "load_snapshot",
    "open_live_map",
]
