"""Internal constants shared across the library."""

USER_AGENT = "fleetlive/0"
SNAPSHOT_PATH = "/live-map/snapshot"

#: Default number of pending trips kept in the live set.
MAX_TRIPS = 20
#: Default number of entries kept in the rolling event log.
MAX_EVENTS = 25

# ------------------------------------------------------------------
# Trip defaults applied when the wire omits a field
# ------------------------------------------------------------------

DEFAULT_TRIP_STATUS = "requested"
DEFAULT_PICKUP = "Unknown pickup"
DEFAULT_DROPOFF = "Unknown dropoff"
DEFAULT_RIDE_MODE = "ride_now"

DEFAULT_CONNECT_ERROR = "Socket connection failed"
