"""Driver location model."""

from __future__ import annotations

from enum import StrEnum

from pydantic import BaseModel, ConfigDict, Field, field_validator

from fleetlive.ingestion.normalize import now_iso, safe_float


class DriverStatus(StrEnum):
    """Well-known driver status tags. Other strings pass through unchanged."""

    ONLINE = "online"
    OFFLINE = "offline"


class DriverLocation(BaseModel):
    """Last known position of a driver in the live set.

    Parameters
    ----------
    driver_id : int
        Driver identity, unique within the live set.
    lat : float
        Latitude in degrees.
    lng : float
        Longitude in degrees.
    status : str or None
        ``"online"``/``"offline"`` or any backend-specific tag.
    is_available : bool or None
        Availability flag, when the backend sent one.
    updated_at : str
        ISO-8601 time of the last update; receipt time when the source omits it.
    """

    model_config = ConfigDict(frozen=True, extra="ignore")

    driver_id: int
    lat: float
    lng: float
    status: str | None = None
    is_available: bool | None = None
    updated_at: str = Field(default_factory=now_iso)

    @field_validator("lat", "lng", mode="before")
    @classmethod
    def _require_finite(cls, value: object) -> float:
        parsed = safe_float(value)
        if parsed is None:
            raise ValueError("coordinate must be a finite number")
        return parsed

    @property
    def is_online(self) -> bool:
        return self.status == DriverStatus.ONLINE
