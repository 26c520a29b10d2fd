"""Push-channel connection health."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict


class ConnectionState(BaseModel):
    model_config = ConfigDict(frozen=True)

    connected: bool = False
    connection_error: str | None = None
