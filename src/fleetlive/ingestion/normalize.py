"""Normalization helpers.

Tolerant parsing of push-channel and snapshot values.
"""

from __future__ import annotations

import math
import time
from datetime import UTC, datetime
from typing import Any


def safe_float(value: Any) -> float | None:
    """Parse *value* as a finite float, or return ``None``.

    Booleans are rejected: ``True`` is not a coordinate or an identity.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, str):
        value = value.strip()
        if not value:
            return None
    try:
        result = float(value)
    except (TypeError, ValueError, OverflowError):
        return None
    if not math.isfinite(result):
        return None
    return result


def safe_int(value: Any) -> int | None:
    parsed = safe_float(value)
    if parsed is None or not parsed.is_integer():
        return None
    return int(parsed)


def safe_str(value: Any) -> str | None:
    if value is None:
        return None
    text = str(value)
    return text if text else None


def first_present(payload: dict[str, Any], *keys: str) -> Any:
    """Return the value of the first key that is present and not ``None``."""
    for key in keys:
        value = payload.get(key)
        if value is not None:
            return value
    return None


def is_meaningful(value: Any) -> bool:
    """Return True if the value should be included in a merge patch."""
    if value is None:
        return False
    if value == "":
        return False
    if value == {}:
        return False
    return bool(value != [])


def prune_patch(data: dict[str, Any]) -> dict[str, Any]:
    """Drop non-meaningful values from a flat patch.

    Store merges assume incoming patches are already pruned, so a missing
    key always means "no update".
    """
    return {key: value for key, value in data.items() if is_meaningful(value)}


def now_ms() -> float:
    """Current epoch timestamp in milliseconds."""
    return time.time() * 1000


def now_iso() -> str:
    """Current UTC time as an ISO-8601 string."""
    return datetime.now(UTC).isoformat()


def parse_iso(value: str) -> datetime | None:
    """Parse an ISO-8601 timestamp; naive values are treated as UTC."""
    text = value.strip()
    if text.endswith("Z"):
        text = f"{text[:-1]}+00:00"
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError:
        return None
    if parsed.tzinfo is None:
        return parsed.replace(tzinfo=UTC)
    return parsed
