"""Helpers for safe debug logging.

Live map traffic carries bearer tokens in the socket handshake and rider
contact details inside trip payloads. Everything that reaches a DEBUG log
goes through :func:`redact_for_log` first.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any

_SENSITIVE_KEYS: frozenset[str] = frozenset(
    {
        "auth",
        "authorization",
        "token",
        "accesstoken",
        "refreshtoken",
        "cookie",
        "password",
        "phone",
        "phonenumber",
        "email",
    }
)

_REDACTED = "<redacted>"
_MAX_DEPTH = 20


def mask_token(token: str | None) -> str:
    """Show only the last four characters of a bearer token."""
    if not token:
        return "<none>"
    if len(token) <= 8:
        return "****"
    return f"****{token[-4:]}"


def redact_for_log(value: Any, *, max_string: int = 512, _depth: int = 0) -> Any:
    """Return a redacted, size-bounded copy of *value* for debug logs."""
    if _depth > _MAX_DEPTH:
        return "<max-depth>"

    if value is None or isinstance(value, (bool, int, float)):
        return value

    if isinstance(value, str):
        if len(value) > max_string:
            return f"{value[:max_string]}...<truncated>"
        return value

    if isinstance(value, (bytes, bytearray)):
        return f"<bytes:{len(value)}b>"

    if isinstance(value, Mapping):
        return {
            str(key): _REDACTED
            if str(key).replace("_", "").lower() in _SENSITIVE_KEYS
            else redact_for_log(item, max_string=max_string, _depth=_depth + 1)
            for key, item in value.items()
        }

    if isinstance(value, Sequence):
        return [redact_for_log(item, max_string=max_string, _depth=_depth + 1) for item in value]

    return repr(value)
