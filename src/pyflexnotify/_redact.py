"""Loggable views of web push subscription descriptors.

A subscription is ``{"endpoint": url, "expirationTime": ..., "keys":
{"p256dh": ..., "auth": ...}}``. The key material is a client secret and
the endpoint URL is a bearer capability, so neither reaches a log line
intact.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

_SECRET_KEYS: frozenset[str] = frozenset({"keys", "auth", "p256dh"})


def _truncate(value: str, limit: int) -> str:
    if len(value) > limit:
        return f"{value[:limit]}…<truncated>"
    return value


def redact_for_log(subscription: Any, *, max_string: int = 64) -> Any:
    """Return a redacted, flat copy of a push subscription for logs.

    Secrets become ``"<redacted>"``, strings are truncated to
    *max_string* characters and nested values are reduced to their type
    name. A bare endpoint string is only truncated.
    """
    if isinstance(subscription, str):
        return _truncate(subscription, max_string)
    if not isinstance(subscription, Mapping):
        return f"<{type(subscription).__name__}>"

    redacted: dict[str, Any] = {}
    for key, value in subscription.items():
        name = str(key)
        if name.lower() in _SECRET_KEYS:
            redacted[name] = "<redacted>"
        elif isinstance(value, str):
            redacted[name] = _truncate(value, max_string)
        elif value is None or isinstance(value, (bool, int, float)):
            redacted[name] = value
        else:
            redacted[name] = f"<{type(value).__name__}>"
    return redacted
