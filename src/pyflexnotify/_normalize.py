"""Normalization helpers.

Centralizes defensive parsing of loosely typed feed and caller values.
"""

from __future__ import annotations

import math
from typing import Any


def safe_float(value: Any) -> float | None:
    """Parse *value* as a finite float, returning ``None`` otherwise."""
    if value is None or value == "" or isinstance(value, bool):
        return None
    try:
        result = float(value)
    except (TypeError, ValueError):
        return None
    if not math.isfinite(result):
        return None
    return result


def safe_str(value: Any) -> str:
    if value is None:
        return ""
    return str(value).strip()
