"""Great-circle distance helpers.

Pure functions, no state. Distances are in metres on a spherical Earth
of radius 6,371 km.
"""

from __future__ import annotations

import math

from pyflexnotify._constants import EARTH_RADIUS_M


def to_radians(degrees: float) -> float:
    """Convert degrees to radians."""
    return degrees * (math.pi / 180.0)


def distance_metres(lat1: float, lng1: float, lat2: float, lng2: float) -> float:
    """Haversine distance in metres between two WGS-84 coordinate pairs."""
    d_lat = to_radians(lat2 - lat1)
    d_lng = to_radians(lng2 - lng1)
    a = math.sin(d_lat / 2) ** 2 + math.cos(to_radians(lat1)) * math.cos(to_radians(lat2)) * math.sin(d_lng / 2) ** 2
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))
    return EARTH_RADIUS_M * c


def format_distance(metres: float) -> str:
    """Human-readable distance: ``"850m"`` below a kilometre, ``"1.2km"`` above.

    Metres round half up. Negative values format as-is.
    """
    if metres < 1000:
        if not math.isfinite(metres):
            return f"{metres}m"
        return f"{math.floor(metres + 0.5)}m"
    return f"{metres / 1000:.1f}km"
