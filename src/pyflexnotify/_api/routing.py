"""OSRM-compatible foot routing.

Only the distance/duration summary of the best route is consumed.
"""

from __future__ import annotations

import logging
from typing import Any

from pyflexnotify._transport import Transport
from pyflexnotify.config import FlexConfig
from pyflexnotify.models.route import WalkingRoute

_logger = logging.getLogger(__name__)

LatLng = tuple[float, float]


def build_route_url(config: FlexConfig, origin: LatLng, destination: LatLng) -> str:
    """OSRM wants ``lng,lat`` pairs joined by ``;``."""
    (o_lat, o_lng), (d_lat, d_lng) = origin, destination
    return f"{config.routing_base_url}/route/v1/foot/{o_lng},{o_lat};{d_lng},{d_lat}"


def parse_route(payload: Any) -> WalkingRoute | None:
    routes = payload.get("routes") if isinstance(payload, dict) else None
    if not isinstance(routes, list) or not routes or not isinstance(routes[0], dict):
        return None
    best = routes[0]
    try:
        return WalkingRoute(distance=best["distance"], duration=best["duration"])
    except (KeyError, ValueError):
        _logger.debug("Route payload missing distance/duration: %s", list(best.keys()))
        return None


async def fetch_walking_route(
    config: FlexConfig,
    transport: Transport,
    origin: LatLng,
    destination: LatLng,
) -> WalkingRoute | None:
    """Return the walking distance/duration between two points, or ``None``."""
    url = build_route_url(config, origin, destination)
    payload = await transport.get_json(url, {"overview": "false"})
    return parse_route(payload)
