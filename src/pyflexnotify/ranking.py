"""Proximity filter/ranker.

One primitive, called once per radius: the alert set and the larger
observation set are two calls with two radii.
"""

from __future__ import annotations

from collections.abc import Iterable

from pyflexnotify.geo import distance_metres, format_distance
from pyflexnotify.models.vehicle import RankedVehicle, Vehicle


def rank(
    vehicles: Iterable[Vehicle],
    origin_lat: float,
    origin_lng: float,
    radius_metres: float,
) -> list[RankedVehicle]:
    """Vehicles within *radius_metres* of the origin, closest first.

    The boundary is inclusive. ``sorted`` is stable, so vehicles at equal
    distance keep their feed order and identical snapshots always rank
    identically.
    """
    ranked = [
        RankedVehicle(
            vehicle=vehicle,
            distance=distance_metres(origin_lat, origin_lng, vehicle.latitude, vehicle.longitude),
        )
        for vehicle in vehicles
    ]
    return sorted(
        (item for item in ranked if item.distance <= radius_metres),
        key=lambda item: item.distance,
    )


def summarize(total: int, alert_count: int, radius: float, display_count: int) -> str:
    """Status line for one successful poll."""
    return (
        f"{total} cars found. {alert_count} within {format_distance(radius)} "
        f"({display_count} map total). Waiting..."
    )
