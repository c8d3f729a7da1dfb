"""Available-vehicles endpoint: GetAvailableVehicles.

No caching: every call issues one request, the availability list is
authoritative only at the moment it is returned.
"""

from __future__ import annotations

import logging
from typing import Any

from pydantic import ValidationError

from pyflexnotify._constants import AVAILABLE_VEHICLES_ENDPOINT
from pyflexnotify._transport import Transport
from pyflexnotify.config import FlexConfig
from pyflexnotify.exceptions import UpstreamError
from pyflexnotify.models.vehicle import Vehicle

_logger = logging.getLogger(__name__)


def build_vehicles_params(config: FlexConfig, branch_id: int) -> dict[str, str]:
    """Query string for the availability request."""
    return {
        "BranchID": str(branch_id),
        "LanguageID": str(config.language_id),
    }


def parse_vehicle_list(payload: Any) -> list[Vehicle]:
    """Map a ``{"d": {"Vehicles": [...]}}`` payload onto :class:`Vehicle`.

    Raises
    ------
    UpstreamError
        If the payload does not carry the nested vehicle list.
    """
    container = payload.get("d") if isinstance(payload, dict) else None
    items = container.get("Vehicles") if isinstance(container, dict) else None
    if not isinstance(items, list):
        raise UpstreamError(
            "Malformed availability payload: missing d.Vehicles list",
            endpoint=AVAILABLE_VEHICLES_ENDPOINT,
        )

    vehicles: list[Vehicle] = []
    for index, item in enumerate(items):
        if not isinstance(item, dict):
            continue
        try:
            vehicles.append(Vehicle.model_validate(item))
        except ValidationError:
            _logger.debug("Skipping vehicle entry %d without usable coordinates", index)
    return vehicles


async def fetch_available_vehicles(
    config: FlexConfig,
    transport: Transport,
    branch_id: int,
) -> list[Vehicle]:
    """Fetch the vehicles currently available in a branch.

    Parameters
    ----------
    config : FlexConfig
        Client configuration.
    transport : Transport
        HTTP transport.
    branch_id : int
        Feed branch identifier.

    Returns
    -------
    list[Vehicle]
        Vehicles in feed order.

    Raises
    ------
    UpstreamError
        On network failure, non-success status or malformed payload.
    """
    url = f"{config.base_url}{AVAILABLE_VEHICLES_ENDPOINT}"
    payload = await transport.get_json(url, build_vehicles_params(config, branch_id))
    vehicles = parse_vehicle_list(payload)
    _logger.debug("Branch %s: %d vehicles available", branch_id, len(vehicles))
    return vehicles
