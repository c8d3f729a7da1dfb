"""Search session state.

A session is owned by exactly one :class:`~pyflexnotify.search.loop.SearchLoop`;
only that loop mutates it. The one external write permitted is a
cooperative cancellation through the loop's ``stop()``.
"""

from __future__ import annotations

import asyncio
import enum
from dataclasses import dataclass, field
from typing import Any

from pyflexnotify._normalize import safe_float
from pyflexnotify.cities import branch_id_for, normalize_city
from pyflexnotify.exceptions import FlexValidationError


class SearchState(enum.StrEnum):
    IDLE = "idle"
    RUNNING = "running"
    STOPPED = "stopped"


class StopReason(enum.StrEnum):
    MATCHED = "matched"
    CANCELLED = "cancelled"


def validate_search_params(lat: Any, lng: Any, radius: Any) -> tuple[float, float, float]:
    """Parse origin and radius, raising :class:`FlexValidationError` if malformed.

    Accepts numbers or numeric strings. Latitude must lie in [-90, 90],
    longitude in [-180, 180] and the radius must be positive.
    """
    parsed_lat = safe_float(lat)
    parsed_lng = safe_float(lng)
    parsed_radius = safe_float(radius)
    if parsed_lat is None or parsed_lng is None or parsed_radius is None:
        raise FlexValidationError(f"Invalid lat, lng, or radius: lat={lat!r} lng={lng!r} radius={radius!r}")
    if not -90.0 <= parsed_lat <= 90.0:
        raise FlexValidationError(f"Latitude out of range: {parsed_lat}")
    if not -180.0 <= parsed_lng <= 180.0:
        raise FlexValidationError(f"Longitude out of range: {parsed_lng}")
    if parsed_radius <= 0:
        raise FlexValidationError(f"Radius must be positive, got {parsed_radius}")
    return parsed_lat, parsed_lng, parsed_radius


@dataclass
class SearchSession:
    """One adaptive search: origin, branch, shrinking radius, run state.

    ``radius`` only ever decreases while the session runs; every accepted
    value is recorded in ``radius_history``.
    """

    city: str
    latitude: float
    longitude: float
    radius: float
    poll_interval: float
    branch_id: int = field(init=False)
    state: SearchState = SearchState.IDLE
    stop_reason: StopReason | None = None
    radius_history: list[float] = field(default_factory=list)
    polls: int = 0
    consecutive_failures: int = 0
    timer: asyncio.TimerHandle | None = field(default=None, repr=False)

    def __post_init__(self) -> None:
        self.city = normalize_city(self.city)
        self.branch_id = branch_id_for(self.city)
        self.latitude, self.longitude, self.radius = validate_search_params(self.latitude, self.longitude, self.radius)
        if self.poll_interval <= 0:
            raise FlexValidationError(f"poll_interval must be positive, got {self.poll_interval}")
        self.radius_history = [self.radius]

    @property
    def running(self) -> bool:
        """The cooperative cancellation flag."""
        return self.state is SearchState.RUNNING

    def start(self) -> None:
        if self.state is not SearchState.IDLE:
            raise RuntimeError(f"Session already {self.state.value}")
        self.state = SearchState.RUNNING

    def narrow(self, radius: float) -> None:
        """Shrink the alert radius. Growing or keeping it is refused."""
        if radius >= self.radius:
            raise ValueError(f"radius may only shrink: {self.radius} -> {radius}")
        self.radius = radius
        self.radius_history.append(radius)

    def finish(self, reason: StopReason) -> None:
        self.state = SearchState.STOPPED
        self.stop_reason = reason
        if self.timer is not None:
            self.timer.cancel()
            self.timer = None
