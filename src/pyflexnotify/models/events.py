"""Immutable values emitted by a search session.

Rendering and notification collaborators consume these; nothing they do
flows back into the loop's decisions.
"""

from __future__ import annotations

from datetime import UTC, datetime

from pydantic import BaseModel, ConfigDict, Field

from pyflexnotify.models.vehicle import RankedVehicle


def _utcnow() -> datetime:
    return datetime.now(UTC)


class DisplaySet(BaseModel):
    """Vehicles inside the observation radius, closest first."""

    model_config = ConfigDict(frozen=True)

    city: str
    alert_radius: float
    observation_radius: float
    vehicles: tuple[RankedVehicle, ...] = ()
    total: int = Field(default=0, description="Vehicles in the raw snapshot")
    observed_at: datetime = Field(default_factory=_utcnow)


class CandidateEvent(BaseModel):
    """A vehicle found inside the alert radius that narrowed the search."""

    model_config = ConfigDict(frozen=True)

    city: str
    vehicle: RankedVehicle
    previous_radius: float
    next_radius: float
    booking_url: str
    observed_at: datetime = Field(default_factory=_utcnow)


class MatchEvent(BaseModel):
    """Terminal match: the session stops after emitting it."""

    model_config = ConfigDict(frozen=True)

    city: str
    vehicles: tuple[RankedVehicle, ...]
    radius: float
    booking_url: str
    observed_at: datetime = Field(default_factory=_utcnow)

    @property
    def closest(self) -> RankedVehicle:
        return self.vehicles[0]


class StatusUpdate(BaseModel):
    """Advisory human-readable status. Not used by any decision."""

    model_config = ConfigDict(frozen=True)

    text: str
    retrying: bool = False
    observed_at: datetime = Field(default_factory=_utcnow)
