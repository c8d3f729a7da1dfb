"""Walking route summary."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class WalkingRoute(BaseModel):
    """Distance/duration pair returned by the foot router.

    Parameters
    ----------
    distance : float
        Walking distance in metres.
    duration : float
        Walking time in seconds.
    """

    model_config = ConfigDict(frozen=True)

    distance: float = Field(ge=0)
    duration: float = Field(ge=0)

    @property
    def minutes(self) -> int:
        return round(self.duration / 60)
