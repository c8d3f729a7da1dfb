"""Match decision policies.

A policy looks at the alert set of one poll and says whether the session
keeps running at the same radius, narrows, or stops with a final match.
It never touches the session itself.
"""

from __future__ import annotations

import enum
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Protocol

from pyflexnotify._constants import RADIUS_LADDER
from pyflexnotify.models.vehicle import RankedVehicle


class DecisionKind(enum.StrEnum):
    CONTINUE = "continue"
    RETRY = "retry"
    NARROW = "narrow"
    STOP = "stop"


@dataclass(frozen=True)
class Decision:
    """Outcome of one poll's decision step."""

    kind: DecisionKind
    matches: tuple[RankedVehicle, ...] = ()
    next_radius: float | None = None


CONTINUE = Decision(DecisionKind.CONTINUE)


class MatchPolicy(Protocol):
    def decide(self, alert_set: Sequence[RankedVehicle], current_radius: float) -> Decision:
        ...


def next_ladder_radius(distance: float, ladder: Sequence[int] = RADIUS_LADDER) -> int | None:
    """Largest ladder value strictly smaller than *distance*, if any."""
    smaller = [step for step in ladder if step < distance]
    return max(smaller) if smaller else None


class RadiusLadderPolicy:
    """Greedy narrowing toward the closest reachable vehicle.

    Each hit shrinks the alert radius to the next ladder step below the
    hit's distance, so the following poll only accepts something strictly
    closer. A hit already inside the tightest step is final.
    """

    def __init__(self, ladder: Sequence[int] = RADIUS_LADDER) -> None:
        if not ladder:
            raise ValueError("ladder must not be empty")
        self._ladder = tuple(ladder)

    @property
    def ladder(self) -> tuple[int, ...]:
        return self._ladder

    def decide(self, alert_set: Sequence[RankedVehicle], current_radius: float) -> Decision:
        if not alert_set:
            return CONTINUE
        closest = alert_set[0]
        step = next_ladder_radius(closest.distance, self._ladder)
        if step is None or step >= current_radius:
            return Decision(DecisionKind.STOP, matches=(closest,))
        return Decision(DecisionKind.NARROW, matches=(closest,), next_radius=float(step))


class SingleShotPolicy:
    """Stop on the first non-empty alert set, reporting the *top_n* closest."""

    def __init__(self, top_n: int = 3) -> None:
        if top_n < 1:
            raise ValueError(f"top_n must be at least 1, got {top_n}")
        self._top_n = top_n

    @property
    def top_n(self) -> int:
        return self._top_n

    def decide(self, alert_set: Sequence[RankedVehicle], current_radius: float) -> Decision:
        if not alert_set:
            return CONTINUE
        return Decision(DecisionKind.STOP, matches=tuple(alert_set[: self._top_n]))
