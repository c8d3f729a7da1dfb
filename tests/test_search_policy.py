from __future__ import annotations

import pytest

from pyflexnotify.models.vehicle import RankedVehicle
from pyflexnotify.search.policy import (
    DecisionKind,
    RadiusLadderPolicy,
    SingleShotPolicy,
    next_ladder_radius,
)

from helpers import vehicle_at


def _ranked(*distances: float) -> list[RankedVehicle]:
    return [
        RankedVehicle(vehicle=vehicle_at(d, f"P{i}"), distance=d)
        for i, d in enumerate(distances)
    ]


class TestNextLadderRadius:
    @pytest.mark.parametrize(
        ("distance", "expected"),
        [
            (12_000, 10_000),
            (3_500, 3_000),
            (3_000, 2_000),
            (2_100, 2_000),
            (250, 200),
            (200, None),
            (50, None),
        ],
    )
    def test_strictly_below(self, distance: float, expected: int | None) -> None:
        assert next_ladder_radius(distance) == expected

    def test_custom_ladder(self) -> None:
        assert next_ladder_radius(75, (100, 50, 10)) == 50


class TestRadiusLadderPolicy:
    def test_empty_alert_set_continues(self) -> None:
        assert RadiusLadderPolicy().decide([], 5000).kind is DecisionKind.CONTINUE

    def test_hit_narrows_below_hit_distance(self) -> None:
        decision = RadiusLadderPolicy().decide(_ranked(3500, 4200), 10_000)
        assert decision.kind is DecisionKind.NARROW
        assert decision.next_radius == 3000
        assert decision.matches[0].distance == 3500

    def test_hit_inside_tightest_step_stops(self) -> None:
        decision = RadiusLadderPolicy().decide(_ranked(150), 200)
        assert decision.kind is DecisionKind.STOP
        assert [m.distance for m in decision.matches] == [150]

    def test_step_not_below_current_radius_stops(self) -> None:
        # Radius between ladder steps: the 2000 step is still below it.
        assert RadiusLadderPolicy().decide(_ranked(2100), 2200).kind is DecisionKind.NARROW
        # A hit whose step would not shrink the radius is final.
        assert RadiusLadderPolicy((100, 50)).decide(_ranked(80), 40).kind is DecisionKind.STOP

    def test_empty_ladder_rejected(self) -> None:
        with pytest.raises(ValueError):
            RadiusLadderPolicy(())


class TestSingleShotPolicy:
    def test_empty_alert_set_continues(self) -> None:
        assert SingleShotPolicy().decide([], 1000).kind is DecisionKind.CONTINUE

    def test_stops_with_top_n(self) -> None:
        decision = SingleShotPolicy(top_n=3).decide(_ranked(10, 20, 30, 40, 50), 1000)
        assert decision.kind is DecisionKind.STOP
        assert [m.distance for m in decision.matches] == [10, 20, 30]
        assert decision.next_radius is None

    def test_fewer_than_top_n(self) -> None:
        decision = SingleShotPolicy(top_n=3).decide(_ranked(10), 1000)
        assert len(decision.matches) == 1

    def test_top_n_must_be_positive(self) -> None:
        with pytest.raises(ValueError):
            SingleShotPolicy(top_n=0)
