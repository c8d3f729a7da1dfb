"""Shared builders and fakes for the test suite."""

from __future__ import annotations

import asyncio
import math
from collections.abc import Callable

from pyflexnotify.models.vehicle import Vehicle

ORIGIN = (45.5, -73.5)
EARTH_RADIUS_M = 6_371_000.0


def vehicle_at(distance: float, plate: str, *, brand: str = "Toyota", model: str = "Prius C") -> Vehicle:
    """Vehicle placed *distance* metres due north of :data:`ORIGIN`."""
    lat, lng = ORIGIN
    return Vehicle(
        brand=brand,
        model=model,
        plate=plate,
        latitude=lat + math.degrees(distance / EARTH_RADIUS_M),
        longitude=lng,
    )


class ScriptedFeed:
    """Returns one scripted snapshot per call; repeats the last one forever."""

    def __init__(self, *snapshots: list[Vehicle] | Exception) -> None:
        self._snapshots = list(snapshots) or [[]]
        self.calls = 0
        self.branches: list[int] = []

    async def __call__(self, branch_id: int) -> list[Vehicle]:
        self.branches.append(branch_id)
        index = min(self.calls, len(self._snapshots) - 1)
        self.calls += 1
        result = self._snapshots[index]
        if isinstance(result, Exception):
            raise result
        return result


class GatedFeed:
    """Blocks every fetch until the test opens the gate."""

    def __init__(self, result: list[Vehicle] | Exception) -> None:
        self._result = result
        self.entered = asyncio.Event()
        self.gate = asyncio.Event()
        self.calls = 0

    async def __call__(self, branch_id: int) -> list[Vehicle]:
        self.calls += 1
        self.entered.set()
        await self.gate.wait()
        if isinstance(self._result, Exception):
            raise self._result
        return self._result


async def until(predicate: Callable[[], bool], timeout: float = 1.0) -> None:
    """Yield to the event loop until *predicate* holds."""
    async with asyncio.timeout(timeout):
        while not predicate():
            await asyncio.sleep(0.005)
