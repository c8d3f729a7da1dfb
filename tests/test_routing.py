from __future__ import annotations

from collections.abc import Mapping
from typing import Any

import pytest

from pyflexnotify._api.routing import build_route_url, fetch_walking_route, parse_route
from pyflexnotify.config import FlexConfig
from pyflexnotify.models.route import WalkingRoute

ORIGIN = (45.5, -73.57)
DESTINATION = (45.51, -73.56)


class _Transport:
    def __init__(self, payload: Any) -> None:
        self._payload = payload
        self.calls: list[tuple[str, dict[str, Any]]] = []

    async def get_json(self, url: str, params: Mapping[str, Any] | None = None) -> Any:
        self.calls.append((url, dict(params or {})))
        return self._payload


def test_url_uses_lng_lat_order() -> None:
    config = FlexConfig(routing_base_url="https://router.example")
    assert build_route_url(config, ORIGIN, DESTINATION) == (
        "https://router.example/route/v1/foot/-73.57,45.5;-73.56,45.51"
    )


def test_parse_best_route() -> None:
    payload = {"code": "Ok", "routes": [{"distance": 1234.5, "duration": 930.0}, {"distance": 1, "duration": 1}]}
    route = parse_route(payload)
    assert route == WalkingRoute(distance=1234.5, duration=930.0)
    assert route.minutes == 16


@pytest.mark.parametrize(
    "payload",
    [
        None,
        {"code": "NoRoute", "routes": []},
        {"routes": "nope"},
        {"routes": [{"distance": 10}]},
        {"routes": [{"distance": -1, "duration": 5}]},
    ],
)
def test_parse_unusable_route(payload: Any) -> None:
    assert parse_route(payload) is None


@pytest.mark.asyncio
async def test_fetch_walking_route() -> None:
    transport = _Transport({"routes": [{"distance": 800.0, "duration": 600.0}]})

    route = await fetch_walking_route(FlexConfig(), transport, ORIGIN, DESTINATION)

    assert route is not None and route.minutes == 10
    url, params = transport.calls[0]
    assert url.endswith("/route/v1/foot/-73.57,45.5;-73.56,45.51")
    assert params == {"overview": "false"}
