from __future__ import annotations

import json
from types import SimpleNamespace
from typing import Any

import pytest
from pywebpush import WebPushException

from pyflexnotify import notifications
from pyflexnotify._constants import DESKTOP_ICON, PUSH_ICON
from pyflexnotify.exceptions import PushDeliveryError, PushSubscriptionGoneError
from pyflexnotify.models.events import CandidateEvent, MatchEvent
from pyflexnotify.models.notification import NotificationPayload
from pyflexnotify.models.vehicle import RankedVehicle
from pyflexnotify.notifications import (
    PUSH_TTL_SECONDS,
    WebPushSender,
    build_candidate_notification,
    build_match_notification,
)

from helpers import vehicle_at

BOOKING = "https://quebec.client.reservauto.net/bookCar"
SUBSCRIPTION = {"endpoint": "https://push.example/send/abc", "keys": {"p256dh": "P", "auth": "A"}}
PAYLOAD = NotificationPayload(title="Communauto Found!", body="Toyota Prius C is 56m away.", icon=PUSH_ICON, url=BOOKING)


def _ranked(distance: float, plate: str = "P", **kwargs: str) -> RankedVehicle:
    return RankedVehicle(vehicle=vehicle_at(distance, plate, **kwargs), distance=distance)


class TestBuilders:
    def test_single_match_floors_distance(self) -> None:
        match = MatchEvent(city="montreal", vehicles=(_ranked(56.9),), radius=1000, booking_url=BOOKING)
        assert build_match_notification(match) == PAYLOAD

    def test_multi_match_names_the_closest(self) -> None:
        match = MatchEvent(
            city="montreal",
            vehicles=(_ranked(120.2, brand="Hyundai", model="Kona"), _ranked(300.0), _ranked(450.0)),
            radius=1000,
            booking_url=BOOKING,
        )
        payload = build_match_notification(match)
        assert payload.title == "Communauto Found 3 Cars!"
        assert payload.body == "Closest: Hyundai Kona (120m away)"

    def test_candidate_mentions_next_radius(self) -> None:
        event = CandidateEvent(
            city="montreal",
            vehicle=_ranked(3500.2),
            previous_radius=10_000,
            next_radius=3000,
            booking_url=BOOKING,
        )
        payload = build_candidate_notification(event)
        assert payload.title == "Communauto Found!"
        assert payload.body == "Toyota Prius C is 3500m away. Reducing search radius to 3.0km."
        assert payload.icon == DESKTOP_ICON

    def test_custom_icon(self) -> None:
        match = MatchEvent(city="montreal", vehicles=(_ranked(10),), radius=500, booking_url=BOOKING)
        assert build_match_notification(match, icon="icon.png").icon == "icon.png"


class TestWebPushSender:
    @pytest.fixture
    def calls(self, monkeypatch: pytest.MonkeyPatch) -> list[dict[str, Any]]:
        recorded: list[dict[str, Any]] = []

        def fake_webpush(**kwargs: Any) -> None:
            recorded.append(kwargs)

        monkeypatch.setattr(notifications, "webpush", fake_webpush)
        return recorded

    def _failing(self, monkeypatch: pytest.MonkeyPatch, response: Any) -> None:
        def fake_webpush(**_kwargs: Any) -> None:
            raise WebPushException("Push failed", response=response)

        monkeypatch.setattr(notifications, "webpush", fake_webpush)

    @pytest.mark.asyncio
    async def test_sends_signed_json_payload(self, calls: list[dict[str, Any]]) -> None:
        sender = WebPushSender("PRIVATE", "ops@example.com")

        await sender.send(SUBSCRIPTION, PAYLOAD)

        (call,) = calls
        assert call["subscription_info"] == SUBSCRIPTION
        assert json.loads(call["data"]) == {
            "title": "Communauto Found!",
            "body": "Toyota Prius C is 56m away.",
            "icon": PUSH_ICON,
            "url": BOOKING,
        }
        assert call["vapid_private_key"] == "PRIVATE"
        assert call["vapid_claims"] == {"sub": "mailto:ops@example.com"}
        assert call["ttl"] == PUSH_TTL_SECONDS
        assert call["headers"] == {"Urgency": "high"}

    @pytest.mark.asyncio
    async def test_keeps_existing_mailto_prefix(self, calls: list[dict[str, Any]]) -> None:
        await WebPushSender("PRIVATE", "mailto:ops@example.com").send(SUBSCRIPTION, PAYLOAD)
        assert calls[0]["vapid_claims"] == {"sub": "mailto:ops@example.com"}

    @pytest.mark.asyncio
    @pytest.mark.parametrize("status_code", [404, 410])
    async def test_expired_endpoint(self, monkeypatch: pytest.MonkeyPatch, status_code: int) -> None:
        self._failing(monkeypatch, SimpleNamespace(status_code=status_code))
        with pytest.raises(PushSubscriptionGoneError):
            await WebPushSender("PRIVATE", "ops@example.com").send(SUBSCRIPTION, PAYLOAD)

    @pytest.mark.asyncio
    @pytest.mark.parametrize("response", [SimpleNamespace(status_code=500), None])
    async def test_other_failures(self, monkeypatch: pytest.MonkeyPatch, response: Any) -> None:
        self._failing(monkeypatch, response)
        with pytest.raises(PushDeliveryError) as exc_info:
            await WebPushSender("PRIVATE", "ops@example.com").send(SUBSCRIPTION, PAYLOAD)
        assert not isinstance(exc_info.value, PushSubscriptionGoneError)

    def test_private_key_required(self) -> None:
        with pytest.raises(ValueError):
            WebPushSender("", "ops@example.com")
