"""Notification payloads and the web push transport.

Building the payload is part of the library; delivering it belongs to
whatever :class:`PushSender` the caller hands in. :class:`WebPushSender`
is the production sender backed by ``pywebpush``.
"""

from __future__ import annotations

import asyncio
import json
import logging
import math
from collections.abc import Mapping
from typing import Any, Protocol

from pywebpush import WebPushException, webpush

from pyflexnotify._constants import DESKTOP_ICON, PUSH_ICON
from pyflexnotify.exceptions import PushDeliveryError, PushSubscriptionGoneError
from pyflexnotify.geo import format_distance
from pyflexnotify.models.events import CandidateEvent, MatchEvent
from pyflexnotify.models.notification import NotificationPayload
from pyflexnotify.models.vehicle import RankedVehicle

_logger = logging.getLogger(__name__)

#: Seconds a push service keeps an undelivered message.
PUSH_TTL_SECONDS = 86400


def _metres(vehicle: RankedVehicle) -> int:
    return math.floor(vehicle.distance)


def _match_title(count: int) -> str:
    return f"Communauto Found {count} Cars!" if count > 1 else "Communauto Found!"


def _match_body(vehicles: tuple[RankedVehicle, ...]) -> str:
    top = vehicles[0]
    if len(vehicles) > 1:
        return f"Closest: {top.label} ({_metres(top)}m away)"
    return f"{top.label} is {_metres(top)}m away."


def build_match_notification(match: MatchEvent, *, icon: str = PUSH_ICON) -> NotificationPayload:
    """Payload announcing a final match."""
    return NotificationPayload(
        title=_match_title(len(match.vehicles)),
        body=_match_body(match.vehicles),
        icon=icon,
        url=match.booking_url,
    )


def build_candidate_notification(event: CandidateEvent, *, icon: str = DESKTOP_ICON) -> NotificationPayload:
    """Payload for a narrowing step: the vehicle found plus the tighter radius."""
    body = f"{_match_body((event.vehicle,))} Reducing search radius to {format_distance(event.next_radius)}."
    return NotificationPayload(
        title=_match_title(1),
        body=body,
        icon=icon,
        url=event.booking_url,
    )


class PushSender(Protocol):
    """Hands a payload to a push transport. Raises :class:`PushDeliveryError`."""

    async def send(self, endpoint: Mapping[str, Any], payload: NotificationPayload) -> None:
        ...


class WebPushSender:
    """VAPID-signed web push through ``pywebpush``.

    ``pywebpush`` is blocking, so each delivery runs in a worker thread.
    """

    def __init__(self, vapid_private_key: str, vapid_email: str) -> None:
        if not vapid_private_key:
            raise ValueError("vapid_private_key is required")
        self._vapid_private_key = vapid_private_key
        self._vapid_email = vapid_email if vapid_email.startswith("mailto:") else f"mailto:{vapid_email}"

    async def send(self, endpoint: Mapping[str, Any], payload: NotificationPayload) -> None:
        data = json.dumps(payload.model_dump(), separators=(",", ":"))
        await asyncio.to_thread(self._send_blocking, dict(endpoint), data)

    def _send_blocking(self, subscription_info: dict[str, Any], data: str) -> None:
        try:
            webpush(
                subscription_info=subscription_info,
                data=data,
                vapid_private_key=self._vapid_private_key,
                # pywebpush adds aud/exp to the claims dict it receives.
                vapid_claims={"sub": self._vapid_email},
                ttl=PUSH_TTL_SECONDS,
                headers={"Urgency": "high"},
            )
        except WebPushException as exc:
            response = getattr(exc, "response", None)
            if response is not None and response.status_code in (404, 410):
                raise PushSubscriptionGoneError(str(subscription_info.get("endpoint", ""))) from exc
            raise PushDeliveryError(str(exc)) from exc
        _logger.debug("Push delivered to %s", str(subscription_info.get("endpoint", ""))[:64])
