"""Background subscriptions: one single-shot search per push endpoint.

Every subscription owns an independent :class:`SearchLoop`. On the first
non-empty alert set the registry hands a notification to the push sender
and retires the subscription, whether or not delivery succeeded, so a
subscription notifies at most once.

Known limitation: subscriptions live in memory only and are lost when
the process exits.
"""

from __future__ import annotations

import asyncio
import logging
import time
import uuid
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any

from pyflexnotify._redact import redact_for_log
from pyflexnotify.cities import normalize_city
from pyflexnotify.config import FlexConfig
from pyflexnotify.exceptions import PushDeliveryError, PushSubscriptionGoneError
from pyflexnotify.models.events import MatchEvent
from pyflexnotify.notifications import PushSender, build_match_notification
from pyflexnotify.search.loop import FetchVehicles, SearchLoop
from pyflexnotify.search.policy import SingleShotPolicy
from pyflexnotify.search.session import SearchSession, validate_search_params

_logger = logging.getLogger(__name__)


def _new_id() -> str:
    return str(uuid.uuid4())


@dataclass(slots=True)
class Subscription:
    """A registered background search.

    ``endpoint`` is the caller's delivery descriptor, passed to the push
    sender untouched.
    """

    id: str
    endpoint: Any
    loop: SearchLoop
    created_at: float = field(default_factory=time.monotonic)

    @property
    def session(self) -> SearchSession:
        return self.loop.session


class SubscriptionRegistry:
    """Registry of active background subscriptions keyed by identifier.

    Add, remove and lookup are serialized through one ``asyncio.Lock`` so
    they are safe to interleave with any running search.
    """

    def __init__(
        self,
        fetch_vehicles: FetchVehicles,
        sender: PushSender,
        *,
        config: FlexConfig | None = None,
        id_factory: Callable[[], str] = _new_id,
    ) -> None:
        self._fetch = fetch_vehicles
        self._sender = sender
        self._config = config or FlexConfig()
        self._id_factory = id_factory
        self._subscriptions: dict[str, Subscription] = {}
        self._lock = asyncio.Lock()
        self._delivered = 0

    async def register(self, endpoint: Any, city: str, lat: Any, lng: Any, radius: Any) -> str:
        """Start a background search and return its identifier.

        Raises
        ------
        FlexValidationError
            If lat/lng/radius are not well-formed numbers or the city is
            unknown. No subscription is created in that case.
        """
        parsed_lat, parsed_lng, parsed_radius = validate_search_params(lat, lng, radius)
        city_key = normalize_city(city)

        subscription_id = self._id_factory()
        session = SearchSession(
            city=city_key,
            latitude=parsed_lat,
            longitude=parsed_lng,
            radius=parsed_radius,
            poll_interval=self._config.poll_interval,
        )

        async def _on_match(match: MatchEvent) -> None:
            await self._deliver(subscription_id, match)

        loop = SearchLoop(
            session,
            self._fetch,
            policy=SingleShotPolicy(self._config.top_n),
            observation_buffer=self._config.observation_buffer,
            on_match=_on_match,
        )

        async with self._lock:
            self._subscriptions[subscription_id] = Subscription(id=subscription_id, endpoint=endpoint, loop=loop)
        loop.start()

        _logger.info("New subscription %s (%s, radius %.0fm)", subscription_id, city_key, parsed_radius)
        _logger.debug("Subscription %s endpoint=%s", subscription_id, redact_for_log(endpoint))
        return subscription_id

    async def cancel(self, subscription_id: str) -> None:
        """Stop and forget a subscription. Unknown ids are a no-op."""
        async with self._lock:
            subscription = self._subscriptions.pop(subscription_id, None)
        if subscription is None:
            return
        subscription.loop.stop()
        _logger.info("Removed subscription %s", subscription_id)

    def count(self) -> int:
        """Number of active (undelivered, uncancelled) subscriptions."""
        return len(self._subscriptions)

    @property
    def delivered(self) -> int:
        """Notifications handed to the sender since startup."""
        return self._delivered

    def get(self, subscription_id: str) -> Subscription | None:
        return self._subscriptions.get(subscription_id)

    async def close(self) -> None:
        """Cancel every active subscription."""
        async with self._lock:
            subscriptions = list(self._subscriptions.values())
            self._subscriptions.clear()
        for subscription in subscriptions:
            subscription.loop.stop()
        if subscriptions:
            _logger.info("Cancelled %d subscriptions on close", len(subscriptions))

    async def _deliver(self, subscription_id: str, match: MatchEvent) -> None:
        # Popped before sending: at most one delivery per subscription.
        async with self._lock:
            subscription = self._subscriptions.pop(subscription_id, None)
        if subscription is None:
            return

        payload = build_match_notification(match)
        self._delivered += 1
        try:
            await self._sender.send(subscription.endpoint, payload)
        except PushSubscriptionGoneError:
            _logger.warning("Push endpoint for subscription %s is gone; dropping it", subscription_id)
        except PushDeliveryError as exc:
            _logger.warning("Push delivery failed for subscription %s: %s", subscription_id, exc)
        else:
            _logger.info("Sent notification to subscription %s", subscription_id)
        _logger.info("Removed subscription %s", subscription_id)
