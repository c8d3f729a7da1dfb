"""High-level async client for vehicle availability searches."""

from __future__ import annotations

import logging
from typing import Any

import aiohttp

from pyflexnotify._api import routing as _routing_api
from pyflexnotify._api.vehicles import fetch_available_vehicles
from pyflexnotify._transport import HttpTransport, Transport
from pyflexnotify.cities import branch_id_for
from pyflexnotify.config import FlexConfig
from pyflexnotify.exceptions import FlexConfigError, FlexNotifyError, UpstreamError
from pyflexnotify.models.route import WalkingRoute
from pyflexnotify.models.vehicle import Vehicle
from pyflexnotify.notifications import PushSender, WebPushSender
from pyflexnotify.registry import SubscriptionRegistry
from pyflexnotify.search.loop import Listener, SearchLoop
from pyflexnotify.search.policy import MatchPolicy
from pyflexnotify.search.session import SearchSession

_logger = logging.getLogger(__name__)


class FlexClient:
    """Async client for the vehicle availability feed.

    Usage::

        async with FlexClient(config) as client:
            vehicles = await client.get_vehicles("montreal")
            search = client.search("montreal", 45.5, -73.57, 1500, on_match=print)
            await search.wait()
    """

    def __init__(
        self,
        config: FlexConfig | None = None,
        *,
        session: aiohttp.ClientSession | None = None,
        transport: Transport | None = None,
    ) -> None:
        self._config = config or FlexConfig()
        self._external_session = session is not None
        self._http_session = session
        self._transport: Transport | None = transport
        self._external_transport = transport is not None
        self._searches: list[SearchLoop] = []
        self._registries: list[SubscriptionRegistry] = []

    @property
    def config(self) -> FlexConfig:
        return self._config

    # ------------------------------------------------------------------
    # Context manager lifecycle
    # ------------------------------------------------------------------

    async def __aenter__(self) -> FlexClient:
        if self._transport is None:
            if self._http_session is None:
                self._http_session = aiohttp.ClientSession()
            self._transport = HttpTransport(self._http_session, timeout=self._config.request_timeout)
        return self

    async def __aexit__(self, *exc: Any) -> None:
        for search in self._searches:
            search.stop()
        self._searches.clear()
        for registry in self._registries:
            await registry.close()
        self._registries.clear()
        if not self._external_session and self._http_session is not None:
            await self._http_session.close()
            self._http_session = None
        if not self._external_transport:
            self._transport = None

    def _require_transport(self) -> Transport:
        if self._transport is None:
            raise FlexNotifyError("Client not initialized. Use 'async with FlexClient(...) as client:'")
        return self._transport

    # ------------------------------------------------------------------
    # Feed
    # ------------------------------------------------------------------

    async def get_vehicles(self, city: str) -> list[Vehicle]:
        """Vehicles currently available in *city*, in feed order."""
        return await self.get_vehicles_by_branch(branch_id_for(city))

    async def get_vehicles_by_branch(self, branch_id: int) -> list[Vehicle]:
        return await fetch_available_vehicles(self._config, self._require_transport(), branch_id)

    async def get_walking_route(
        self,
        origin: tuple[float, float],
        destination: tuple[float, float],
    ) -> WalkingRoute | None:
        """Walking distance/duration between two ``(lat, lng)`` points.

        Returns ``None`` when the router is unreachable or has no route.
        """
        try:
            return await _routing_api.fetch_walking_route(self._config, self._require_transport(), origin, destination)
        except UpstreamError:
            _logger.debug("Walking route lookup failed", exc_info=True)
            return None

    # ------------------------------------------------------------------
    # Searches
    # ------------------------------------------------------------------

    def search(
        self,
        city: str,
        lat: float,
        lng: float,
        radius: float,
        *,
        poll_interval: float | None = None,
        policy: MatchPolicy | None = None,
        on_display: Listener | None = None,
        on_candidate: Listener | None = None,
        on_match: Listener | None = None,
        on_clear: Listener | None = None,
        on_status: Listener | None = None,
    ) -> SearchLoop:
        """Create and start an interactive search.

        The default policy narrows the radius along the radius ladder.
        The returned loop is stopped when the client closes.
        """
        self._require_transport()
        session = SearchSession(
            city=city,
            latitude=lat,
            longitude=lng,
            radius=radius,
            poll_interval=poll_interval if poll_interval is not None else self._config.poll_interval,
        )
        search = SearchLoop(
            session,
            self.get_vehicles_by_branch,
            policy=policy,
            observation_buffer=self._config.observation_buffer,
            on_display=on_display,
            on_candidate=on_candidate,
            on_match=on_match,
            on_clear=on_clear,
            on_status=on_status,
        )
        self._searches = [s for s in self._searches if s.session.running]
        self._searches.append(search)
        search.start()
        return search

    def create_registry(self, sender: PushSender | None = None) -> SubscriptionRegistry:
        """Build a subscription registry bound to this client's feed.

        Without an explicit *sender*, a :class:`WebPushSender` is built
        from the VAPID configuration. Its subscriptions are cancelled
        when the client closes.

        Raises
        ------
        FlexConfigError
            If no sender is given and VAPID keys are not configured.
        """
        self._require_transport()
        if sender is None:
            if not self._config.push_enabled or self._config.vapid_private_key is None:
                raise FlexConfigError("VAPID keys not set; background push notifications disabled")
            sender = WebPushSender(self._config.vapid_private_key, self._config.vapid_email)
        registry = SubscriptionRegistry(self.get_vehicles_by_branch, sender, config=self._config)
        self._registries.append(registry)
        return registry
