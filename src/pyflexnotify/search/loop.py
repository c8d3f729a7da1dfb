"""Adaptive proximity search loop.

Each iteration is fetch -> rank -> decide -> arm the next timer. The
running flag is checked before the fetch and again when it resolves, so
a response that lands after ``stop()`` is discarded without touching the
session. Fetch failures are always retried at the fixed poll interval.
"""

from __future__ import annotations

import asyncio
import inspect
import logging
from collections.abc import Awaitable, Callable
from typing import Any

from pyflexnotify.cities import booking_url
from pyflexnotify.exceptions import UpstreamError
from pyflexnotify.models.events import CandidateEvent, DisplaySet, MatchEvent, StatusUpdate
from pyflexnotify.models.vehicle import Vehicle
from pyflexnotify.ranking import rank, summarize
from pyflexnotify.search.policy import Decision, DecisionKind, MatchPolicy, RadiusLadderPolicy
from pyflexnotify.search.session import SearchSession, StopReason

_logger = logging.getLogger(__name__)

FetchVehicles = Callable[[int], Awaitable[list[Vehicle]]]
Listener = Callable[..., Any]

RETRY = Decision(DecisionKind.RETRY)


class SearchLoop:
    """Drives one :class:`SearchSession` until a final match or ``stop()``.

    Usage::

        loop = SearchLoop(session, fetch_vehicles, on_match=show)
        loop.start()
        await loop.wait()

    Listeners may be plain callables or coroutine functions. They receive
    immutable event values and cannot influence decisions; a listener that
    raises is logged and ignored.
    """

    def __init__(
        self,
        session: SearchSession,
        fetch_vehicles: FetchVehicles,
        *,
        policy: MatchPolicy | None = None,
        observation_buffer: float = 200.0,
        on_display: Listener | None = None,
        on_candidate: Listener | None = None,
        on_match: Listener | None = None,
        on_clear: Listener | None = None,
        on_status: Listener | None = None,
    ) -> None:
        self._session = session
        self._fetch = fetch_vehicles
        self._policy: MatchPolicy = policy if policy is not None else RadiusLadderPolicy()
        self._observation_buffer = observation_buffer
        self._on_display = on_display
        self._on_candidate = on_candidate
        self._on_match = on_match
        self._on_clear = on_clear
        self._on_status = on_status
        self._loop: asyncio.AbstractEventLoop | None = None
        self._task: asyncio.Task[None] | None = None
        self._in_flight = False
        self._finished = asyncio.Event()
        self._last_match: MatchEvent | None = None

    @property
    def session(self) -> SearchSession:
        return self._session

    @property
    def policy(self) -> MatchPolicy:
        return self._policy

    @property
    def last_match(self) -> MatchEvent | None:
        """The terminal match, once the session stopped on one."""
        return self._last_match

    @property
    def in_flight(self) -> bool:
        """Whether a fetch is currently awaited."""
        return self._in_flight

    # ------------------------------------------------------------------
    # Scheduling
    # ------------------------------------------------------------------

    def start(self) -> None:
        """Mark the session running and arm the first iteration immediately."""
        self._loop = asyncio.get_running_loop()
        self._session.start()
        _logger.debug(
            "Search started city=%s radius=%.0f interval=%.1fs",
            self._session.city,
            self._session.radius,
            self._session.poll_interval,
        )
        self._arm(0.0)

    def stop(self) -> None:
        """Cooperative cancellation.

        Clears the pending timer. A fetch already in flight completes and
        its result is dropped.
        """
        session = self._session
        if session.stop_reason is not None:
            return
        session.finish(StopReason.CANCELLED)
        self._finished.set()
        _logger.debug("Search cancelled city=%s polls=%d", session.city, session.polls)

    async def wait(self) -> SearchSession:
        """Block until the session reaches its terminal state."""
        await self._finished.wait()
        return self._session

    def _arm(self, delay: float) -> None:
        session = self._session
        if session.timer is not None:
            raise RuntimeError("Search loop already has pending work")
        loop = self._loop or asyncio.get_running_loop()
        session.timer = loop.call_later(delay, self._fire)

    def _fire(self) -> None:
        self._session.timer = None
        if not self._session.running:
            return
        loop = self._loop or asyncio.get_running_loop()
        self._task = loop.create_task(self._iterate())

    async def _iterate(self) -> None:
        try:
            await self.run_once()
        except Exception:
            _logger.exception("Search iteration failed unexpectedly city=%s", self._session.city)
        finally:
            self._task = None
        if self._session.running:
            self._arm(self._session.poll_interval)

    # ------------------------------------------------------------------
    # One iteration
    # ------------------------------------------------------------------

    async def run_once(self) -> Decision | None:
        """Run exactly one fetch/rank/decide step.

        Returns
        -------
        Decision or None
            ``None`` when the session was not running at either
            cancellation check; ``RETRY`` after an upstream failure.
        """
        session = self._session
        if not session.running:
            return None
        if self._in_flight:
            raise RuntimeError("Search iteration already in flight")

        session.polls += 1
        await self._emit(self._on_status, StatusUpdate(text=f"Fetching cars for {session.city}..."))

        self._in_flight = True
        try:
            vehicles = await self._fetch(session.branch_id)
        except Exception as exc:
            if not session.running:
                return None
            session.consecutive_failures += 1
            # Non-upstream errors keep their traceback.
            _logger.warning(
                "Poll %d for %s failed (%s); retrying in %.1fs",
                session.polls,
                session.city,
                exc,
                session.poll_interval,
                exc_info=not isinstance(exc, UpstreamError),
            )
            await self._emit(self._on_status, StatusUpdate(text="Error fetching cars. Retrying...", retrying=True))
            return RETRY
        finally:
            self._in_flight = False

        if not session.running:
            _logger.debug("Discarding stale snapshot for cancelled search city=%s", session.city)
            return None
        session.consecutive_failures = 0

        radius = session.radius
        observation_radius = radius + self._observation_buffer
        alert_set = rank(vehicles, session.latitude, session.longitude, radius)
        display_set = rank(vehicles, session.latitude, session.longitude, observation_radius)
        decision = self._policy.decide(alert_set, radius)

        # Apply the decision before any listener gets a chance to suspend.
        if decision.kind is DecisionKind.NARROW and decision.next_radius is not None:
            session.narrow(decision.next_radius)
        elif decision.kind is DecisionKind.STOP:
            session.finish(StopReason.MATCHED)

        await self._emit(
            self._on_display,
            DisplaySet(
                city=session.city,
                alert_radius=radius,
                observation_radius=observation_radius,
                vehicles=tuple(display_set),
                total=len(vehicles),
            ),
        )
        await self._emit(
            self._on_status,
            StatusUpdate(text=summarize(len(vehicles), len(alert_set), radius, len(display_set))),
        )

        if decision.kind is DecisionKind.CONTINUE:
            await self._emit(self._on_clear)
        elif decision.kind is DecisionKind.NARROW:
            closest = decision.matches[0]
            _logger.info(
                "Search %s: %s at %.0fm, narrowing radius %.0f -> %.0f",
                session.city,
                closest.plate,
                closest.distance,
                radius,
                session.radius,
            )
            await self._emit(
                self._on_candidate,
                CandidateEvent(
                    city=session.city,
                    vehicle=closest,
                    previous_radius=radius,
                    next_radius=session.radius,
                    booking_url=booking_url(session.city),
                ),
            )
        elif decision.kind is DecisionKind.STOP:
            match = MatchEvent(
                city=session.city,
                vehicles=decision.matches,
                radius=radius,
                booking_url=booking_url(session.city),
            )
            self._last_match = match
            _logger.info(
                "Search %s: final match %s at %.0fm after %d polls",
                session.city,
                match.closest.plate,
                match.closest.distance,
                session.polls,
            )
            try:
                await self._emit(self._on_match, match)
            finally:
                self._finished.set()

        return decision

    async def _emit(self, listener: Listener | None, *args: Any) -> None:
        if listener is None:
            return
        try:
            result = listener(*args)
            if inspect.isawaitable(result):
                await result
        except Exception:
            _logger.warning("Search listener %r failed", listener, exc_info=True)
