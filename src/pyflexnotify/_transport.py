"""HTTP transport for the vehicle feed and the foot router."""

from __future__ import annotations

import asyncio
import json
import logging
from collections.abc import Mapping
from typing import Any, Protocol

import aiohttp

from pyflexnotify._constants import USER_AGENT
from pyflexnotify.exceptions import UpstreamError

_logger = logging.getLogger(__name__)


class Transport(Protocol):
    """Structural transport interface used by endpoint modules.

    Having a protocol here makes it easy to pass test doubles while
    keeping the production implementation (`HttpTransport`) concrete.
    """

    async def get_json(self, url: str, params: Mapping[str, Any] | None = None) -> Any:
        ...


class HttpTransport:
    """GET-and-decode JSON over a shared ``aiohttp`` session.

    Every failure mode (network error, timeout, non-200 status, body
    that is not JSON) is raised as :class:`UpstreamError`.
    """

    def __init__(
        self,
        http_session: aiohttp.ClientSession,
        *,
        timeout: float | None = None,
    ) -> None:
        self._http = http_session
        self._timeout = aiohttp.ClientTimeout(total=timeout) if timeout else None

    async def get_json(self, url: str, params: Mapping[str, Any] | None = None) -> Any:
        headers = {
            "accept": "application/json",
            "user-agent": USER_AGENT,
        }
        query = {k: str(v) for k, v in (params or {}).items()}

        _logger.debug("GET %s params=%s", url, query)

        if self._http.closed:
            raise UpstreamError(f"HTTP session closed before request to {url}", endpoint=url)

        try:
            async with self._http.get(url, params=query, headers=headers, timeout=self._timeout) as resp:
                if resp.status != 200:
                    detail = await resp.text(errors="replace")
                    raise UpstreamError(
                        f"HTTP {resp.status} from {url}: {detail[:200]}",
                        status_code=resp.status,
                        endpoint=url,
                    )
                text = await resp.text()
        except UpstreamError:
            raise
        except UnicodeDecodeError as exc:
            raise UpstreamError(f"Undecodable body from {url}: {exc}", endpoint=url) from exc
        except asyncio.TimeoutError as exc:
            raise UpstreamError(f"Request to {url} timed out", endpoint=url) from exc
        except aiohttp.ClientError as exc:
            raise UpstreamError(f"Request to {url} failed: {exc}", endpoint=url) from exc

        try:
            return json.loads(text)
        except json.JSONDecodeError as exc:
            raise UpstreamError(f"Invalid JSON from {url}: {text[:200]}", endpoint=url) from exc
