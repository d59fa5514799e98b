"""Opportunistic keep-alive pings for the sleeping leaderboard backend.

Every hit on the health endpoint is a chance to nudge the backend awake so
the next leaderboard command does not pay the cold-start cost. Pings are
throttled to one per window and their outcome is only logged.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Callable

import httpx

logger = logging.getLogger(__name__)

DEFAULT_PING_INTERVAL = 15 * 60
PING_TIMEOUT = httpx.Timeout(10.0, connect=3.0)


class KeepAlive:
    """Throttled fire-and-forget GET against one URL."""

    def __init__(
        self,
        url: str,
        interval: float = DEFAULT_PING_INTERVAL,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.url = url
        self.interval = interval
        self._clock = clock
        self._last_ping: float | None = None

    def claim(self) -> bool:
        """Reserve the current window. True at most once per ``interval``."""
        if not self.url:
            return False
        now = self._clock()
        if self._last_ping is not None and now - self._last_ping < self.interval:
            return False
        self._last_ping = now
        return True

    async def ping(self, client: httpx.AsyncClient | None = None) -> None:
        """GET the URL once. Failures are expected while the backend boots."""
        try:
            if client is None:
                async with httpx.AsyncClient(timeout=PING_TIMEOUT) as own_client:
                    resp = await own_client.get(self.url)
            else:
                resp = await client.get(self.url, timeout=PING_TIMEOUT)
            logger.info("keepalive_ping url=%s status=%d", self.url, resp.status_code)
        except httpx.HTTPError as exc:
            logger.info("keepalive_ping_failed url=%s err=%s", self.url, exc)
