"""Retrying HTTP fetch for a backend that may be asleep.

The leaderboard backend runs on a host that spins down when idle, so the
first requests after a quiet period time out or return 5xx while it boots.
``wake_and_fetch`` keeps polling until the backend answers or the overall
budget runs out, and fires a one-shot callback on the first failure so the
caller can tell the user the reply will be slow.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable
from typing import Any

import httpx

logger = logging.getLogger(__name__)

DEFAULT_REQUEST_TIMEOUT = 5.0
DEFAULT_RETRY_DELAY = 0.5
DEFAULT_MAX_WAIT = 60.0

WakeCallback = Callable[[], Awaitable[None]]

# Failures that mean "not up yet": timeouts, refused/reset connections and
# non-2xx responses. Anything else is a bug on our side and is not retried.
# TimeoutError is the per-attempt deadline; the overall budget is told apart
# from it in _poll_with_budget.
TRANSIENT_ERRORS: tuple[type[Exception], ...] = (
    httpx.TransportError,
    httpx.HTTPStatusError,
    TimeoutError,
)


class MaxWaitExceeded(TimeoutError):
    """Raised when the backend did not answer successfully within the wait budget."""

    def __init__(self, url: str, max_wait: float) -> None:
        super().__init__(f"MAX_WAIT_EXCEEDED: {url} did not respond within {max_wait:g}s")
        self.url = url
        self.max_wait = max_wait


async def wake_and_fetch(
    url: str,
    on_waking: WakeCallback | None = None,
    request_timeout: float = DEFAULT_REQUEST_TIMEOUT,
    retry_delay: float = DEFAULT_RETRY_DELAY,
    max_wait: float = DEFAULT_MAX_WAIT,
    client: httpx.AsyncClient | None = None,
) -> Any:
    """GET ``url`` until it succeeds and return the decoded JSON body.

    Args:
        url: Endpoint to poll.
        on_waking: Awaited once, on the first failed attempt of this call.
        request_timeout: Per-attempt deadline in seconds, covering connect,
            headers and body together.
        retry_delay: Pause between attempts in seconds.
        max_wait: Overall budget in seconds. Checked continuously, so an
            attempt still in flight when the budget runs out is abandoned.
        client: Optional client to reuse. When omitted a client is created
            for this call and closed afterwards.

    Raises:
        MaxWaitExceeded: the budget ran out before a successful response.
        Exception: any non-transient error (including a success response
            whose body is not JSON) propagates on the first occurrence.
    """
    if client is None:
        async with httpx.AsyncClient() as own_client:
            return await _poll_with_budget(
                own_client, url, on_waking, request_timeout, retry_delay, max_wait
            )
    return await _poll_with_budget(client, url, on_waking, request_timeout, retry_delay, max_wait)


async def _poll_with_budget(
    client: httpx.AsyncClient,
    url: str,
    on_waking: WakeCallback | None,
    request_timeout: float,
    retry_delay: float,
    max_wait: float,
) -> Any:
    budget = asyncio.timeout(max_wait)
    try:
        async with budget:
            return await _poll(client, url, on_waking, request_timeout, retry_delay)
    except TimeoutError as exc:
        if not budget.expired():
            raise
        logger.warning("wake_and_fetch_gave_up url=%s max_wait=%s", url, max_wait)
        raise MaxWaitExceeded(url, max_wait) from exc


async def _poll(
    client: httpx.AsyncClient,
    url: str,
    on_waking: WakeCallback | None,
    request_timeout: float,
    retry_delay: float,
) -> Any:
    woken = False
    attempt = 0
    while True:
        attempt += 1
        try:
            # httpx timeouts apply per phase, so a slow-dripping body needs an
            # outer deadline on the whole attempt.
            async with asyncio.timeout(request_timeout):
                resp = await client.get(url, timeout=request_timeout)
                resp.raise_for_status()
        except TRANSIENT_ERRORS as exc:
            logger.info("wake_and_fetch_attempt_failed url=%s attempt=%d err=%s", url, attempt, exc)
            if not woken:
                woken = True
                if on_waking is not None:
                    await on_waking()
        else:
            if attempt > 1:
                logger.info("wake_and_fetch_recovered url=%s attempts=%d", url, attempt)
            return resp.json()

        await asyncio.sleep(retry_delay)
