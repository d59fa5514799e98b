"""Leaderboard client: fetch, validate, and look up contributors.

``fetch_leaderboard`` never raises. Every failure is folded into a
``LeaderboardResult`` so command handlers only have to format it.
"""

from __future__ import annotations

import dataclasses
import logging
from enum import StrEnum
from typing import Any

from pydantic import ValidationError

from acwoc.core.fetcher import MaxWaitExceeded, WakeCallback, wake_and_fetch
from acwoc.models.leaderboard import LeaderboardRecord, LeaderboardSnapshot

logger = logging.getLogger(__name__)


class FetchFailure(StrEnum):
    """Why a leaderboard fetch produced no snapshot.

    Values are shown to users verbatim inside the error reply.
    """

    PARSE_ERROR = "PARSE_ERROR"
    WAKE_TIMEOUT = "WAKE_TIMEOUT_ASSUMPTION"


@dataclasses.dataclass(frozen=True)
class LeaderboardResult:
    """Tagged outcome of ``fetch_leaderboard``.

    Exactly one of ``snapshot`` / ``reason`` is set, matching ``ok``.
    """

    ok: bool
    snapshot: LeaderboardSnapshot | None = None
    reason: FetchFailure | None = None

    @classmethod
    def success(cls, snapshot: LeaderboardSnapshot) -> LeaderboardResult:
        return cls(ok=True, snapshot=snapshot)

    @classmethod
    def failure(cls, reason: FetchFailure) -> LeaderboardResult:
        return cls(ok=False, reason=reason)


def parse_snapshot(payload: Any) -> LeaderboardSnapshot:
    """Validate a decoded JSON body. Raises pydantic.ValidationError on mismatch."""
    return LeaderboardSnapshot.model_validate(payload)


async def fetch_leaderboard(
    url: str,
    on_waking: WakeCallback | None = None,
    **fetch_kwargs: Any,
) -> LeaderboardResult:
    """Fetch and validate the current leaderboard.

    Extra keyword arguments (``request_timeout``, ``retry_delay``,
    ``max_wait``, ``client``) are forwarded to ``wake_and_fetch``.
    """
    try:
        payload = await wake_and_fetch(url, on_waking, **fetch_kwargs)
    except MaxWaitExceeded:
        logger.warning("leaderboard_fetch_timeout url=%s", url)
        return LeaderboardResult.failure(FetchFailure.WAKE_TIMEOUT)
    except ValueError:
        # Backend answered 2xx with a body that is not JSON.
        logger.exception("leaderboard_fetch_bad_body url=%s", url)
        return LeaderboardResult.failure(FetchFailure.PARSE_ERROR)
    except Exception:  # Last-resort handler — non-transient httpx and callback errors
        logger.exception("leaderboard_fetch_failed url=%s", url)
        return LeaderboardResult.failure(FetchFailure.WAKE_TIMEOUT)

    try:
        snapshot = parse_snapshot(payload)
    except ValidationError as exc:
        logger.warning("leaderboard_parse_error errors=%d detail=%s", exc.error_count(), exc)
        return LeaderboardResult.failure(FetchFailure.PARSE_ERROR)

    logger.info("leaderboard_fetched records=%d", snapshot.max_rank)
    return LeaderboardResult.success(snapshot)


def find_contributor(
    snapshot: LeaderboardSnapshot, login: str
) -> tuple[int, LeaderboardRecord] | None:
    """Case-insensitive login lookup. Returns (1-based rank, record) or None."""
    wanted = login.lower()
    for rank, record in enumerate(snapshot.leaderboard, 1):
        if record.login.lower() == wanted:
            return rank, record
    return None


def record_at(snapshot: LeaderboardSnapshot, rank: int) -> LeaderboardRecord | None:
    """Record at a 1-based rank, or None when the rank is out of range."""
    if 1 <= rank <= snapshot.max_rank:
        return snapshot.leaderboard[rank - 1]
    return None
