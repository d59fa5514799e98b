"""Shared test fixtures."""

from __future__ import annotations

import copy
from collections.abc import Callable
from typing import Any

import pytest

from acwoc.config import Settings

_RECORD_TEMPLATE: dict[str, Any] = {
    "avatar_url": "https://avatars.githubusercontent.com/u/1?v=4",
    "login": "octocat",
    "url": "https://github.com/octocat",
    "score": 100,
    "pr_urls": ["https://github.com/acwoc/site/pull/1"],
    "pr_dates": ["2025-01-02T10:00:00Z"],
    "streak": 1,
}


def make_record(**overrides: Any) -> dict[str, Any]:
    """A single leaderboard row as served by the backend."""
    record = copy.deepcopy(_RECORD_TEMPLATE)
    record.update(overrides)
    return record


def make_payload(records: list[dict[str, Any]] | None = None, **overrides: Any) -> dict[str, Any]:
    """A full leaderboard response body."""
    if records is None:
        records = [
            make_record(login="amaan", url="https://github.com/amaan", score=2705, streak=12),
            make_record(login="Bea", url="https://github.com/Bea", score=1900, streak=3),
            make_record(login="cyd", url="https://github.com/cyd", score=1200, streak=0),
            make_record(login="dev", url="https://github.com/dev", score=50, streak=1),
        ]
    payload: dict[str, Any] = {
        "leaderboard": records,
        "success": True,
        "updatedAt": 1736000000,
        "generated": True,
        "updatedTimestring": "Updated 5 minutes ago",
        "streakData": [{"login": r["login"], "streak": r["streak"]} for r in records],
    }
    payload.update(overrides)
    return payload


@pytest.fixture
def settings() -> Settings:
    """Test settings with defaults and no Discord token."""
    return Settings(
        acwoc_env="development",
        btoken="",
        client_id="",
        prefix="!",
        leaderboard_fetch_url="https://leaderboard.test/api",
        help_readme_url="https://github.com/acwoc/bot#readme",
        admin_ids="111, 222",
        bot_profile_img="https://cdn.test/bot.png",
    )


@pytest.fixture
def leaderboard_payload() -> dict[str, Any]:
    return make_payload()


@pytest.fixture
def record_factory() -> Callable[..., dict[str, Any]]:
    return make_record


@pytest.fixture
def payload_factory() -> Callable[..., dict[str, Any]]:
    return make_payload
