"""Leaderboard snapshot models.

Mirrors the JSON served by the leaderboard backend. Field names follow the
wire format (``updatedAt``, ``streakData``...) so payloads validate as-is.
Every model is frozen: a fetch produces a new snapshot, never a patch.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, field_validator

GITHUB_URL_PREFIX = "https://github.com/"


def _require_github_url(url: str) -> str:
    if not url.startswith(GITHUB_URL_PREFIX):
        msg = f"expected a URL starting with {GITHUB_URL_PREFIX!r}, got {url!r}"
        raise ValueError(msg)
    return url


class LeaderboardRecord(BaseModel):
    """One contributor row."""

    model_config = ConfigDict(frozen=True)

    login: str
    url: str
    avatar_url: str
    score: int = Field(ge=0, strict=True)
    pr_urls: tuple[str, ...]
    pr_dates: tuple[str, ...]
    streak: int = Field(ge=0, strict=True)

    @field_validator("url")
    @classmethod
    def _profile_on_github(cls, value: str) -> str:
        return _require_github_url(value)

    @field_validator("pr_urls")
    @classmethod
    def _prs_on_github(cls, value: tuple[str, ...]) -> tuple[str, ...]:
        for url in value:
            _require_github_url(url)
        return value

    @property
    def pr_count(self) -> int:
        return len(self.pr_urls)


class StreakRecord(BaseModel):
    """Per-contributor streak summary entry."""

    model_config = ConfigDict(frozen=True)

    login: str
    streak: int = Field(strict=True)


class LeaderboardSnapshot(BaseModel):
    """A full leaderboard as returned by one fetch. Rank is position + 1."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    leaderboard: tuple[LeaderboardRecord, ...]
    success: bool
    updated_at: int = Field(alias="updatedAt", strict=True)
    generated: bool
    updated_timestring: str = Field(alias="updatedTimestring")
    streak_data: tuple[StreakRecord, ...] = Field(alias="streakData")

    @property
    def max_rank(self) -> int:
        return len(self.leaderboard)
