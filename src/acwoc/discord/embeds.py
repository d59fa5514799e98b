"""Rich Discord embed builders for the AcWoC leaderboard.

Each builder takes leaderboard data and returns a styled embed ready to
send. ``avatar_url`` is the bot's profile image, used for the author icon
and the thumbnail.
"""

from __future__ import annotations

from collections.abc import Sequence

import discord

from acwoc.config import EVENT_SITE_URL
from acwoc.core.text import plural, rank_medal
from acwoc.models.leaderboard import LeaderboardRecord

COLOR_LEADERBOARD = 0x6DA3AD

AUTHOR_NAME = "AcWoC"

AVATAR_SIZE = 128


def _spacer(embed: discord.Embed) -> None:
    """Blank full-width field that forces the next inline fields onto a new row."""
    embed.add_field(name="\u200b", value="\u200b", inline=False)


def build_basic_embed(footer_text: str, avatar_url: str = "") -> discord.Embed:
    """Branded empty embed shared by every leaderboard reply."""
    embed = discord.Embed(color=COLOR_LEADERBOARD)
    embed.set_author(name=AUTHOR_NAME, url=EVENT_SITE_URL, icon_url=avatar_url or None)
    if avatar_url:
        embed.set_thumbnail(url=avatar_url)
    embed.set_footer(text=footer_text)
    return embed


def build_top_three_embed(
    records: Sequence[LeaderboardRecord],
    footer_text: str,
    avatar_url: str = "",
) -> discord.Embed:
    """Build the podium embed.

    Args:
        records: Leaderboard rows in rank order. Only the first three are
            shown; fewer than three simply produces fewer fields.
        footer_text: The backend's human-readable "last updated" string.
        avatar_url: Bot profile image.
    """
    embed = build_basic_embed(footer_text, avatar_url)
    embed.title = "Top 3"

    if not records:
        embed.description = "No contributions yet."
        return embed

    for rank, record in enumerate(records[:3], 1):
        value = "\n".join(
            [
                f"Score: `{record.score}`",
                f"Streak: `{record.streak}` {plural(record.streak, 'day')}",
                f"PRs: `{record.pr_count}`",
                f"[View {record.login}'s Profile]({record.url})",
            ]
        )
        embed.add_field(name=f"{rank_medal(rank)} {record.login}", value=value, inline=False)
        _spacer(embed)

    embed.add_field(
        name="\u200b",
        value=f"[*View Full Leaderboard*]({EVENT_SITE_URL})",
        inline=False,
    )
    return embed


def build_profile_embed(
    rank: int,
    record: LeaderboardRecord,
    footer_text: str,
    avatar_url: str = "",
) -> discord.Embed:
    """Build a single contributor's profile card."""
    medal = rank_medal(rank)
    embed = build_basic_embed(footer_text, avatar_url)
    embed.title = f"{medal} {record.login}" if medal else record.login
    embed.url = record.url

    embed.add_field(name="Rank", value=f"**#{rank}**", inline=True)
    embed.add_field(name="Score", value=f"`{record.score}`", inline=True)
    _spacer(embed)
    embed.add_field(
        name="Streak",
        value=f"`{record.streak}` {plural(record.streak, 'Day')}",
        inline=True,
    )
    embed.add_field(name="Total PRs", value=f"`{record.pr_count}`", inline=True)
    _spacer(embed)
    embed.add_field(name="GitHub Profile", value=record.url, inline=False)

    embed.set_image(url=_sized_avatar(record.avatar_url))
    return embed


def _sized_avatar(avatar_url: str) -> str:
    """GitHub avatar URLs already carry a query string; append the size to it."""
    separator = "&" if "?" in avatar_url else "?"
    return f"{avatar_url}{separator}size={AVATAR_SIZE}"


def format_error(*lines: str) -> str:
    """Markdown error block used for every user-facing failure message."""
    return "\n".join(["## **`ERROR`**", *lines])
