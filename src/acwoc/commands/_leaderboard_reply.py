"""Shared fetch-with-progress flow for commands that read the leaderboard."""

from __future__ import annotations

import logging

import discord

from acwoc.core.leaderboard import LeaderboardResult, fetch_leaderboard
from acwoc.discord.context import CommandContext, ReplyHandle
from acwoc.discord.embeds import format_error

logger = logging.getLogger(__name__)

WAKING_NOTICE = "*`This might take a while, please be patient...`*"


async def fetch_with_progress(
    ctx: CommandContext, progress_text: str
) -> tuple[ReplyHandle, LeaderboardResult]:
    """Post a progress reply, fetch the leaderboard, and return both.

    If the backend is asleep the progress reply is edited once to ask the
    user for patience. On failure the reply is already edited to an error
    message and the caller only has to return.
    """
    status = await ctx.reply(f"`{progress_text}`")

    async def on_waking() -> None:
        try:
            await status.edit(content=WAKING_NOTICE)
        except discord.HTTPException:
            logger.warning("leaderboard_waking_notice_failed")

    result = await fetch_leaderboard(ctx.settings.leaderboard_fetch_url, on_waking)
    if not result.ok:
        await status.edit(
            content=format_error(
                f"**Could not fetch latest leaderboard data: **`{result.reason}`",
                "Please try again later!",
            )
        )
    return status, result
