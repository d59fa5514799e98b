"""``profile`` -- look up a contributor by GitHub username."""

from __future__ import annotations

from acwoc.commands._leaderboard_reply import fetch_with_progress
from acwoc.core.leaderboard import find_contributor
from acwoc.discord.context import CommandContext
from acwoc.discord.embeds import build_profile_embed, format_error
from acwoc.discord.registry import Command, CommandOption


async def handle(ctx: CommandContext, args: list[str]) -> None:
    username = ctx.option("pfid") if ctx.is_interaction else (args[0] if args else None)
    if not username:
        await ctx.reply(format_error("Invalid username provided."))
        return

    status, result = await fetch_with_progress(ctx, "Searching for User Data...")
    if result.snapshot is None:
        return
    snapshot = result.snapshot

    found = find_contributor(snapshot, username)
    if found is None:
        await status.edit(content=format_error("No contributor with specified username found."))
        return

    rank, record = found
    embed = build_profile_embed(
        rank, record, snapshot.updated_timestring, ctx.settings.bot_profile_img
    )
    await status.edit(content=None, embed=embed)


command = Command(
    name="profile",
    description="View contributor profile by username",
    handler=handle,
    aliases=("user", "pf", "contributor", "contrib"),
    options=(
        CommandOption(
            name="pfid",
            description="Username of the contributor",
            type="string",
            required=True,
        ),
    ),
)
