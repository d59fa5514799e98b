"""``leaderboard`` -- top three contributors, or the contributor at a given rank."""

from __future__ import annotations

from acwoc.commands._leaderboard_reply import fetch_with_progress
from acwoc.core.leaderboard import record_at
from acwoc.discord.context import CommandContext
from acwoc.discord.embeds import build_profile_embed, build_top_three_embed, format_error
from acwoc.discord.registry import Command, CommandOption

INVALID_POSITION = format_error(
    "**Invalid position argument provided.**",
    "Position should be an `integer` greater than `0`",
)


def parse_position(raw: str | None) -> int | None:
    """Return the requested rank, 0 when one was given but is unusable, None when absent."""
    if raw is None or not raw.strip():
        return None
    try:
        position = int(raw.strip())
    except ValueError:
        return 0
    return position if position >= 1 else 0


async def handle(ctx: CommandContext, args: list[str]) -> None:
    raw = ctx.option("position") if ctx.is_interaction else (args[0] if args else None)
    position = parse_position(raw)
    if position == 0:
        await ctx.reply(INVALID_POSITION)
        return

    status, result = await fetch_with_progress(ctx, "Fetching latest leaderboard...")
    if result.snapshot is None:
        return
    snapshot = result.snapshot
    avatar = ctx.settings.bot_profile_img

    if position is None:
        embed = build_top_three_embed(snapshot.leaderboard, snapshot.updated_timestring, avatar)
        await status.edit(content=None, embed=embed)
        return

    record = record_at(snapshot, position)
    if record is None:
        await status.edit(
            content=format_error(
                "**Invalid position argument provided.**",
                f"Position should be an `integer` not greater than `{snapshot.max_rank}`",
            )
        )
        return

    embed = build_profile_embed(position, record, snapshot.updated_timestring, avatar)
    await status.edit(content=None, embed=embed)


command = Command(
    name="leaderboard",
    description="Shows the AcWoC leaderboard",
    handler=handle,
    aliases=("ld", "leader", "leaders"),
    options=(
        CommandOption(
            name="position",
            description="View the details of the person at nth position on the leaderboard",
            type="string",
            required=False,
        ),
    ),
)
