"""``help`` -- link to the command reference."""

from __future__ import annotations

from acwoc.discord.context import CommandContext
from acwoc.discord.registry import Command


async def handle(ctx: CommandContext, args: list[str]) -> None:
    await ctx.reply(f"### [View All Commands](<{ctx.settings.help_readme_url}>)")


command = Command(
    name="help",
    description="Replies with the help README.md link",
    handler=handle,
)
