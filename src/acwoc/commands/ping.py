"""``ping`` -- round-trip latency from the bot to Discord."""

from __future__ import annotations

import time

from acwoc.discord.context import CommandContext
from acwoc.discord.registry import Command


async def handle(ctx: CommandContext, args: list[str]) -> None:
    started = time.perf_counter()
    reply = await ctx.reply(":ping_pong: _ _")
    elapsed_ms = round((time.perf_counter() - started) * 1000)
    await reply.edit(content=f":ping_pong:  `[SERVER -> DISCORD]: {elapsed_ms}ms`")


command = Command(
    name="ping",
    description="Test bot's ping i.e latency",
    handler=handle,
)
