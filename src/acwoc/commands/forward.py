"""``forward`` -- post a message to another channel as the bot (admins only)."""

from __future__ import annotations

import logging

import discord

from acwoc.core.text import parse_channel_id
from acwoc.discord.context import CommandContext
from acwoc.discord.embeds import format_error
from acwoc.discord.registry import Command, CommandOption

logger = logging.getLogger(__name__)

MAX_MESSAGE_LENGTH = 2000


async def _resolve_channel(
    ctx: CommandContext, raw: str | None
) -> discord.abc.Messageable | None:
    """Fetch the channel named by a mention or raw ID, if the bot can post in it."""
    if not raw:
        return None
    channel_id = parse_channel_id(raw)
    try:
        channel = await ctx.client.fetch_channel(int(channel_id))
    except (ValueError, discord.HTTPException) as exc:
        logger.info("forward_channel_lookup_failed raw=%s err=%s", raw, exc)
        return None
    if not isinstance(channel, discord.abc.Messageable):
        return None
    return channel


async def handle(ctx: CommandContext, args: list[str]) -> None:
    if ctx.is_interaction:
        raw_channel = ctx.option("channel")
        text = ctx.option("message") or ""
    else:
        raw_channel = args[0] if args else None
        text = " ".join(args[1:])

    channel = await _resolve_channel(ctx, raw_channel)
    if channel is None or not 0 < len(text) <= MAX_MESSAGE_LENGTH:
        await ctx.reply(format_error("Invalid arguments provided!"))
        return

    status = await ctx.reply(f"Sending Message to <#{channel.id}>")
    sent = await channel.send(text)
    logger.info("forward_sent channel_id=%s by=%s", channel.id, ctx.author_id)
    await status.edit(content=f"Message sent: {sent.jump_url}")


command = Command(
    name="forward",
    description="Forward a predefined message to a channel of your choice",
    handler=handle,
    aliases=("send", "say"),
    admin_only=True,
    options=(
        CommandOption(
            name="channel",
            description="Channel in which the message will be forwarded",
            type="channel",
            required=True,
        ),
        CommandOption(
            name="message",
            description="Message to be forwarded",
            type="string",
            required=True,
        ),
    ),
)
