"""Discord bot for AcWoC.

Runs alongside the FastAPI health service on the same event loop. Text
commands (``!leaderboard``) and slash commands (``/leaderboard``) both go
through one dispatch path: resolve the command in the registry, check the
admin gate, run the handler, and turn any handler error into a generic
reply so a bad command never takes the bot down.

The bot is optional: if BTOKEN is not set, nothing starts.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Sequence
from typing import TYPE_CHECKING

import discord
from discord import Intents

from acwoc.discord.context import CommandContext

if TYPE_CHECKING:
    from acwoc.config import Settings
    from acwoc.discord.registry import CommandRegistry

logger = logging.getLogger(__name__)

FAILURE_MESSAGE = "Something went wrong while running that command. Please try again later."
ADMIN_ONLY_MESSAGE = "You are not allowed to use this command."


def parse_message_command(content: str, prefix: str) -> tuple[str, list[str]] | None:
    """Split ``<prefix><name> arg1 arg2`` into (lower-cased name, args).

    Returns None when the message does not start with the prefix or
    carries nothing after it. Argument case is preserved.
    """
    if not content.lower().startswith(prefix.lower()):
        return None
    tokens = content[len(prefix) :].split()
    if not tokens:
        return None
    return tokens[0].lower(), tokens[1:]


class AcwocBot(discord.Client):
    """The AcWoC Discord bot.

    Slash commands are registered from the registry's descriptors in one
    batch during ``setup_hook``; interactions are dispatched by name in
    ``on_interaction`` rather than through a discord.py command tree.
    """

    def __init__(self, settings: Settings, registry: CommandRegistry) -> None:
        intents = Intents.default()
        intents.message_content = True  # Required to read prefixed text commands

        super().__init__(intents=intents)
        self.settings = settings
        self.registry = registry
        self.runner_task: asyncio.Task[None] | None = None

    async def setup_hook(self) -> None:
        """Called before connecting to the gateway. Syncs slash commands."""
        await self.registry.register_remote(self.settings.client_id, self.settings.btoken)

    async def on_ready(self) -> None:
        user = self.user
        name = user.name if user else "unknown"
        logger.info("discord_bot_ready user=%s commands=%d", name, len(self.registry))

    async def on_message(self, message: discord.Message) -> None:
        if message.author.bot:
            return
        parsed = parse_message_command(message.content, self.settings.prefix)
        if parsed is None:
            return
        key, args = parsed
        ctx = CommandContext(client=self, settings=self.settings, message=message)
        await self.dispatch_command(ctx, key, args)

    async def on_interaction(self, interaction: discord.Interaction) -> None:
        if interaction.type != discord.InteractionType.application_command:
            return
        data = interaction.data or {}
        key = str(data.get("name", "")).lower()
        ctx = CommandContext(client=self, settings=self.settings, interaction=interaction)
        await self.dispatch_command(ctx, key, [])

    async def dispatch_command(self, ctx: CommandContext, key: str, args: Sequence[str]) -> None:
        """Resolve ``key`` and run its handler, replying on every failure path."""
        command = self.registry.resolve(key)
        if command is None:
            await self._safe_reply(ctx, f"Unknown command: `{key}`")
            return

        if command.admin_only and not self.settings.is_admin(ctx.author_id):
            logger.info("command_denied name=%s user=%s", command.name, ctx.author_id)
            await self._safe_reply(ctx, ADMIN_ONLY_MESSAGE)
            return

        logger.info("command_invoked name=%s key=%s user=%s", command.name, key, ctx.author_id)
        try:
            await self.registry.execute(key, ctx, args)
        except Exception:  # Last-resort handler — handler, Discord, and HTTP errors
            logger.exception("command_failed name=%s key=%s", command.name, key)
            await self._safe_reply(ctx, FAILURE_MESSAGE)

    async def _safe_reply(self, ctx: CommandContext, content: str) -> None:
        try:
            await ctx.reply(content)
        except discord.HTTPException:
            logger.exception("discord_reply_failed")


def is_discord_enabled(settings: Settings) -> bool:
    """Check whether the Discord bot should be started (a token is configured)."""
    return bool(settings.btoken)


async def start_discord_bot(settings: Settings, registry: CommandRegistry) -> AcwocBot:
    """Create and start the Discord bot in the current event loop.

    Returns the bot instance so the caller can stop it during shutdown.
    The bot runs as a background task; this function returns immediately
    after starting it.
    """
    bot = AcwocBot(settings=settings, registry=registry)

    async def _run_bot() -> None:
        try:
            await bot.start(settings.btoken)
        except asyncio.CancelledError:
            logger.info("discord_bot_cancelled")
        except Exception:  # Last-resort handler — bot.start can raise connection and auth errors
            logger.exception("discord_bot_error")
        finally:
            if not bot.is_closed():
                await bot.close()

    bot.runner_task = asyncio.create_task(_run_bot(), name="discord-bot")
    logger.info("discord_bot_started")
    return bot
