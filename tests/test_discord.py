"""Tests for the Discord bot integration.

All Discord objects are mocked — no real Discord connection required.
"""

from __future__ import annotations

from typing import Any
from unittest.mock import AsyncMock, MagicMock, patch

import discord
import pytest

from acwoc.config import Settings
from acwoc.core.leaderboard import parse_snapshot
from acwoc.discord.bot import (
    ADMIN_ONLY_MESSAGE,
    FAILURE_MESSAGE,
    AcwocBot,
    is_discord_enabled,
    parse_message_command,
    start_discord_bot,
)
from acwoc.discord.context import CommandContext
from acwoc.discord.embeds import (
    COLOR_LEADERBOARD,
    build_basic_embed,
    build_profile_embed,
    build_top_three_embed,
    format_error,
)
from acwoc.discord.registry import Command, CommandRegistry


def make_message(content: str, *, author_id: int = 12345, bot: bool = False) -> MagicMock:
    """Build a Discord message mock whose ``reply`` returns an editable message."""
    message = MagicMock(spec=discord.Message)
    message.content = content
    message.author = MagicMock()
    message.author.id = author_id
    message.author.bot = bot
    sent = MagicMock(spec=discord.Message)
    sent.edit = AsyncMock()
    sent.jump_url = "https://discord.com/channels/1/2/3"
    message.reply = AsyncMock(return_value=sent)
    return message


def make_interaction(
    name: str = "echo", options: list[dict] | None = None, **overrides: Any
) -> AsyncMock:
    """Build a fully-configured Discord interaction mock."""
    interaction = AsyncMock(spec=discord.Interaction)
    interaction.type = overrides.get("type", discord.InteractionType.application_command)
    interaction.data = {"name": name, "options": options or []}
    interaction.response = MagicMock()
    interaction.response.is_done = MagicMock(return_value=overrides.get("done", False))
    interaction.response.send_message = AsyncMock()
    interaction.followup = AsyncMock()
    interaction.user = MagicMock(spec=discord.Member)
    interaction.user.id = overrides.get("user_id", 12345)
    interaction.edit_original_response = AsyncMock()
    return interaction


def http_error() -> discord.HTTPException:
    response = MagicMock()
    response.status = 500
    response.reason = "Internal Server Error"
    return discord.HTTPException(response, "boom")


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def echo_handler() -> AsyncMock:
    return AsyncMock()


@pytest.fixture
def registry(echo_handler: AsyncMock) -> CommandRegistry:
    registry = CommandRegistry()
    registry.add(Command(name="echo", description="Echo", handler=echo_handler, aliases=("e",)))
    registry.add(Command(name="nuke", description="Admin", handler=AsyncMock(), admin_only=True))
    return registry


@pytest.fixture
def bot(settings: Settings, registry: CommandRegistry) -> AcwocBot:
    return AcwocBot(settings=settings, registry=registry)


# ---------------------------------------------------------------------------
# Enablement and construction
# ---------------------------------------------------------------------------


class TestIsDiscordEnabled:
    def test_enabled_with_token(self) -> None:
        assert is_discord_enabled(Settings(btoken="test-token-not-real")) is True

    def test_disabled_without_token(self) -> None:
        assert is_discord_enabled(Settings(btoken="")) is False


class TestAcwocBotInit:
    def test_bot_creation(self, bot: AcwocBot, settings: Settings) -> None:
        assert bot.settings is settings
        assert len(bot.registry) == 2
        assert bot.intents.message_content is True

    async def test_setup_hook_registers_slash_commands(self, settings: Settings) -> None:
        registry = MagicMock(spec=CommandRegistry)
        registry.register_remote = AsyncMock(return_value=2)
        settings = settings.model_copy(update={"client_id": "42", "btoken": "tok"})
        bot = AcwocBot(settings=settings, registry=registry)
        await bot.setup_hook()
        registry.register_remote.assert_awaited_once_with("42", "tok")

    async def test_start_discord_bot_runs_in_background(self, settings: Settings) -> None:
        settings = settings.model_copy(update={"btoken": "tok"})
        with (
            patch.object(AcwocBot, "start", new=AsyncMock()) as start,
            patch.object(AcwocBot, "close", new=AsyncMock()),
        ):
            bot = await start_discord_bot(settings, CommandRegistry())
            assert bot.runner_task is not None
            await bot.runner_task
        start.assert_awaited_once_with("tok")


# ---------------------------------------------------------------------------
# Text command parsing
# ---------------------------------------------------------------------------


class TestParseMessageCommand:
    def test_name_and_args(self) -> None:
        assert parse_message_command("!leaderboard 3", "!") == ("leaderboard", ["3"])

    def test_name_is_case_insensitive_args_keep_case(self) -> None:
        assert parse_message_command("!PROFILE OctoCat", "!") == ("profile", ["OctoCat"])

    def test_extra_whitespace(self) -> None:
        assert parse_message_command("!say   <#1>  hello   world", "!") == (
            "say",
            ["<#1>", "hello", "world"],
        )

    def test_multi_char_prefix(self) -> None:
        assert parse_message_command("Bot.ping", "bot.") == ("ping", [])

    def test_not_a_command(self) -> None:
        assert parse_message_command("hello !ping", "!") is None

    def test_prefix_only(self) -> None:
        assert parse_message_command("!", "!") is None


# ---------------------------------------------------------------------------
# Dispatch
# ---------------------------------------------------------------------------


class TestMessageDispatch:
    async def test_runs_handler_by_name(self, bot: AcwocBot, echo_handler: AsyncMock) -> None:
        message = make_message("!echo Hello There")
        await bot.on_message(message)
        echo_handler.assert_awaited_once()
        ctx, args = echo_handler.call_args.args
        assert isinstance(ctx, CommandContext)
        assert ctx.message is message
        assert args == ["Hello", "There"]

    async def test_runs_handler_by_alias(self, bot: AcwocBot, echo_handler: AsyncMock) -> None:
        await bot.on_message(make_message("!E"))
        echo_handler.assert_awaited_once()

    async def test_ignores_bots(self, bot: AcwocBot, echo_handler: AsyncMock) -> None:
        message = make_message("!echo", bot=True)
        await bot.on_message(message)
        echo_handler.assert_not_awaited()
        message.reply.assert_not_called()

    async def test_ignores_unprefixed(self, bot: AcwocBot, echo_handler: AsyncMock) -> None:
        message = make_message("echo")
        await bot.on_message(message)
        echo_handler.assert_not_awaited()
        message.reply.assert_not_called()

    async def test_unknown_command(self, bot: AcwocBot) -> None:
        message = make_message("!dance")
        await bot.on_message(message)
        message.reply.assert_awaited_once_with(content="Unknown command: `dance`")

    async def test_handler_failure_is_reported(
        self, bot: AcwocBot, echo_handler: AsyncMock
    ) -> None:
        echo_handler.side_effect = RuntimeError("kaboom")
        message = make_message("!echo")
        await bot.on_message(message)
        message.reply.assert_awaited_once_with(content=FAILURE_MESSAGE)

    async def test_failure_reply_error_is_swallowed(
        self, bot: AcwocBot, echo_handler: AsyncMock
    ) -> None:
        echo_handler.side_effect = RuntimeError("kaboom")
        message = make_message("!echo")
        message.reply.side_effect = http_error()
        await bot.on_message(message)  # must not raise

    async def test_admin_command_denied(self, bot: AcwocBot, registry: CommandRegistry) -> None:
        message = make_message("!nuke", author_id=999)
        await bot.on_message(message)
        message.reply.assert_awaited_once_with(content=ADMIN_ONLY_MESSAGE)
        registry.commands["nuke"].handler.assert_not_awaited()  # type: ignore[attr-defined]

    async def test_admin_command_allowed(self, bot: AcwocBot, registry: CommandRegistry) -> None:
        message = make_message("!nuke", author_id=111)
        await bot.on_message(message)
        registry.commands["nuke"].handler.assert_awaited_once()  # type: ignore[attr-defined]


class TestInteractionDispatch:
    async def test_runs_handler(self, bot: AcwocBot, echo_handler: AsyncMock) -> None:
        interaction = make_interaction("echo", [{"name": "text", "type": 3, "value": "hi"}])
        await bot.on_interaction(interaction)
        echo_handler.assert_awaited_once()
        ctx, args = echo_handler.call_args.args
        assert ctx.is_interaction
        assert ctx.option("text") == "hi"
        assert args == []

    async def test_ignores_non_command_interactions(
        self, bot: AcwocBot, echo_handler: AsyncMock
    ) -> None:
        interaction = make_interaction("echo", type=discord.InteractionType.component)
        await bot.on_interaction(interaction)
        echo_handler.assert_not_awaited()

    async def test_unknown_command(self, bot: AcwocBot) -> None:
        interaction = make_interaction("mystery")
        await bot.on_interaction(interaction)
        interaction.response.send_message.assert_awaited_once_with(
            content="Unknown command: `mystery`"
        )

    async def test_failure_after_reply_uses_followup(
        self, bot: AcwocBot, echo_handler: AsyncMock
    ) -> None:
        echo_handler.side_effect = RuntimeError("late failure")
        interaction = make_interaction("echo", done=True)
        await bot.on_interaction(interaction)
        interaction.followup.send.assert_awaited_once_with(wait=True, content=FAILURE_MESSAGE)


# ---------------------------------------------------------------------------
# CommandContext
# ---------------------------------------------------------------------------


class TestCommandContext:
    async def test_message_reply_and_edit(self, bot: AcwocBot, settings: Settings) -> None:
        message = make_message("!x")
        ctx = CommandContext(client=bot, settings=settings, message=message)
        handle = await ctx.reply("working")
        message.reply.assert_awaited_once_with(content="working")
        embed = discord.Embed(title="done")
        await handle.edit(content=None, embed=embed)
        message.reply.return_value.edit.assert_awaited_once_with(content=None, embed=embed)
        assert ctx.author_id == 12345
        assert ctx.option("anything") is None

    async def test_interaction_reply_and_edit(self, bot: AcwocBot, settings: Settings) -> None:
        interaction = make_interaction(user_id=777)
        ctx = CommandContext(client=bot, settings=settings, interaction=interaction)
        handle = await ctx.reply("working")
        interaction.response.send_message.assert_awaited_once_with(content="working")
        await handle.edit(content="finished")
        interaction.edit_original_response.assert_awaited_once_with(
            content="finished", embed=None
        )
        assert ctx.author_id == 777

    def test_option_lookup(self, bot: AcwocBot, settings: Settings) -> None:
        interaction = make_interaction(
            "forward",
            [
                {"name": "channel", "type": 7, "value": "123456"},
                {"name": "message", "type": 3, "value": "Hello"},
            ],
        )
        ctx = CommandContext(client=bot, settings=settings, interaction=interaction)
        assert ctx.option("channel") == "123456"
        assert ctx.option("message") == "Hello"
        assert ctx.option("missing") is None

    def test_needs_exactly_one_source(self, bot: AcwocBot, settings: Settings) -> None:
        with pytest.raises(ValueError):
            CommandContext(client=bot, settings=settings)
        with pytest.raises(ValueError):
            CommandContext(
                client=bot,
                settings=settings,
                message=make_message("!x"),
                interaction=make_interaction(),
            )


# ---------------------------------------------------------------------------
# Embeds
# ---------------------------------------------------------------------------


class TestEmbeds:
    def test_basic_embed(self) -> None:
        embed = build_basic_embed("Updated now", "https://cdn.test/bot.png")
        assert embed.color is not None
        assert embed.color.value == COLOR_LEADERBOARD
        assert embed.author.name == "AcWoC"
        assert embed.thumbnail.url == "https://cdn.test/bot.png"
        assert embed.footer.text == "Updated now"

    def test_top_three(self, leaderboard_payload: dict[str, Any]) -> None:
        snapshot = parse_snapshot(leaderboard_payload)
        embed = build_top_three_embed(snapshot.leaderboard, snapshot.updated_timestring)
        assert embed.title == "Top 3"
        names = [f.name for f in embed.fields]
        assert names[0] == "🥇 amaan"
        assert names[2] == "🥈 Bea"
        assert names[4] == "🥉 cyd"
        assert not any("dev" in (n or "") for n in names)
        assert "Streak: `12` days" in embed.fields[0].value
        assert "[View amaan's Profile](https://github.com/amaan)" in embed.fields[0].value
        assert "View Full Leaderboard" in embed.fields[-1].value

    def test_top_three_with_fewer_records(self, leaderboard_payload: dict[str, Any]) -> None:
        snapshot = parse_snapshot(leaderboard_payload)
        embed = build_top_three_embed(snapshot.leaderboard[:1], "t")
        assert embed.fields[0].name == "🥇 amaan"
        assert len(embed.fields) == 3

    def test_top_three_empty(self) -> None:
        embed = build_top_three_embed([], "t")
        assert embed.description == "No contributions yet."

    def test_profile(self, leaderboard_payload: dict[str, Any]) -> None:
        snapshot = parse_snapshot(leaderboard_payload)
        record = snapshot.leaderboard[1]
        embed = build_profile_embed(2, record, "Updated now")
        assert embed.title == "🥈 Bea"
        assert embed.url == "https://github.com/Bea"
        fields = {f.name: f.value for f in embed.fields}
        assert fields["Rank"] == "**#2**"
        assert fields["Score"] == "`1900`"
        assert fields["Streak"] == "`3` Days"
        assert fields["Total PRs"] == "`1`"
        assert fields["GitHub Profile"] == "https://github.com/Bea"
        assert embed.image.url == "https://avatars.githubusercontent.com/u/1?v=4&size=128"

    def test_profile_without_medal(self, leaderboard_payload: dict[str, Any]) -> None:
        snapshot = parse_snapshot(leaderboard_payload)
        embed = build_profile_embed(4, snapshot.leaderboard[3], "t")
        assert embed.title == "dev"
        fields = {f.name: f.value for f in embed.fields}
        assert fields["Streak"] == "`1` Day"

    def test_format_error(self) -> None:
        assert format_error("a", "b") == "## **`ERROR`**\na\nb"
