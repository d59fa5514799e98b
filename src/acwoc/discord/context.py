"""Uniform reply surface for text commands and slash-command interactions.

Handlers receive a ``CommandContext`` and never need to know whether they
were invoked by ``!leaderboard 3`` or ``/leaderboard position:3``.
"""

from __future__ import annotations

import dataclasses
from typing import TYPE_CHECKING, Any

import discord

if TYPE_CHECKING:
    from acwoc.config import Settings


class ReplyHandle:
    """A sent reply that can be edited in place."""

    def __init__(
        self,
        message: discord.Message | None,
        interaction: discord.Interaction | None = None,
    ) -> None:
        self._message = message
        self._interaction = interaction

    async def edit(self, content: str | None = None, embed: discord.Embed | None = None) -> None:
        """Replace the reply's content and embed. ``None`` clears the field."""
        if self._interaction is not None:
            await self._interaction.edit_original_response(content=content, embed=embed)
        elif self._message is not None:
            await self._message.edit(content=content, embed=embed)


def _send_kwargs(content: str | None, embed: discord.Embed | None) -> dict[str, Any]:
    kwargs: dict[str, Any] = {}
    if content is not None:
        kwargs["content"] = content
    if embed is not None:
        kwargs["embed"] = embed
    return kwargs


@dataclasses.dataclass
class CommandContext:
    """Everything a handler needs to service one command invocation.

    Exactly one of ``message`` / ``interaction`` is set.
    """

    client: discord.Client
    settings: Settings
    message: discord.Message | None = None
    interaction: discord.Interaction | None = None

    def __post_init__(self) -> None:
        if (self.message is None) == (self.interaction is None):
            raise ValueError("CommandContext needs exactly one of message or interaction")

    @property
    def is_interaction(self) -> bool:
        return self.interaction is not None

    @property
    def author_id(self) -> int:
        if self.interaction is not None:
            return self.interaction.user.id
        return self._source_message().author.id

    def option(self, name: str) -> str | None:
        """Value of a named slash-command option, or None (always None for text commands)."""
        if self.interaction is None:
            return None
        data = self.interaction.data or {}
        for opt in data.get("options", []):
            if opt.get("name") == name:
                value = opt.get("value")
                return None if value is None else str(value)
        return None

    async def reply(
        self,
        content: str | None = None,
        embed: discord.Embed | None = None,
    ) -> ReplyHandle:
        """Send a reply and return a handle for later edits.

        For interactions, the first reply uses the interaction response;
        later replies go out as followups.
        """
        kwargs = _send_kwargs(content, embed)
        if self.interaction is not None:
            if self.interaction.response.is_done():
                sent = await self.interaction.followup.send(wait=True, **kwargs)
                return ReplyHandle(sent)
            await self.interaction.response.send_message(**kwargs)
            return ReplyHandle(None, interaction=self.interaction)
        sent_message = await self._source_message().reply(**kwargs)
        return ReplyHandle(sent_message)

    def _source_message(self) -> discord.Message:
        if self.message is None:
            raise ValueError("CommandContext has no source message")
        return self.message
