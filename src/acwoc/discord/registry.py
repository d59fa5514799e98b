"""Command registry: discovers handler modules and resolves names and aliases.

Each module in the commands directory exposes a module-level ``command``
(a ``Command``). ``CommandRegistry.build`` imports them in filename order,
indexes them by name and alias, and prepares the slash-command descriptors
that ``register_remote`` pushes to Discord in a single batch.
"""

from __future__ import annotations

import dataclasses
import importlib.util
import logging
import pathlib
from collections.abc import Awaitable, Callable, Sequence
from types import ModuleType
from typing import TYPE_CHECKING, Any, Literal

import httpx

if TYPE_CHECKING:
    from acwoc.discord.context import CommandContext

logger = logging.getLogger(__name__)

DISCORD_API_BASE = "https://discord.com/api/v10"

# Discord application-command option type codes.
OPTION_TYPE_CODES: dict[str, int] = {
    "string": 3,
    "channel": 7,
}

Handler = Callable[["CommandContext", list[str]], Awaitable[None]]


class DirectoryNotFound(FileNotFoundError):
    """Raised when the commands directory does not exist."""


class CommandConflict(ValueError):
    """Raised when an alias collides with another command's name or alias."""


class UnknownCommand(KeyError):
    """Raised when a key resolves to neither a command name nor an alias."""


@dataclasses.dataclass(frozen=True)
class CommandOption:
    """A named, typed slash-command parameter."""

    name: str
    description: str
    type: Literal["string", "channel"] = "string"
    required: bool = False

    def to_descriptor(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "description": self.description,
            "type": OPTION_TYPE_CODES.get(self.type, OPTION_TYPE_CODES["string"]),
            "required": self.required,
        }


@dataclasses.dataclass(frozen=True)
class Command:
    """Registration data for one command plus the coroutine that services it."""

    name: str
    description: str
    handler: Handler
    options: tuple[CommandOption, ...] = ()
    aliases: tuple[str, ...] = ()
    admin_only: bool = False

    def to_descriptor(self) -> dict[str, Any]:
        """Slash-command JSON body for the Discord application-commands API."""
        return {
            "name": self.name,
            "description": self.description,
            "type": 1,  # CHAT_INPUT
            "options": [opt.to_descriptor() for opt in self.options],
        }


class CommandRegistry:
    """Name and alias lookup over the loaded commands.

    Built once at startup and treated as read-only afterwards.
    """

    def __init__(self) -> None:
        self.commands: dict[str, Command] = {}
        self.aliases: dict[str, str] = {}

    def __len__(self) -> int:
        return len(self.commands)

    @property
    def descriptors(self) -> list[dict[str, Any]]:
        """Slash-command descriptors for every registered command, in load order."""
        return [cmd.to_descriptor() for cmd in self.commands.values()]

    def build(self, directory: str | pathlib.Path) -> CommandRegistry:
        """Load every command module in ``directory``.

        Raises:
            DirectoryNotFound: ``directory`` does not exist.
            CommandConflict: an alias clashes with another command.
        """
        root = pathlib.Path(directory)
        if not root.is_dir():
            raise DirectoryNotFound(f"Commands directory does not exist: {root}")

        for path in sorted(root.glob("*.py")):
            if path.name.startswith("_"):
                continue
            module = _load_module(path)
            command = getattr(module, "command", None)
            if not isinstance(command, Command):
                logger.warning("command_module_skipped path=%s reason=no_command", path.name)
                continue
            self.add(command)
            logger.info("command_loaded name=%s aliases=%s", command.name, list(command.aliases))

        logger.info("commands_built count=%d", len(self.commands))
        return self

    def add(self, command: Command) -> None:
        """Register one command, replacing any earlier command with the same name."""
        name_owner = self.aliases.get(command.name)
        if name_owner is not None and name_owner != command.name:
            raise CommandConflict(
                f"Command name {command.name!r} is already an alias of {name_owner!r}"
            )

        for alias in command.aliases:
            if alias in self.commands and alias != command.name:
                raise CommandConflict(f"Alias {alias!r} of {command.name!r} is a command name")
            owner = self.aliases.get(alias)
            if owner is not None and owner != command.name:
                raise CommandConflict(f"Alias {alias!r} of {command.name!r} belongs to {owner!r}")

        previous = self.commands.get(command.name)
        if previous is not None:
            logger.warning("command_overwritten name=%s", command.name)
            for alias in previous.aliases:
                if self.aliases.get(alias) == command.name:
                    del self.aliases[alias]

        # Replace in place so a re-registered name keeps its load position.
        self.commands[command.name] = command
        for alias in command.aliases:
            self.aliases[alias] = command.name

    def exists(self, key: str) -> bool:
        return key in self.commands or key in self.aliases

    def resolve(self, key: str) -> Command | None:
        """Alias map first, then primary name."""
        name = self.aliases.get(key, key)
        return self.commands.get(name)

    async def execute(self, key: str, ctx: CommandContext, args: Sequence[str]) -> None:
        """Run the handler for ``key``. Handler errors propagate unchanged."""
        command = self.resolve(key)
        if command is None:
            raise UnknownCommand(key)
        await command.handler(ctx, list(args))

    async def register_remote(
        self,
        client_id: str | None,
        token: str | None,
        *,
        client: httpx.AsyncClient | None = None,
    ) -> int:
        """Replace the application's global slash commands with this registry's.

        Returns the number of commands Discord confirmed, or 0 when skipped
        or failed. Never raises: a failed sync leaves text commands working.
        """
        if not client_id or not token:
            logger.warning("slash_commands_not_registered reason=missing_client_id_or_token")
            return 0

        descriptors = self.descriptors
        url = f"{DISCORD_API_BASE}/applications/{client_id}/commands"
        logger.info("slash_commands_refreshing count=%d", len(descriptors))
        try:
            if client is None:
                async with httpx.AsyncClient() as own_client:
                    data = await _put_commands(own_client, url, token, descriptors)
            else:
                data = await _put_commands(client, url, token, descriptors)
        except (httpx.HTTPError, ValueError):
            logger.exception("slash_commands_register_failed client_id=%s", client_id)
            return 0

        count = len(data) if isinstance(data, list) else 0
        logger.info("slash_commands_registered count=%d", count)
        return count


async def _put_commands(
    client: httpx.AsyncClient,
    url: str,
    token: str,
    descriptors: list[dict[str, Any]],
) -> Any:
    resp = await client.put(
        url,
        json=descriptors,
        headers={"Authorization": f"Bot {token}"},
    )
    resp.raise_for_status()
    return resp.json()


def _load_module(path: pathlib.Path) -> ModuleType:
    """Import a source file as a standalone module."""
    module_name = f"{path.parent.name}.{path.stem}"
    spec = importlib.util.spec_from_file_location(module_name, path)
    if spec is None or spec.loader is None:
        raise ImportError(f"Cannot load command module {path}")
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    return module
