"""Small string helpers shared by command handlers and embed builders."""

from __future__ import annotations

# Characters that decorate a channel mention like ``<#123456>``.
CHANNEL_MENTION_CHARS = " <>#"

_MEDALS: dict[int, str] = {1: "🥇", 2: "🥈", 3: "🥉"}


def remove_chars(text: str, chars: str) -> str:
    """Remove every occurrence of each character in ``chars`` from ``text``."""
    return text.translate({ord(c): None for c in chars})


def parse_channel_id(raw: str) -> str:
    """Recover a numeric channel ID from a mention or a bare ID.

    ``"<#123456>"`` becomes ``"123456"``; ``"123456"`` passes through.
    """
    return remove_chars(raw, CHANNEL_MENTION_CHARS)


def rank_medal(rank: int) -> str:
    """Medal emoji for podium ranks, empty string for everyone else."""
    return _MEDALS.get(rank, "")


def plural(count: int, word: str) -> str:
    return word if count == 1 else f"{word}s"
