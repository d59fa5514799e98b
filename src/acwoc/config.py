"""Application settings via pydantic-settings. Loads from environment and .env file."""

from __future__ import annotations

import pathlib
import re

from pydantic import model_validator
from pydantic_settings import BaseSettings

PACKAGE_ROOT = pathlib.Path(__file__).resolve().parent

# Handler modules are discovered from this directory at startup.
COMMANDS_DIR = PACKAGE_ROOT / "commands"

DEFAULT_PREFIX = "!"

# Public site of the event, linked from every embed.
EVENT_SITE_URL = "https://acwoc.androidclub.tech/"


class Settings(BaseSettings):
    """AcWoC bot configuration.

    All values can be overridden via environment variables or .env file.
    Variable names match the ones the hosted deployment already exports
    (``BTOKEN``, ``CLIENT_ID``, ``PREFIX``...).
    """

    # Discord
    btoken: str = ""
    client_id: str = ""
    prefix: str = DEFAULT_PREFIX
    admin_ids: str = ""  # Comma or whitespace separated Discord user IDs

    # Leaderboard backend
    leaderboard_fetch_url: str = ""

    # Presentation
    help_readme_url: str = ""
    bot_profile_img: str = ""

    # Web service
    port: int = 8080
    acwoc_ping_interval: int = 900  # Minimum seconds between health re-pings

    # Environment
    acwoc_env: str = "development"

    # Logging
    acwoc_log_level: str = "INFO"

    model_config = {"env_prefix": "", "env_file": ".env", "extra": "ignore"}

    @model_validator(mode="after")
    def _ensure_prefix(self) -> Settings:
        """A blank prefix would match every message; fall back to the default."""
        if not self.prefix.strip():
            self.prefix = DEFAULT_PREFIX
        return self

    def admin_id_set(self) -> frozenset[int]:
        """Parse ``admin_ids`` into a set of integer user IDs, skipping junk tokens."""
        ids: set[int] = set()
        for token in re.split(r"[\s,]+", self.admin_ids):
            if token.isdigit():
                ids.add(int(token))
        return frozenset(ids)

    def is_admin(self, user_id: int) -> bool:
        return user_id in self.admin_id_set()
