"""FastAPI application factory and process entry point.

The web service exists so the hosting platform sees a live HTTP port; the
Discord bot runs inside its lifespan on the same event loop.
"""

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import BackgroundTasks, FastAPI
from fastapi.responses import PlainTextResponse

from acwoc.config import COMMANDS_DIR, Settings
from acwoc.core.keepalive import KeepAlive
from acwoc.discord.registry import CommandRegistry

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Startup: load commands, optionally start the Discord bot."""
    settings: Settings = app.state.settings
    registry = CommandRegistry().build(COMMANDS_DIR)
    app.state.registry = registry
    logger.info("all_commands_loaded count=%d", len(registry))

    discord_bot = None
    from acwoc.discord.bot import is_discord_enabled

    if is_discord_enabled(settings):
        from acwoc.discord.bot import start_discord_bot

        discord_bot = await start_discord_bot(settings, registry)
        app.state.discord_bot = discord_bot
        logger.info("discord_bot_integration_started")
    else:
        logger.info("discord_bot_integration_disabled reason=no_token")

    yield

    if discord_bot is not None:
        await discord_bot.close()
        logger.info("discord_bot_integration_stopped")


def create_app(settings: Settings | None = None) -> FastAPI:
    """Create and configure the AcWoC bot web application."""
    settings = settings or Settings()

    logging.basicConfig(
        level=getattr(logging, settings.acwoc_log_level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    app = FastAPI(
        title="AcWoC Bot",
        version="0.1.0",
        description="Discord bot for the AcWoC contribution leaderboard",
        docs_url=None,
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.keepalive = KeepAlive(
        settings.leaderboard_fetch_url,
        interval=settings.acwoc_ping_interval,
    )

    @app.get("/", response_class=PlainTextResponse)
    async def root(background_tasks: BackgroundTasks) -> str:
        keepalive: KeepAlive = app.state.keepalive
        if keepalive.claim():
            background_tasks.add_task(keepalive.ping)
        return "hello world"

    @app.get("/health")
    async def health() -> dict[str, str]:
        return {"status": "ok", "env": settings.acwoc_env}

    return app


def run() -> None:
    """Console entry point: serve the app (and with it the bot) with uvicorn."""
    import uvicorn

    settings = Settings()
    uvicorn.run(create_app(settings), host="0.0.0.0", port=settings.port)
