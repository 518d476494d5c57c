"""
Tabletop scheduling Discord bot
discord.py 2.x with slash commands
"""

import asyncio
import logging
from pathlib import Path

# .env must be loaded before config is imported
from dotenv import load_dotenv

load_dotenv(dotenv_path=Path(__file__).parent / ".env", encoding="utf-8")

import discord  # noqa: E402
from discord.ext import commands  # noqa: E402

from shared.database import DatabaseManager, PoolConfig  # noqa: E402
from shared.migrations import MigrationRunner  # noqa: E402
from shared.repositories import Repositories  # noqa: E402
from tabletop.config import BotConfig  # noqa: E402
from tabletop.core import HealthCheckServer, setup_logging  # noqa: E402
from tabletop.handlers import build_dispatcher  # noqa: E402
from tabletop.interactions import InteractionDispatcher  # noqa: E402

logger = logging.getLogger("tabletop")


class TabletopBot(commands.Bot):
    """Tabletop bot client"""

    def __init__(self, db: DatabaseManager):
        intents = discord.Intents.default()
        intents.members = True  # role grants look members up by id

        super().__init__(
            command_prefix=commands.when_mentioned,
            intents=intents,
            help_command=None,
        )

        self.db = db
        self.repos: Repositories | None = None
        self.dispatcher: InteractionDispatcher | None = None
        self.health_server: HealthCheckServer | None = None

        self.initial_extensions = [
            "tabletop.cogs.interactions",
            "tabletop.cogs.setup",
            "tabletop.cogs.game",
            "tabletop.cogs.game_day",
            "tabletop.cogs.campaign",
            "tabletop.cogs.utility",
        ]

    async def setup_hook(self):
        """Connect storage, load cogs and sync slash commands"""
        if BotConfig.HEALTH_SERVER_ENABLED:
            self.health_server = HealthCheckServer(
                self, port=BotConfig.PORT, db_check=self.db.check_health
            )
            await self.health_server.start()

        await self.db.connect()
        if BotConfig.RUN_MIGRATIONS:
            await MigrationRunner(self.db.pool).run_pending()

        self.repos = Repositories.from_pool(self.db.pool)
        self.dispatcher = build_dispatcher(self.repos, BotConfig.get_timezone())

        loaded = []
        failed = []
        for extension in self.initial_extensions:
            try:
                await self.load_extension(extension)
                loaded.append(extension.split(".")[-1])
            except Exception as e:
                failed.append(f"{extension.split('.')[-1]} ({e})")
                logger.exception(f"Failed to load {extension}")

        if loaded:
            logger.info(f"[green]Loaded cogs:[/green] {', '.join(loaded)}")
        if failed:
            logger.error(f"[red]Failed to load:[/red] {', '.join(failed)}")

        logger.info("[yellow]Syncing slash commands...[/yellow]")
        if BotConfig.GUILD_ID:
            # Guild sync is instant, global sync can take up to an hour
            guild = discord.Object(id=int(BotConfig.GUILD_ID))
            self.tree.copy_global_to(guild=guild)
            await self.tree.sync(guild=guild)
            logger.info(f"[magenta]Synced slash commands to guild {BotConfig.GUILD_ID}[/magenta]")
        else:
            await self.tree.sync()
            logger.info("[magenta]Synced slash commands globally[/magenta]")

    async def on_ready(self):
        status = BotConfig.get_status()
        activity = BotConfig.get_activity()
        await self.change_presence(status=status, activity=activity)

        logger.info(
            f"[bold green]Bot ready:[/bold green] {self.user} [dim](ID: {self.user.id})[/dim]"
        )
        logger.info(
            f"[cyan]Connected:[/cyan] {len(self.guilds)} guilds | discord.py {discord.__version__}"
        )
        logger.info(
            f"[cyan]Presence:[/cyan] {status.name} | {activity.name if activity else 'none'}"
        )

    async def close(self):
        if self.health_server:
            await self.health_server.stop()
        await self.db.disconnect()
        await super().close()


async def main():
    """Bot entry point"""
    setup_logging()

    missing = BotConfig.missing()
    if missing:
        for name in missing:
            logger.error(f"[bold red]{name} is not set[/bold red]")
        logger.error("Set it in the environment or in tabletop/.env")
        return

    db = DatabaseManager(BotConfig.DATABASE_URL, PoolConfig.for_service("bot"))
    async with TabletopBot(db) as bot:
        try:
            await bot.start(BotConfig.TOKEN)
        except (KeyboardInterrupt, asyncio.CancelledError):
            if not bot.is_closed():
                await bot.close()


def run():
    try:
        asyncio.run(main())
    except (KeyboardInterrupt, asyncio.CancelledError):
        logger.info("[yellow]Bot stopped[/yellow]")


if __name__ == "__main__":
    run()
