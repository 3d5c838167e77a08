"""Discord bot bootstrap utilities."""

from __future__ import annotations

import logging

import discord
from discord.ext import commands as discord_commands

from botc.app import Runtime, build_runtime
from botc.config import core
from botc.event_hooks import message_hook, ready_hook

logger = logging.getLogger(__name__)

# --- Intents --------------------------------------------------------------- #
intents = discord.Intents.all()


class BotcBot(discord_commands.Bot):
    """Chat bot that replies when addressed or when it has something to add."""

    def __init__(self) -> None:
        super().__init__(command_prefix=discord_commands.when_mentioned, intents=intents)
        self.runtime: Runtime | None = None

    async def setup_hook(self) -> None:
        self.runtime = build_runtime(self)

    async def close(self) -> None:
        if self.runtime is not None:
            await self.runtime.caches.stop()
        await super().close()


bot = BotcBot()


@bot.event
async def on_ready() -> None:
    await ready_hook.handle(bot)


@bot.event
async def on_message(message: discord.Message) -> None:
    await message_hook.handle(bot, message)


def run() -> None:
    """Start the Discord bot using configuration from the environment."""

    if not core.DISCORD_BOT_TOKEN:
        logger.error("No DISCORD_BOT_TOKEN configured. Cannot run client.")
        return

    try:
        bot.run(core.DISCORD_BOT_TOKEN, log_handler=None)
    except discord.LoginFailure as exc:
        logger.error("Login failed: %s", exc)
