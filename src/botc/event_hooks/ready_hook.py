import asyncio
import logging

import discord

from botc.config import core

logger = logging.getLogger(__name__)


async def handle(client: discord.Client):
    """Start cache sweeps and warm the enrichment caches once Discord is ready."""
    logger.info(f"Logged in as {client.user.name} (ID: {client.user.id})")
    for guild in client.guilds:
        logger.info("Connected to guild %s (ID: %s)", guild.name, guild.id)

    runtime = client.runtime
    runtime.caches.start()

    # on_ready fires again after every reconnect
    if runtime.prefetched:
        logger.info("Reconnected; multimedia prefetch already done")
        return
    runtime.prefetched = True
    await prefetch(runtime)


async def prefetch(runtime) -> int:
    """Describe images and transcribe voice clips across every readable channel."""
    client = runtime.platform.client
    channel_ids = [channel.id for guild in client.guilds for channel in guild.text_channels]
    logger.info("Prefetching multimedia for %d channel(s)", len(channel_ids))

    histories = await asyncio.gather(
        *(
            runtime.platform.fetch_channel_history(
                cid,
                since_hours=core.CHANNEL_HISTORY_HOURS,
                limit=core.CHANNEL_HISTORY_MESSAGES,
            )
            for cid in channel_ids
        ),
        return_exceptions=True,
    )
    messages = []
    for cid, history in zip(channel_ids, histories):
        if isinstance(history, Exception):
            logger.error("Prefetch failed for channel %s: %s", cid, history)
            continue
        messages.extend(m for m in history if m.has_images or m.is_voice)

    await runtime.enricher.enrich(messages)
    logger.info("Prefetched enrichment for %d message(s)", len(messages))
    return len(messages)
