import logging

import discord

from botc.formatter import to_chat_message

logger = logging.getLogger(__name__)


async def handle(client: discord.Client, message: discord.Message):
    """Hand an incoming Discord message to the orchestrator."""

    if getattr(getattr(message, "flags", None), "ephemeral", False):
        logger.debug("Skipping ephemeral message %s", message.id)
        return

    runtime = getattr(client, "runtime", None)
    if runtime is None:
        logger.warning("Message %s arrived before the bot finished setup; ignoring", message.id)
        return

    bot_user_id = client.user.id if client.user else None
    if bot_user_id is not None and message.author.id == bot_user_id:
        return

    channel_name = getattr(message.channel, "name", None) or message.channel.__class__.__name__
    logger.info("New message received in channel %s (ID: %s)", channel_name, message.channel.id)

    try:
        chat_message = await to_chat_message(message, bot_user_id)
        return await runtime.orchestrator.handle(chat_message)
    except Exception:
        logger.exception("Failed to handle message %s", message.id)
