"""Discord implementation of :class:`botc.clients.ChatPlatform`."""

from __future__ import annotations

import asyncio
import io
import logging
from datetime import datetime, timedelta, timezone
from typing import Sequence

import discord

from botc.formatter import ChatMessage, to_chat_message

logger = logging.getLogger(__name__)

DISCORD_MESSAGE_LIMIT = 2000


def split_content(content: str, limit: int = DISCORD_MESSAGE_LIMIT) -> list[str]:
    """Split ``content`` into Discord-sized chunks, preferring line breaks."""
    chunks: list[str] = []
    rest = content
    while len(rest) > limit:
        cut = rest.rfind("\n", 0, limit)
        if cut <= 0:
            cut = limit
        chunks.append(rest[:cut])
        rest = rest[cut:].lstrip("\n")
    if rest or not chunks:
        chunks.append(rest)
    return chunks


class DiscordPlatform:
    def __init__(self, client: discord.Client, *, history_hours: float, history_limit: int) -> None:
        self.client = client
        self.history_hours = history_hours
        self.history_limit = history_limit

    @property
    def bot_user_id(self) -> int | None:
        return self.client.user.id if self.client.user else None

    async def _channel(self, channel_id: int):
        return self.client.get_channel(channel_id) or await self.client.fetch_channel(channel_id)

    async def fetch_channel_history(
        self,
        channel_id: int,
        *,
        since_hours: float,
        limit: int,
        author_id: int | None = None,
    ) -> list[ChatMessage]:
        """
        Return up to ``limit`` messages from the last ``since_hours``, oldest
        first, optionally restricted to one author.

        Discord API failures (missing access, deleted channel) are logged and
        yield an empty history.
        """
        cutoff = datetime.now(timezone.utc) - timedelta(hours=since_hours)
        try:
            channel = await self._channel(channel_id)
            raw = [
                msg
                async for msg in channel.history(limit=limit)
                if msg.created_at > cutoff and (author_id is None or msg.author.id == author_id)
            ]
        except discord.HTTPException as exc:
            logger.error("Failed to fetch history for channel %s: %s", channel_id, exc)
            return []

        raw.reverse()
        return list(await asyncio.gather(*(to_chat_message(m, self.bot_user_id) for m in raw)))

    async def fetch_guild_history(self, guild_id: int, author_id: int) -> list[ChatMessage]:
        """Messages by ``author_id`` across every text channel of the guild, oldest first."""
        guild = self.client.get_guild(guild_id)
        if guild is None:
            logger.warning("Guild %s is not available", guild_id)
            return []

        per_channel = await asyncio.gather(
            *(
                self.fetch_channel_history(
                    channel.id,
                    since_hours=self.history_hours,
                    limit=self.history_limit,
                    author_id=author_id,
                )
                for channel in guild.text_channels
            )
        )
        merged = [msg for history in per_channel for msg in history]
        merged.sort(key=lambda m: m.created_at)
        return merged

    async def send(
        self,
        channel_id: int,
        content: str,
        attachments: Sequence[tuple[str, bytes]] = (),
    ) -> bool:
        channel = await self._channel(channel_id)
        chunks = split_content(content) if content else []
        files = [discord.File(io.BytesIO(data), filename=name) for name, data in attachments]

        if not chunks and not files:
            logger.warning("Refusing to send an empty message to channel %s", channel_id)
            return False

        for chunk in chunks[:-1]:
            await channel.send(content=chunk)
        await channel.send(content=chunks[-1] if chunks else None, files=files or None)
        return True

    async def send_typing(self, channel_id: int) -> None:
        channel = await self._channel(channel_id)
        await channel.typing()


__all__ = ["DiscordPlatform", "split_content"]
