"""Turn ``discord.Message`` objects into :class:`ChatMessage` snapshots."""

from __future__ import annotations

import logging
from typing import Any, Iterable, Tuple

import discord

from .model import (
    ALLOWED_IMAGE_TYPES,
    VOICE_CONTENT_TYPE,
    ChatMessage,
    ImageAttachment,
    ReplyReference,
    VoiceAttachment,
)

logger = logging.getLogger(__name__)

# --------------------------------------------------------------------- #
#  Helpers
# --------------------------------------------------------------------- #


def _mime(att: Any) -> str:
    return (getattr(att, "content_type", None) or "").split(";")[0].strip().lower()


def _images(attachments: Iterable[Any]) -> Tuple[ImageAttachment, ...]:
    return tuple(
        ImageAttachment(
            url=att.url,
            content_type=_mime(att),
            filename=getattr(att, "filename", "") or "",
            width=getattr(att, "width", None),
            height=getattr(att, "height", None),
        )
        for att in attachments
        if _mime(att) in ALLOWED_IMAGE_TYPES
    )


def _voice(attachments: Iterable[Any]) -> VoiceAttachment | None:
    """Discord voice messages are ogg attachments that carry a waveform."""
    for att in attachments:
        if _mime(att).startswith(VOICE_CONTENT_TYPE) and getattr(att, "waveform", None) is not None:
            return VoiceAttachment(
                url=att.url,
                content_type=_mime(att),
                duration=getattr(att, "duration", None),
            )
    return None


def _author_name(author: Any) -> str:
    return getattr(author, "display_name", None) or getattr(author, "name", "") or ""


async def _reply_reference(message: discord.Message) -> ReplyReference | None:
    ref = getattr(message, "reference", None)
    if ref is None or ref.message_id is None:
        return None

    target = ref.resolved
    if isinstance(target, discord.DeletedReferencedMessage):
        return ReplyReference(message_id=ref.message_id, deleted=True)

    if target is None:
        try:
            target = await message.channel.fetch_message(ref.message_id)
        except discord.NotFound:
            return ReplyReference(message_id=ref.message_id, deleted=True)
        except discord.HTTPException as exc:
            logger.warning("Could not resolve reply %s for message %s: %s", ref.message_id, message.id, exc)
            return None

    return ReplyReference(
        message_id=target.id,
        author_name=_author_name(target.author),
        content=getattr(target, "clean_content", None) or target.content or "",
        created_at=target.created_at,
        images=_images(target.attachments),
    )


# --------------------------------------------------------------------- #
#  Main entry
# --------------------------------------------------------------------- #


async def to_chat_message(message: discord.Message, bot_user_id: int | None) -> ChatMessage:
    """
    Snapshot ``message`` into a :class:`ChatMessage`.

    Only gif/jpeg/png/webp attachments are kept as images and at most one
    voice clip is recognised. Replies are resolved from the cached reference
    first and fetched from Discord otherwise.
    """
    author = message.author
    guild = getattr(message, "guild", None)
    mentions = getattr(message, "mentions", None) or []

    return ChatMessage(
        id=message.id,
        channel_id=message.channel.id,
        author_id=author.id,
        username=getattr(author, "name", "") or "",
        display_name=_author_name(author),
        content=message.content or "",
        clean_content=getattr(message, "clean_content", None) or "",
        created_at=message.created_at,
        guild_id=guild.id if guild is not None else None,
        images=_images(message.attachments),
        voice=_voice(message.attachments),
        reply_to=await _reply_reference(message),
        is_direct=guild is None,
        author_is_bot=bool(getattr(author, "bot", False)),
        is_own=bot_user_id is not None and author.id == bot_user_id,
        mentions_bot=bot_user_id is not None and any(m.id == bot_user_id for m in mentions),
    )


__all__ = ["to_chat_message"]
