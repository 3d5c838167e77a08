from types import SimpleNamespace
from unittest.mock import AsyncMock

import discord
import pytest

from botc.formatter import to_chat_message

BOT_ID = 99


def _attachment(url, content_type, **extra):
    return SimpleNamespace(url=url, content_type=content_type, filename=url.rsplit("/", 1)[-1], **extra)


@pytest.mark.asyncio
async def test_only_supported_image_types_are_kept(discord_message):
    message = discord_message(
        attachments=[
            _attachment("https://x/a.png", "image/png", width=10, height=10),
            _attachment("https://x/b.webp", "image/webp"),
            _attachment("https://x/c.bmp", "image/bmp"),
            _attachment("https://x/d.pdf", "application/pdf"),
        ]
    )

    chat = await to_chat_message(message, BOT_ID)

    assert [img.url for img in chat.images] == ["https://x/a.png", "https://x/b.webp"]
    assert chat.images[0].width == 10


@pytest.mark.asyncio
async def test_voice_message_requires_ogg_with_waveform(discord_message):
    plain_ogg = discord_message(attachments=[_attachment("https://x/song.ogg", "audio/ogg", waveform=None)])
    voice = discord_message(
        attachments=[_attachment("https://x/voice.ogg", "audio/ogg", waveform=b"\x00\x10", duration=2.5)]
    )

    assert (await to_chat_message(plain_ogg, BOT_ID)).voice is None
    chat = await to_chat_message(voice, BOT_ID)
    assert chat.is_voice
    assert chat.voice.url == "https://x/voice.ogg"
    assert chat.voice.duration == 2.5


@pytest.mark.asyncio
async def test_flags_for_dm_mention_and_own_messages(discord_message):
    dm = await to_chat_message(discord_message(guild_id=None), BOT_ID)
    mention = await to_chat_message(discord_message(mentions=[SimpleNamespace(id=BOT_ID)]), BOT_ID)
    own = await to_chat_message(discord_message(author_id=BOT_ID, bot=True), BOT_ID)

    assert dm.is_direct and dm.guild_id is None
    assert mention.mentions_bot and not mention.is_direct
    assert own.is_own and own.author_is_bot and own.prompt_role == "assistant"


@pytest.mark.asyncio
async def test_resolved_reply_is_captured(discord_message):
    target = discord_message(
        id=7,
        content="what time is it?",
        display_name="Bob",
        attachments=[_attachment("https://x/r.png", "image/png")],
    )
    reference = SimpleNamespace(message_id=7, resolved=target)

    chat = await to_chat_message(discord_message(id=8, reference=reference), BOT_ID)

    assert chat.reply_to.author_name == "Bob"
    assert chat.reply_to.content == "what time is it?"
    assert [img.url for img in chat.reply_to.images] == ["https://x/r.png"]
    assert not chat.reply_to.deleted


@pytest.mark.asyncio
async def test_unresolvable_reply_is_marked_deleted(discord_message):
    not_found = discord.NotFound(SimpleNamespace(status=404, reason="Not Found"), "Unknown Message")
    channel = SimpleNamespace(id=10, fetch_message=AsyncMock(side_effect=not_found))
    reference = SimpleNamespace(message_id=7, resolved=None)

    chat = await to_chat_message(discord_message(reference=reference, channel=channel), BOT_ID)

    channel.fetch_message.assert_awaited_once_with(7)
    assert chat.reply_to.deleted
