from datetime import datetime, timedelta, timezone
from types import SimpleNamespace
from unittest.mock import AsyncMock

import discord
import pytest

from botc.clients.platform import DiscordPlatform, split_content

BASE_TIME = datetime(2024, 1, 2, 15, 4, 5, tzinfo=timezone.utc)


class FakeChannel:
    def __init__(self, channel_id, messages=(), error=None):
        self.id = channel_id
        self.messages = list(messages)
        self.error = error
        self.send = AsyncMock()
        self.typing = AsyncMock()

    def history(self, limit):
        async def _gen():
            if self.error:
                raise self.error
            for m in self.messages[:limit]:
                yield m

        return _gen()


def _client(*channels):
    by_id = {c.id: c for c in channels}
    return SimpleNamespace(
        user=SimpleNamespace(id=99),
        get_channel=lambda cid: by_id.get(cid),
        fetch_channel=AsyncMock(),
        get_guild=lambda gid: SimpleNamespace(id=gid, text_channels=list(channels)),
    )


@pytest.fixture(autouse=True)
def _fixed_now(monkeypatch):
    class _FrozenDatetime:
        @staticmethod
        def now(tz=None):
            return BASE_TIME

    monkeypatch.setattr("botc.clients.platform.datetime", _FrozenDatetime)


@pytest.mark.asyncio
async def test_channel_history_is_windowed_and_oldest_first(discord_message):
    newest = discord_message(id=3, content="newest", created_at=BASE_TIME - timedelta(minutes=1))
    middle = discord_message(id=2, content="middle", created_at=BASE_TIME - timedelta(hours=2))
    stale = discord_message(id=1, content="stale", created_at=BASE_TIME - timedelta(hours=30))
    channel = FakeChannel(10, [newest, middle, stale])
    platform = DiscordPlatform(_client(channel), history_hours=24, history_limit=100)

    history = await platform.fetch_channel_history(10, since_hours=24, limit=100)

    assert [m.content for m in history] == ["middle", "newest"]


@pytest.mark.asyncio
async def test_channel_history_author_filter(discord_message):
    channel = FakeChannel(
        10,
        [
            discord_message(id=2, author_id=2, created_at=BASE_TIME),
            discord_message(id=1, author_id=1, created_at=BASE_TIME),
        ],
    )
    platform = DiscordPlatform(_client(channel), history_hours=24, history_limit=100)

    history = await platform.fetch_channel_history(10, since_hours=24, limit=100, author_id=1)

    assert [m.id for m in history] == [1]


@pytest.mark.asyncio
async def test_channel_history_api_error_yields_empty():
    forbidden = discord.Forbidden(SimpleNamespace(status=403, reason="Forbidden"), "Missing Access")
    platform = DiscordPlatform(_client(FakeChannel(10, error=forbidden)), history_hours=24, history_limit=100)

    assert await platform.fetch_channel_history(10, since_hours=24, limit=100) == []


@pytest.mark.asyncio
async def test_guild_history_merges_channels_by_time(discord_message):
    a = FakeChannel(10, [discord_message(id=5, created_at=BASE_TIME - timedelta(minutes=5))])
    b = FakeChannel(11, [discord_message(id=6, created_at=BASE_TIME - timedelta(minutes=10))])
    platform = DiscordPlatform(_client(a, b), history_hours=24, history_limit=100)

    history = await platform.fetch_guild_history(500, author_id=1)

    assert [m.id for m in history] == [6, 5]


@pytest.mark.asyncio
async def test_send_chunks_long_text_and_attaches_files_last():
    channel = FakeChannel(10)
    platform = DiscordPlatform(_client(channel), history_hours=24, history_limit=100)

    assert await platform.send(10, "a" * 2500, [("x.png", b"PNG")]) is True

    assert channel.send.await_count == 2
    first, last = channel.send.await_args_list
    assert len(first.kwargs["content"]) == 2000
    assert len(last.kwargs["files"]) == 1


@pytest.mark.asyncio
async def test_send_refuses_empty_message():
    platform = DiscordPlatform(_client(FakeChannel(10)), history_hours=24, history_limit=100)
    assert await platform.send(10, "") is False


@pytest.mark.asyncio
async def test_send_typing_awaits_channel_typing():
    channel = FakeChannel(10)
    platform = DiscordPlatform(_client(channel), history_hours=24, history_limit=100)

    await platform.send_typing(10)

    channel.typing.assert_awaited_once()


def test_split_content_prefers_line_breaks():
    text = "x" * 1500 + "\n" + "y" * 1000
    assert split_content(text) == ["x" * 1500, "y" * 1000]
    assert split_content("short") == ["short"]
