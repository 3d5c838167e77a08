import os, sys
import warnings
from datetime import datetime, timedelta, timezone
from pathlib import Path
from types import SimpleNamespace

import pytest

# Make the src/ layout importable without an editable install
sys.path.insert(0, str(Path(__file__).resolve().parent.parent / "src"))

# Required by botc.config.core at import time
os.environ.setdefault("DISCORD_BOT_TOKEN", "test-token")
os.environ.setdefault("OPENAI_API_KEY", "test-openai")

# Silence deprecation warnings surfaced from third-party dependencies during tests
warnings.filterwarnings(
    "ignore", category=DeprecationWarning, module=r"^discord\\.player$"
)
warnings.filterwarnings("ignore", "'audioop' is deprecated", DeprecationWarning)


def pytest_configure(config):
    warnings.filterwarnings(
        "ignore", category=DeprecationWarning, module=r"^discord\\.player$"
    )
    warnings.filterwarnings("ignore", "'audioop' is deprecated", DeprecationWarning)


BASE_TIME = datetime(2024, 1, 2, 15, 4, 5, tzinfo=timezone.utc)


class FakeClock:
    def __init__(self, now: float = 1_000_000.0) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def make_message():
    """Factory for ChatMessage snapshots with sensible defaults."""
    from botc.formatter.model import ChatMessage

    counter = iter(range(1, 10_000))

    def _make(**overrides):
        msg_id = overrides.pop("id", next(counter))
        fields = dict(
            id=msg_id,
            channel_id=10,
            author_id=1,
            username="alice",
            display_name="Alice",
            content="hello",
            created_at=BASE_TIME + timedelta(seconds=msg_id),
            guild_id=500,
        )
        fields.update(overrides)
        return ChatMessage(**fields)

    return _make


@pytest.fixture
def caches(clock):
    from botc.memory.cache import CacheSet, ExpiringCache

    return CacheSet(
        image_descriptions=ExpiringCache("image-descriptions", 24, clock=clock),
        personas=ExpiringCache("personas", 24, clock=clock),
        transcriptions=ExpiringCache("transcriptions", 24, clock=clock),
    )


@pytest.fixture
def discord_message():
    """Factory for discord.Message look-alikes accepted by the classifier."""

    def _make(
        *,
        id=1,
        content="hello",
        author_id=1,
        author_name="alice",
        display_name="Alice",
        bot=False,
        guild_id=500,
        channel_id=10,
        attachments=(),
        mentions=(),
        reference=None,
        created_at=None,
        channel=None,
    ):
        return SimpleNamespace(
            id=id,
            content=content,
            clean_content=content,
            author=SimpleNamespace(id=author_id, name=author_name, display_name=display_name, bot=bot),
            guild=SimpleNamespace(id=guild_id) if guild_id is not None else None,
            channel=channel or SimpleNamespace(id=channel_id, name="general"),
            attachments=list(attachments),
            mentions=list(mentions),
            reference=reference,
            created_at=created_at or BASE_TIME,
            flags=SimpleNamespace(ephemeral=False),
        )

    return _make
