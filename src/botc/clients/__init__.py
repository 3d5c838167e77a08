"""
Interfaces the response machinery depends on.

Concrete implementations live beside this module (``disc`` for Discord,
``oai`` for OpenAI, ``ollama`` for a local model, ``brave`` for search
grounding); tests substitute lightweight fakes.
"""

from __future__ import annotations

from typing import Protocol, Sequence, runtime_checkable

from botc.formatter.model import ChatMessage


@runtime_checkable
class ChatPlatform(Protocol):
    async def fetch_channel_history(
        self,
        channel_id: int,
        *,
        since_hours: float,
        limit: int,
        author_id: int | None = None,
    ) -> list[ChatMessage]: ...

    async def fetch_guild_history(self, guild_id: int, author_id: int) -> list[ChatMessage]: ...

    async def send(
        self,
        channel_id: int,
        content: str,
        attachments: Sequence[tuple[str, bytes]] = (),
    ) -> bool: ...

    async def send_typing(self, channel_id: int) -> None: ...


class CompletionProvider(Protocol):
    async def complete(self, messages: list[dict]) -> str: ...


class VisionProvider(Protocol):
    async def describe_image(self, image_url: str) -> str: ...


class TranscriptionProvider(Protocol):
    async def transcribe_audio(self, audio: bytes, filename: str = "audio.ogg") -> str: ...


class ImageProvider(Protocol):
    async def generate_image(self, prompt: str, reference_urls: Sequence[str] = ()) -> bytes: ...


class SpeechProvider(Protocol):
    async def synthesize(self, text: str) -> bytes: ...


class GroundingProvider(Protocol):
    async def grounded_answer(self, query: str) -> str: ...


__all__ = [
    "ChatPlatform",
    "CompletionProvider",
    "GroundingProvider",
    "ImageProvider",
    "SpeechProvider",
    "TranscriptionProvider",
    "VisionProvider",
]
