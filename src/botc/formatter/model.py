"""Dataclass models for chat messages and their enrichment.

``ChatMessage`` is a platform-neutral snapshot of a Discord message.
``EnrichedMessage`` pairs a snapshot with the image descriptions and voice
transcription gathered for it. Both are frozen; enrichment builds new
``EnrichedMessage`` values instead of mutating a shared message.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field, replace
from datetime import datetime
from typing import Literal, Optional, Tuple

ALLOWED_IMAGE_TYPES = frozenset({"image/gif", "image/jpeg", "image/png", "image/webp"})
VOICE_CONTENT_TYPE = "audio/ogg"

_NAME_SANITIZER = re.compile(r"[^a-zA-Z0-9_-]")

PromptRole = Literal["user", "assistant"]


def sanitize_name(name: str) -> str:
    """Make ``name`` acceptable as a chat-completion participant name."""
    return _NAME_SANITIZER.sub("-", name)


@dataclass(frozen=True, slots=True)
class ImageAttachment:
    url: str
    content_type: str
    filename: str = ""
    width: Optional[int] = None
    height: Optional[int] = None


@dataclass(frozen=True, slots=True)
class VoiceAttachment:
    url: str
    content_type: str = VOICE_CONTENT_TYPE
    duration: Optional[float] = None


@dataclass(frozen=True, slots=True)
class ReplyReference:
    """The message a chat message replied to, or a marker that it is gone."""

    message_id: int
    author_name: str = ""
    content: str = ""
    created_at: Optional[datetime] = None
    images: Tuple[ImageAttachment, ...] = ()
    deleted: bool = False


@dataclass(frozen=True, slots=True)
class ChatMessage:
    id: int
    channel_id: int
    author_id: int
    username: str
    display_name: str
    content: str
    created_at: datetime
    clean_content: str = ""
    guild_id: Optional[int] = None
    images: Tuple[ImageAttachment, ...] = ()
    voice: Optional[VoiceAttachment] = None
    reply_to: Optional[ReplyReference] = None
    is_direct: bool = False
    author_is_bot: bool = False
    is_own: bool = False
    mentions_bot: bool = False

    @property
    def has_images(self) -> bool:
        return bool(self.images)

    @property
    def is_voice(self) -> bool:
        return self.voice is not None

    @property
    def text(self) -> str:
        return self.clean_content or self.content

    @property
    def prompt_role(self) -> PromptRole:
        return "assistant" if self.is_own else "user"

    @property
    def prompt_name(self) -> str:
        return sanitize_name(self.username)


@dataclass(frozen=True, slots=True)
class EnrichedMessage:
    message: ChatMessage
    image_descriptions: Tuple[str, ...] = field(default=())
    transcription: Optional[str] = None

    @property
    def id(self) -> int:
        return self.message.id

    @property
    def needs_enrichment(self) -> bool:
        if self.message.has_images and not self.image_descriptions:
            return True
        return self.message.is_voice and self.transcription is None

    def with_descriptions(self, descriptions: Tuple[str, ...]) -> "EnrichedMessage":
        return replace(self, image_descriptions=tuple(descriptions))

    def with_transcription(self, transcription: Optional[str]) -> "EnrichedMessage":
        return replace(self, transcription=transcription)


__all__ = [
    "ALLOWED_IMAGE_TYPES",
    "VOICE_CONTENT_TYPE",
    "ChatMessage",
    "EnrichedMessage",
    "ImageAttachment",
    "ReplyReference",
    "VoiceAttachment",
    "sanitize_name",
]
