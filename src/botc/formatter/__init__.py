"""Message snapshot models and the Discord message converter."""

from .classifier import to_chat_message
from .model import (
    ChatMessage,
    EnrichedMessage,
    ImageAttachment,
    ReplyReference,
    VoiceAttachment,
)

__all__ = [
    "ChatMessage",
    "EnrichedMessage",
    "ImageAttachment",
    "ReplyReference",
    "VoiceAttachment",
    "to_chat_message",
]
