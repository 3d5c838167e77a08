"""Render enriched messages into chat-completion history entries."""

from __future__ import annotations

from datetime import datetime
from typing import Iterable, List

from botc.formatter.model import EnrichedMessage, ReplyReference

TIMESTAMP_FORMAT = "%m/%d/%Y, %I:%M:%S %p %Z"
IMAGE_SEPARATOR = "\n---\n"


def _timestamp(value: datetime | None) -> str:
    return value.strftime(TIMESTAMP_FORMAT).strip() if value else "unknown"


def render_reply_context(reply: ReplyReference | None) -> str | None:
    if reply is None:
        return None
    if reply.deleted:
        return "The message that was replied to was deleted."
    return "\n".join(
        [
            "---",
            "Focus your response on this message that was replied to:",
            f"- Message author: {reply.author_name}",
            f"- Message timestamp: {_timestamp(reply.created_at)}",
            f"- Message content: {reply.content}",
            "---",
        ]
    )


def render_content(item: EnrichedMessage) -> str:
    """
    Message text followed by a ``<Message Metadata>`` block.

    A voice message with no typed text uses its transcription as the body;
    otherwise the transcription goes in the metadata block.
    """
    msg = item.message
    body = msg.text
    transcription = item.transcription
    if not body and transcription:
        body, transcription = transcription, None

    lines: list[str | None] = [
        body,
        "<Message Metadata>",
        f"Preferred name: {msg.display_name or msg.username}",
        f"Message timestamp: {_timestamp(msg.created_at)}",
        f"Image descriptions:\n{IMAGE_SEPARATOR.join(item.image_descriptions)}"
        if item.image_descriptions
        else None,
        f"Voice message transcription:\n{transcription}" if transcription else None,
        render_reply_context(msg.reply_to),
        "</Message Metadata>",
    ]
    return "\n".join(line for line in lines if line is not None)


def render_message(item: EnrichedMessage) -> dict[str, str]:
    return {
        "role": item.message.prompt_role,
        "name": item.message.prompt_name,
        "content": render_content(item),
    }


def render_history(history: Iterable[EnrichedMessage]) -> List[dict[str, str]]:
    return [render_message(item) for item in history]


def build_payload(system_prompt: str, history: Iterable[EnrichedMessage]) -> List[dict[str, str]]:
    """System message followed by the rendered history."""
    return [{"role": "system", "content": system_prompt}, *render_history(history)]


__all__ = ["build_payload", "render_content", "render_history", "render_message", "render_reply_context"]
