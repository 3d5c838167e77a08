"""Concurrent image-description and voice-transcription fan-out."""

from __future__ import annotations

import asyncio
import logging
from typing import Awaitable, Callable, Optional, Sequence, Union

from botc.clients import TranscriptionProvider, VisionProvider
from botc.formatter.model import ChatMessage, EnrichedMessage, ImageAttachment
from botc.memory.cache import CacheSet

logger = logging.getLogger(__name__)

MessageLike = Union[ChatMessage, EnrichedMessage]


class Enricher:
    """
    Annotate a batch of messages with image descriptions and transcriptions.

    Every image and every voice clip in the batch is one unit of work; all
    units run concurrently and are joined before :meth:`enrich` returns. A
    failing or empty unit leaves only its own field unset.
    """

    def __init__(
        self,
        caches: CacheSet,
        vision: VisionProvider,
        transcriber: TranscriptionProvider,
        prepare_image: Callable[[ImageAttachment], Awaitable[str]],
        fetch_audio: Callable[[str], Awaitable[bytes]],
    ) -> None:
        self.caches = caches
        self.vision = vision
        self.transcriber = transcriber
        self.prepare_image = prepare_image
        self.fetch_audio = fetch_audio

    async def describe(self, image: ImageAttachment) -> Optional[str]:
        async def _fetch() -> str:
            prepared = await self.prepare_image(image)
            return await self.vision.describe_image(prepared)

        try:
            description = await self.caches.image_descriptions.get_or_fetch(image.url, _fetch)
        except Exception as exc:
            logger.error("Failed to describe image %s: %s", image.url, exc)
            return None
        if not description:
            logger.warning("Vision provider returned no description for %s", image.url)
            return None
        return description

    async def transcribe(self, url: str) -> Optional[str]:
        async def _fetch() -> str:
            audio = await self.fetch_audio(url)
            return await self.transcriber.transcribe_audio(audio, filename="voice-message.ogg")

        try:
            transcript = await self.caches.transcriptions.get_or_fetch(url, _fetch)
        except Exception as exc:
            logger.error("Failed to transcribe voice message %s: %s", url, exc)
            return None
        if not transcript:
            logger.warning("Transcription provider returned no text for %s", url)
            return None
        return transcript

    async def _enrich_one(self, item: MessageLike) -> EnrichedMessage:
        enriched = item if isinstance(item, EnrichedMessage) else EnrichedMessage(item)
        if not enriched.needs_enrichment:
            return enriched

        msg = enriched.message
        descriptions, transcript = await asyncio.gather(
            asyncio.gather(*(self.describe(img) for img in msg.images)),
            self.transcribe(msg.voice.url) if msg.voice else _none(),
        )
        return enriched.with_descriptions(
            tuple(d for d in descriptions if d)
        ).with_transcription(transcript)

    async def enrich(self, messages: Sequence[MessageLike]) -> list[EnrichedMessage]:
        """Return one :class:`EnrichedMessage` per input, in input order."""
        if not messages:
            return []
        results = await asyncio.gather(*(self._enrich_one(m) for m in messages))
        logger.debug("Enriched %d message(s)", len(results))
        return list(results)


async def _none() -> None:
    return None


__all__ = ["Enricher", "MessageLike"]
