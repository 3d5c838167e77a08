"""
Pipeline step that answers image generation and edit requests with an image.
"""
from __future__ import annotations

import logging
import time

from botc.clients import CompletionProvider, ImageProvider
from botc.formatter.model import ChatMessage
from botc.response.dispatch import ReplyAttachment
from botc.response.engine import PipelineContext, PipelineStep
from botc.response.errors import EmptyCompletionError

logger = logging.getLogger(__name__)


def reference_urls(message: ChatMessage) -> list[str]:
    """Images on the message itself, then images on the message it replied to."""
    urls = [img.url for img in message.images]
    if message.reply_to is not None and not message.reply_to.deleted:
        urls.extend(img.url for img in message.reply_to.images)
    return urls


class ImageRequestStep(PipelineStep):
    def __init__(
        self,
        completion: CompletionProvider,
        images: ImageProvider,
        *,
        classifier_prompt: str,
        voice_replies: bool,
    ) -> None:
        self.completion = completion
        self.images = images
        self.classifier_prompt = classifier_prompt
        self.voice_replies = voice_replies

    async def is_image_request(self, message: ChatMessage) -> bool:
        if not message.text:
            return False
        answer = await self.completion.complete(
            [
                {"role": "system", "content": self.classifier_prompt},
                {"role": "user", "name": message.prompt_name, "content": message.text},
            ]
        )
        return answer.strip().lower() == "yes"

    async def run(self, context: PipelineContext) -> PipelineContext:
        message = context.trigger.message
        # Voice messages get a spoken reply even when they ask for a picture
        if self.voice_replies and message.is_voice:
            return context
        if not await self.is_image_request(message):
            return context

        refs = reference_urls(message)
        logger.info("Generating image for message %s with %d reference(s)", message.id, len(refs))
        data = await self.images.generate_image(message.text, refs)
        if not data:
            raise EmptyCompletionError(f"Image generation returned nothing for message {message.id}")

        context.attachments.append(ReplyAttachment(f"botc-image-{int(time.time())}.png", data))
        context.finished = True
        return context
