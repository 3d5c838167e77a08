"""
Pipeline step that turns the reply into speech for voice messages.
"""
from __future__ import annotations

import logging
import time

from botc.clients import SpeechProvider
from botc.response.dispatch import ReplyAttachment
from botc.response.engine import PipelineContext, PipelineStep
from botc.response.errors import EmptyCompletionError

logger = logging.getLogger(__name__)


class VoiceStep(PipelineStep):
    def __init__(self, speech: SpeechProvider, *, enabled: bool) -> None:
        self.speech = speech
        self.enabled = enabled

    async def run(self, context: PipelineContext) -> PipelineContext:
        if not (self.enabled and context.trigger.message.is_voice):
            return context

        audio = await self.speech.synthesize(context.response_text)
        if not audio:
            raise EmptyCompletionError(f"Speech synthesis returned nothing for message {context.trigger.id}")

        context.attachments.append(ReplyAttachment(f"botc-voice-response-{int(time.time())}.mp3", audio))
        context.response_text = ""
        context.finished = True
        return context
