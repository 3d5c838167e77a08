"""
Pipeline step that looks up the sender's persona.
"""
from __future__ import annotations

import logging

from botc.clients import ChatPlatform
from botc.response.engine import PipelineContext, PipelineStep
from botc.response.errors import MissingGuildContextError
from botc.response.persona import PersonaSynthesizer

logger = logging.getLogger(__name__)


class PersonaStep(PipelineStep):
    def __init__(self, personas: PersonaSynthesizer, platform: ChatPlatform) -> None:
        self.personas = personas
        self.platform = platform

    async def run(self, context: PipelineContext) -> PipelineContext:
        message = context.trigger.message

        if message.guild_id is not None:
            guild_id, author_id = message.guild_id, message.author_id

            async def _load_history():
                history = await self.platform.fetch_guild_history(guild_id, author_id)
                # Threads and voice-channel chats are outside the guild text channel scan
                if all(m.id != message.id for m in history):
                    history = [*history, message]
                return history

            context.persona = await self.personas.get_persona(guild_id, author_id, _load_history)
        elif message.is_direct or message.is_voice:
            context.persona = ""
        else:
            raise MissingGuildContextError(f"Message {message.id} has no guild for persona lookup")
        return context
