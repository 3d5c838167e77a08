"""
Pipeline step for reply generation.
"""
from __future__ import annotations

import logging

from botc.clients import CompletionProvider
from botc.response.engine import PipelineContext, PipelineStep
from botc.response.errors import EmptyCompletionError
from botc.response.history import build_payload
from botc.response.system_prompt import build_system_prompt

logger = logging.getLogger(__name__)


class GenerationStep(PipelineStep):
    """
    Builds the final prompt (system prompt, persona, grounding, history) and
    asks the completion provider for the reply.
    """

    def __init__(self, completion: CompletionProvider, system_prompt: str | None = None) -> None:
        self.completion = completion
        self.system_prompt = system_prompt

    async def run(self, context: PipelineContext) -> PipelineContext:
        system = build_system_prompt(context.persona, context.grounding, base=self.system_prompt)
        context.messages = build_payload(system, context.history)

        text = await self.completion.complete(context.messages)
        if not text:
            raise EmptyCompletionError(f"No reply generated for message {context.trigger.id}")

        context.response_text = text
        context.messages.append({"role": "assistant", "content": text})
        return context
