"""
Core engine for the reply pipeline.
"""
from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any

from botc.formatter.model import EnrichedMessage
from botc.response.dispatch import Reply

logger = logging.getLogger(__name__)


@dataclass
class PipelineContext:
    """
    Holds the state of one reply being prepared.
    """
    # Enriched channel history; the last entry is the triggering message.
    history: list[EnrichedMessage]

    # Sender persona, filled by PersonaStep ("" when not applicable).
    persona: str = ""

    # Live search context, filled by GroundingStep ("" when not applicable).
    grounding: str = ""

    # The prompt sent to the completion provider.
    messages: list[dict[str, Any]] = field(default_factory=list)

    # Generated reply text.
    response_text: str = ""

    # Files to send with the reply.
    attachments: list[Any] = field(default_factory=list)

    # Set by a step that has produced the final reply; later steps are skipped.
    finished: bool = False

    @property
    def trigger(self) -> EnrichedMessage:
        return self.history[-1]

    def to_reply(self) -> Reply:
        return Reply(content=self.response_text, attachments=tuple(self.attachments))


class PipelineStep(ABC):
    """
    Abstract base class for a single step in the pipeline.
    """

    @abstractmethod
    async def run(self, context: PipelineContext) -> PipelineContext:
        """
        Execute the step logic.

        Args:
            context: The current pipeline context.

        Returns:
            The updated pipeline context.
        """


class ResponsePipeline:
    """
    Runs pipeline steps in order until one marks the context finished.
    """

    def __init__(self, steps: list[PipelineStep]):
        self.steps = steps

    async def run(self, context: PipelineContext) -> Reply:
        current_context = context

        for i, step in enumerate(self.steps):
            if current_context.finished:
                break
            step_name = step.__class__.__name__
            logger.debug("Running pipeline step %d: %s", i + 1, step_name)

            try:
                current_context = await step.run(current_context)
            except Exception as e:
                logger.error("Pipeline step %s failed: %s", step_name, e)
                raise

        return current_context.to_reply()


__all__ = ["PipelineContext", "PipelineStep", "ResponsePipeline"]
