"""Per-message flow: history, enrichment, decision, generation, dispatch."""

from __future__ import annotations

import logging
from typing import Sequence

from botc.clients import ChatPlatform
from botc.enrichment import Enricher
from botc.formatter.model import ChatMessage, EnrichedMessage
from botc.response.decision import ReplyDecider
from botc.response.dispatch import DispatchResult, Dispatcher, Reply
from botc.response.engine import PipelineContext, ResponsePipeline

logger = logging.getLogger(__name__)

ERROR_REPLY = "There was an error preparing the response."


def anchor_history(history: Sequence[ChatMessage], trigger: ChatMessage) -> list[ChatMessage]:
    """History ending at ``trigger``; it is appended when the fetch missed it."""
    for index, msg in enumerate(history):
        if msg.id == trigger.id:
            return list(history[: index + 1])
    return [*history, trigger]


class Orchestrator:
    def __init__(
        self,
        platform: ChatPlatform,
        enricher: Enricher,
        decider: ReplyDecider,
        dispatcher: Dispatcher,
        pipeline: ResponsePipeline,
        *,
        history_hours: float,
        history_limit: int,
    ) -> None:
        self.platform = platform
        self.enricher = enricher
        self.decider = decider
        self.dispatcher = dispatcher
        self.pipeline = pipeline
        self.history_hours = history_hours
        self.history_limit = history_limit

    async def handle(self, message: ChatMessage) -> DispatchResult | None:
        """
        Respond to ``message`` if the decision engine says so.

        Returns ``None`` when the bot stays quiet, otherwise the dispatch
        outcome. Failures while preparing the reply are sent to the channel
        as a fixed error text.
        """
        fetched = await self.platform.fetch_channel_history(
            message.channel_id,
            since_hours=self.history_hours,
            limit=self.history_limit,
        )
        history = await self.enricher.enrich(anchor_history(fetched, message))

        if not await self.decider.should_reply(history):
            logger.debug("Not replying to message %s", message.id)
            return None

        logger.info("Replying to message %s in channel %s", message.id, message.channel_id)
        result = await self.dispatcher.dispatch(message.channel_id, lambda: self._produce(history))
        if not result.delivered:
            logger.error("Reply to message %s was not delivered", message.id)
        return result

    async def _produce(self, history: list[EnrichedMessage]) -> Reply:
        try:
            return await self.pipeline.run(PipelineContext(history=list(history)))
        except Exception:
            logger.exception("Error preparing the response to message %s", history[-1].id)
            return Reply(content=ERROR_REPLY)


__all__ = ["ERROR_REPLY", "Orchestrator", "anchor_history"]
