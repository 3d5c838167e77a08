"""Optional web-search grounding for replies."""

from __future__ import annotations

import json
import logging
from typing import Sequence

from botc.clients import CompletionProvider, GroundingProvider
from botc.formatter.model import EnrichedMessage
from botc.response.history import build_payload

logger = logging.getLogger(__name__)


def parse_ground_decision(raw: str) -> bool:
    try:
        data = json.loads(raw.strip())
    except json.JSONDecodeError:
        logger.warning("Grounding decision was not valid JSON: %r", raw)
        return '"true"' in raw.lower()
    return isinstance(data, dict) and data.get("willGround") is True


class GroundingAdvisor:
    """Decide whether a reply needs live search results and fetch them."""

    def __init__(
        self,
        completion: CompletionProvider,
        provider: GroundingProvider | None,
        *,
        enabled: bool,
        decision_prompt: str,
        query_prompt: str,
    ) -> None:
        self.completion = completion
        self.provider = provider
        self.enabled = enabled and provider is not None
        self.decision_prompt = decision_prompt
        self.query_prompt = query_prompt

    async def will_ground(self, history: Sequence[EnrichedMessage]) -> bool:
        if not self.enabled:
            return False
        raw = await self.completion.complete(build_payload(self.decision_prompt, history))
        logger.debug("Grounding decision response: %s", raw)
        return parse_ground_decision(raw)

    async def context_for(self, history: Sequence[EnrichedMessage]) -> str:
        """Grounding text for the conversation, or ``""`` when none applies."""
        if not await self.will_ground(history):
            return ""

        query = await self.completion.complete(build_payload(self.query_prompt, history))
        if not query:
            return ""
        logger.debug("Grounding query: %s", query)
        return await self.provider.grounded_answer(query)


__all__ = ["GroundingAdvisor", "parse_ground_decision"]
