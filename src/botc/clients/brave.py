"""Brave AI Grounding through its OpenAI-compatible chat endpoint."""

from __future__ import annotations

import logging

from openai import AsyncOpenAI, OpenAIError

from botc.config import core

logger = logging.getLogger(__name__)

BRAVE_BASE_URL = "https://api.search.brave.com/res/v1"
BRAVE_MODEL = "brave"


class BraveClient:
    def __init__(self, client: AsyncOpenAI | None = None) -> None:
        self.client = client or AsyncOpenAI(
            api_key=core.BRAVE_API_KEY,
            base_url=BRAVE_BASE_URL,
            timeout=core.GROUNDING_TIMEOUT,
            max_retries=core.OPENAI_MAX_RETRIES,
        )

    async def grounded_answer(self, query: str) -> str:
        """Answer ``query`` from live search results; ``""`` when Brave refuses."""
        try:
            resp = await self.client.chat.completions.create(
                model=BRAVE_MODEL,
                messages=[{"role": "user", "content": query}],
                stream=False,
                extra_body={"country": "us", "enable_research": False, "language": "en"},
            )
        except OpenAIError as exc:
            logger.error("Brave grounding request failed: %s", exc)
            return ""
        answer = (resp.choices[0].message.content or "").strip()
        logger.debug("Brave grounding answer: %s", answer)
        return answer


__all__ = ["BraveClient", "BRAVE_BASE_URL"]
