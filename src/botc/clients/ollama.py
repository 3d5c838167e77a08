"""Helpers for interacting with a local Ollama server"""

from __future__ import annotations

import logging

from ollama import AsyncClient, ResponseError

from botc.config import local_llm

logger = logging.getLogger(__name__)


class OllamaClient:
    """Completion provider backed by a local model, used when ``USE_LOCAL`` is on."""

    def __init__(self, client: AsyncClient | None = None, model: str | None = None) -> None:
        self.client = client or AsyncClient(host=local_llm.LOCAL_SERVER_URL)
        self.model = model or local_llm.LOCAL_MODEL_ID

    async def complete(self, messages: list[dict]) -> str:
        """
        Send ``messages`` to the local server and return its reply.

        Ollama ignores OpenAI's ``name`` field, so the participant name is
        folded into the content instead.
        """
        payload = [
            {
                "role": m["role"],
                "content": f"{m['name']}: {m['content']}" if m.get("name") else m["content"],
            }
            for m in messages
        ]
        try:
            resp = await self.client.chat(model=self.model, messages=payload)
        except (ResponseError, ConnectionError) as exc:
            logger.error("Local completion failed: %s", exc)
            return ""
        return (resp.message.content or "").strip()


__all__ = ["OllamaClient"]
