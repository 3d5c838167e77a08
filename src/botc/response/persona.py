"""Per-(server, user) persona summaries, cached."""

from __future__ import annotations

import inspect
import logging
from typing import Awaitable, Callable, Sequence, Union

from botc.clients import CompletionProvider
from botc.enrichment import Enricher, MessageLike
from botc.memory.cache import ExpiringCache
from botc.response.history import build_payload

logger = logging.getLogger(__name__)

HistorySource = Union[Sequence[MessageLike], Callable[[], Awaitable[Sequence[MessageLike]]]]


def persona_key(server_id: int | str, user_id: int | str) -> str:
    return f"{server_id}:{user_id}"


def _display_name(item: MessageLike) -> str:
    msg = getattr(item, "message", item)
    return msg.display_name or msg.username


class PersonaSynthesizer:
    def __init__(
        self,
        cache: ExpiringCache,
        enricher: Enricher,
        completion: CompletionProvider,
        instruction: Callable[[str], str],
    ) -> None:
        self.cache = cache
        self.enricher = enricher
        self.completion = completion
        self.instruction = instruction

    async def get_persona(self, server_id: int | str, user_id: int | str, history: HistorySource) -> str:
        """
        Return the persona for ``user_id`` in ``server_id``.

        ``history`` is the user's messages or an async loader for them; a
        loader is only awaited on a cache miss. Empty history raises
        :class:`ValueError`.
        """
        key = persona_key(server_id, user_id)

        async def _synthesize() -> str:
            messages = history() if callable(history) else history
            if inspect.isawaitable(messages):
                messages = await messages
            if not messages:
                raise ValueError(f"Cannot build a persona for {key} from an empty history")

            enriched = await self.enricher.enrich(messages)
            name = _display_name(enriched[-1])
            payload = build_payload(self.instruction(name), enriched)
            persona = await self.completion.complete(payload)
            if persona:
                logger.info("Built persona for %s from %d message(s)", key, len(enriched))
            else:
                logger.warning("Persona synthesis for %s returned no text", key)
            return persona

        return await self.cache.get_or_fetch(key, _synthesize)


__all__ = ["HistorySource", "PersonaSynthesizer", "persona_key"]
