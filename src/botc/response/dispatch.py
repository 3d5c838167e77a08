"""
Reply delivery: typing keep-alive plus bounded send retry.

Discord clears a typing indicator after roughly ten seconds, so
:meth:`Dispatcher.keep_typing` re-sends it on a shorter interval for as long
as its ``async with`` block runs.
"""

from __future__ import annotations

import asyncio
import logging
from contextlib import asynccontextmanager
from dataclasses import dataclass, field
from typing import AsyncIterator, Awaitable, Callable, Tuple

from botc import maintenance
from botc.clients import ChatPlatform

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class ReplyAttachment:
    filename: str
    data: bytes


@dataclass(frozen=True, slots=True)
class Reply:
    content: str = ""
    attachments: Tuple[ReplyAttachment, ...] = field(default=())


@dataclass(frozen=True, slots=True)
class DispatchResult:
    delivered: bool
    attempts: int


class Dispatcher:
    def __init__(
        self,
        platform: ChatPlatform,
        *,
        max_attempts: int = 3,
        retry_delay: float = 1.0,
        typing_interval: float = 9.0,
    ) -> None:
        self.platform = platform
        self.max_attempts = max(1, max_attempts)
        self.retry_delay = retry_delay
        self.typing_interval = typing_interval

    async def _signal_typing(self, channel_id: int) -> None:
        try:
            await self.platform.send_typing(channel_id)
        except Exception as exc:
            logger.warning("Typing indicator failed for channel %s: %s", channel_id, exc)

    @asynccontextmanager
    async def keep_typing(self, channel_id: int) -> AsyncIterator[None]:
        """Show the typing indicator now and keep refreshing it until the block exits."""
        await self._signal_typing(channel_id)
        task = maintenance.startup(
            lambda: self._signal_typing(channel_id),
            self.typing_interval,
            name=f"typing-{channel_id}",
        )
        try:
            yield
        finally:
            await maintenance.shutdown(task)

    async def send(self, channel_id: int, reply: Reply) -> DispatchResult:
        """
        Deliver ``reply`` with at most ``max_attempts`` tries.

        After the k-th failed try (counting from zero) the next one waits
        ``k * retry_delay`` seconds. Exhausting every try is reported in the
        result, not raised.
        """
        files = [(a.filename, a.data) for a in reply.attachments]
        for attempt in range(self.max_attempts):
            if attempt:
                await asyncio.sleep((attempt - 1) * self.retry_delay)
            try:
                if await self.platform.send(channel_id, reply.content, files):
                    return DispatchResult(delivered=True, attempts=attempt + 1)
                logger.warning("Send to channel %s rejected (attempt %d)", channel_id, attempt + 1)
            except Exception as exc:
                logger.warning("Send to channel %s failed (attempt %d): %s", channel_id, attempt + 1, exc)

        logger.error("Giving up on channel %s after %d attempt(s)", channel_id, self.max_attempts)
        return DispatchResult(delivered=False, attempts=self.max_attempts)

    async def dispatch(self, channel_id: int, produce: Callable[[], Awaitable[Reply]]) -> DispatchResult:
        """Run ``produce`` while typing, then send what it returned."""
        async with self.keep_typing(channel_id):
            reply = await produce()
        return await self.send(channel_id, reply)


__all__ = ["DispatchResult", "Dispatcher", "Reply", "ReplyAttachment"]
