"""
Scheduling helpers for recurring background jobs.

Components that own a periodic job (cache sweeps, typing keep-alives) start
it through :func:`startup` and hand the returned task back to
:func:`shutdown` when their scope ends.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Awaitable, Callable

logger = logging.getLogger(__name__)


def startup(
    task_fn: Callable[[], Awaitable[None]],
    interval: float,
    *,
    immediate: bool = False,
    name: str | None = None,
) -> asyncio.Task:
    """
    Schedule ``task_fn`` to run every ``interval`` seconds until cancelled.

    By default the first run happens after one interval; ``immediate`` runs it
    straight away. Exceptions raised by ``task_fn`` are logged and the loop
    keeps going.
    """

    async def _periodic() -> None:
        if not immediate:
            await asyncio.sleep(interval)
        while True:
            try:
                await task_fn()
            except Exception as exc:
                logger.error("Periodic task %s failed: %s", name or task_fn, exc)
            await asyncio.sleep(interval)

    return asyncio.create_task(_periodic(), name=name)


async def shutdown(task: asyncio.Task | None) -> None:
    """
    Cancel a task started with :func:`startup` and wait for it to finish.

    ``None`` is accepted so callers need not track whether they started.
    """

    if not task:
        return

    task.cancel()
    try:
        await task
    except asyncio.CancelledError:
        pass
