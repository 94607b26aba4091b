"""Tracked fire-and-forget tasks.

Work that must not delay a response (e.g., the activation email) is
spawned here instead of bare asyncio.create_task(), so shutdown can wait
for it. A failure in one task is logged and never reaches the request
that spawned it.
"""

import asyncio
import logging
from collections.abc import Coroutine
from typing import Any

logger = logging.getLogger(__name__)


class BackgroundTaskGroup:
    """Set of in-flight background tasks with a drain step for shutdown."""

    def __init__(self) -> None:
        self._tasks: set[asyncio.Task[Any]] = set()
        self._closed = False

    def __len__(self) -> int:
        return len(self._tasks)

    @property
    def closed(self) -> bool:
        return self._closed

    def spawn(self, coro: Coroutine[Any, Any, Any], *, name: str | None = None) -> asyncio.Task[Any]:
        """Schedule a coroutine and track it until it finishes.

        Args:
            coro: Coroutine to run.
            name: Optional task name used in log records.

        Returns:
            The created task.

        Raises:
            RuntimeError: If the group is draining or already drained.
        """
        if self._closed:
            coro.close()
            msg = "Background task group is closed"
            raise RuntimeError(msg)

        task = asyncio.create_task(coro, name=name)
        self._tasks.add(task)
        task.add_done_callback(self._on_done)
        return task

    def _on_done(self, task: asyncio.Task[Any]) -> None:
        self._tasks.discard(task)
        if task.cancelled():
            logger.info("Background task %s was cancelled", task.get_name())
            return
        exc = task.exception()
        if exc is not None:
            logger.error(
                "Background task %s failed",
                task.get_name(),
                exc_info=(type(exc), exc, exc.__traceback__),
            )

    async def drain(self, timeout: float | None = None) -> int:
        """Stop accepting work and wait for in-flight tasks.

        Tasks still running when the timeout expires are cancelled.

        Args:
            timeout: Seconds to wait. None waits indefinitely.

        Returns:
            Number of tasks cancelled because they outlived the timeout.
        """
        self._closed = True
        pending = set(self._tasks)
        if not pending:
            return 0

        logger.info("Waiting for %d background task(s)", len(pending))
        _, still_running = await asyncio.wait(pending, timeout=timeout)
        for task in still_running:
            task.cancel()
        if still_running:
            await asyncio.gather(*still_running, return_exceptions=True)
            logger.warning(
                "Cancelled %d background task(s) at shutdown", len(still_running)
            )
        return len(still_running)
