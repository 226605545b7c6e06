"""Generic periodic async callback runner."""

import asyncio
import logging
from typing import Awaitable, Callable, Optional

logger = logging.getLogger(__name__)

DEFAULT_INTERVAL_SECONDS = 60.0

CALLBACK_ERRORS = (
    ConnectionError,
    TimeoutError,
    RuntimeError,
    ValueError,
    TypeError,
    OSError,
    LookupError,
)


class RefreshScheduler:
    """Runs a callback once on start, then every ``interval_seconds`` until stopped."""

    def __init__(
        self,
        callback: Callable[[], Awaitable[None]],
        interval_seconds: float = DEFAULT_INTERVAL_SECONDS,
        name: str = "refresh",
    ):
        """
        Initialize refresh scheduler.

        Args:
            callback: Coroutine function invoked on every tick
            interval_seconds: Time between ticks
            name: Name for logging
        """
        if interval_seconds <= 0:
            raise ValueError(f"interval_seconds must be positive (got {interval_seconds})")
        self.callback = callback
        self.interval_seconds = interval_seconds
        self.name = name
        self._task: Optional[asyncio.Task] = None

    def start(self) -> None:
        """Start the loop; a no-op while a loop is already running."""
        if self.is_running():
            return
        logger.debug("%s: scheduler started (interval: %ss)", self.name, self.interval_seconds)
        self._task = asyncio.create_task(self._run())
        self._task.add_done_callback(self._log_unexpected_exit)

    async def stop(self) -> None:
        """Cancel the loop and wait for it to finish; a no-op when stopped."""
        task, self._task = self._task, None
        if task is None:
            return
        if not task.done():
            task.cancel()
            try:
                await task
            except asyncio.CancelledError:
                logger.debug("%s: scheduler task cancelled during shutdown", self.name)
        logger.debug("%s: scheduler stopped", self.name)

    def _log_unexpected_exit(self, task: asyncio.Task) -> None:
        if task.cancelled():
            return
        error = task.exception()
        if error is not None:
            logger.error("%s: scheduler loop stopped by unexpected error", self.name, exc_info=error)

    def is_running(self) -> bool:
        return self._task is not None and not self._task.done()

    async def _run(self) -> None:
        while True:
            try:
                await self.callback()
            except CALLBACK_ERRORS:
                logger.exception("%s: refresh callback failed", self.name)
            await asyncio.sleep(self.interval_seconds)


__all__ = ["CALLBACK_ERRORS", "DEFAULT_INTERVAL_SECONDS", "RefreshScheduler"]
