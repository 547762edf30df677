"""Cancellable once-per-interval countdown."""

import asyncio
import logging
from typing import Awaitable, Callable

logger = logging.getLogger(__name__)


class Countdown:
    """
    Counts down from a number of seconds on an asyncio task.

    At most one countdown is alive per instance: start() cancels the
    previous task before scheduling a new one.
    """

    def __init__(
        self,
        interval_seconds: float = 1.0,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        self._interval = interval_seconds
        self._sleep = sleep
        self._task: asyncio.Task | None = None

    @property
    def running(self) -> bool:
        """True while a countdown task is scheduled and not finished."""
        return self._task is not None and not self._task.done()

    def start(
        self,
        seconds: int,
        on_tick: Callable[[int], None],
        on_finish: Callable[[], None],
    ) -> asyncio.Task:
        """
        Start counting down from seconds, cancelling any running countdown.

        on_tick receives the remaining seconds after every interval;
        on_finish runs once when the count reaches zero.
        Must be called from a running event loop.
        """
        self.cancel()
        self._task = asyncio.get_running_loop().create_task(self._run(seconds, on_tick, on_finish))
        return self._task

    def cancel(self) -> None:
        """Cancel the running countdown, if any."""
        if self._task is not None and not self._task.done():
            self._task.cancel()
            logger.debug("Countdown cancelled")
        self._task = None

    async def wait(self) -> None:
        """Wait for the current countdown to finish or be cancelled."""
        task = self._task
        if task is None:
            return
        try:
            await task
        except asyncio.CancelledError:
            if not task.cancelled():
                raise

    async def _run(
        self,
        seconds: int,
        on_tick: Callable[[int], None],
        on_finish: Callable[[], None],
    ) -> None:
        remaining = seconds
        while remaining > 0:
            await self._sleep(self._interval)
            remaining -= 1
            on_tick(remaining)
        on_finish()
