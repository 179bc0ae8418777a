"""Hot reload scheduler."""

import asyncio
from collections.abc import Awaitable, Callable
from typing import Any

from cascade.exceptions import AllProvidersUnavailableError, ConfigurationError
from cascade.observability.logging import get_logger

logger = get_logger(__name__)


class HotReloadScheduler:
    """Run a reload coroutine on a fixed interval.

    Each tick awaits the reload to completion before sleeping again, so
    ticks never overlap. Failures are logged and the schedule continues.
    """

    def __init__(
        self,
        reload: Callable[[], Awaitable[Any]],
        interval: float,
        *,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        """Initialize the scheduler.

        Args:
            reload: Coroutine function invoked once per tick
            interval: Seconds between the end of one tick and the next
            sleep: Override for the wait between ticks
        """
        if interval <= 0:
            raise ValueError("Hot reload interval must be positive")
        self._reload = reload
        self._interval = interval
        self._sleep = sleep
        self._task: asyncio.Task[None] | None = None
        self.tick_count = 0

    @property
    def interval(self) -> float:
        """Seconds between ticks."""
        return self._interval

    @property
    def running(self) -> bool:
        """Whether the scheduler task is active."""
        return self._task is not None and not self._task.done()

    def start(self) -> None:
        """Start ticking. Calling start on a running scheduler is a no-op."""
        if self.running:
            return
        self._task = asyncio.create_task(self._run(), name="cascade-hot-reload")
        logger.info("hot_reload_started", interval=self._interval)

    async def stop(self) -> None:
        """Cancel the scheduler and wait for it to finish."""
        task = self._task
        self._task = None
        if task is None:
            return
        task.cancel()
        try:
            await task
        except asyncio.CancelledError:
            pass
        logger.info("hot_reload_stopped", ticks=self.tick_count)

    async def _run(self) -> None:
        while True:
            await self._sleep(self._interval)
            await self.tick()

    async def tick(self) -> None:
        """Run one reload, logging instead of raising on failure."""
        self.tick_count += 1
        try:
            await self._reload()
        except AllProvidersUnavailableError as e:
            logger.error(
                "hot_reload_all_providers_failed",
                sources=sorted(e.failures),
                tick=self.tick_count,
            )
        except ConfigurationError as e:
            logger.error("hot_reload_failed", error=str(e), tick=self.tick_count)
        except Exception as e:
            logger.exception("hot_reload_unexpected_error", error=str(e), tick=self.tick_count)
