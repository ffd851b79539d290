"""One-second tick scheduling on the asyncio loop"""
import asyncio
import logging
from typing import Callable, Optional

logger = logging.getLogger(__name__)


class TickScheduler:
    """
    Keeps at most one pending tick task.

    The task sleeps `interval` seconds, then calls `tick()` while
    `should_continue()` holds. Pausing cancels it; resuming arms a fresh one.
    There is no drift correction.
    """

    def __init__(self, interval: float = 1.0):
        self._interval = interval
        self._task: Optional[asyncio.Task] = None

    @property
    def armed(self) -> bool:
        return self._task is not None and not self._task.done()

    def arm(self, tick: Callable[[], object], should_continue: Callable[[], bool]) -> None:
        self.cancel()
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            logger.warning("No running event loop; ticks must be driven manually")
            return
        self._task = loop.create_task(self._run(tick, should_continue))

    def cancel(self) -> None:
        task, self._task = self._task, None
        if task is None or task.done():
            return
        try:
            current = asyncio.current_task()
        except RuntimeError:
            current = None
        # Completion runs inside the tick task; it stops on its own once the engine is paused
        if task is not current:
            task.cancel()

    async def _run(self, tick: Callable[[], object], should_continue: Callable[[], bool]) -> None:
        try:
            while should_continue():
                await asyncio.sleep(self._interval)
                if not should_continue():
                    break
                tick()
        except asyncio.CancelledError:
            logger.debug("Tick task cancelled")
        except Exception as e:
            logger.error(f"Tick failed, timer stopped: {e}")
