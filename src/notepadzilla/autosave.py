from __future__ import annotations
import asyncio
import logging
from typing import Awaitable, Callable, Optional

logger = logging.getLogger(__name__)

Sleep = Callable[[float], Awaitable[None]]
Monotonic = Callable[[], float]


class AutosaveScheduler:
    """
    Fixed-rate background task that awaits `callback` every `interval`
    seconds. Deadlines are counted from when the task started, so a slow
    callback shortens the following wait instead of shifting every later
    tick. Periods that pass entirely while a callback is still running are
    skipped. Edits never push the next tick back. An exception from the
    callback is logged and the loop keeps going.

    `sleep` and `monotonic` are injectable so tests can drive ticks without
    wall-clock time; `tick()` can also be called directly.
    """

    def __init__(self, callback: Callable[[], Awaitable[None]], interval: float,
                 sleep: Sleep = asyncio.sleep, monotonic: Optional[Monotonic] = None) -> None:
        if interval <= 0:
            raise ValueError("interval must be positive")
        self._callback = callback
        self.interval = interval
        self._sleep = sleep
        self._monotonic = monotonic
        self._task: Optional[asyncio.Task] = None
        self.ticks = 0
        self.skipped = 0

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self) -> None:
        if self.running:
            return
        self._task = asyncio.create_task(self._run())

    async def stop(self) -> None:
        task, self._task = self._task, None
        if task is None:
            return
        task.cancel()
        try:
            await task
        except asyncio.CancelledError:
            pass

    async def tick(self) -> None:
        self.ticks += 1
        try:
            await self._callback()
        except Exception:
            logger.exception("Autosave tick %d failed", self.ticks)

    async def _run(self) -> None:
        now = self._monotonic or asyncio.get_running_loop().time
        deadline = now()
        while True:
            deadline += self.interval
            current = now()
            if deadline < current:
                missed = int((current - deadline) // self.interval) + 1
                self.skipped += missed
                deadline += missed * self.interval
                logger.debug("Autosave fell behind; skipped %d tick(s)", missed)
            await self._sleep(deadline - current)
            await self.tick()
