"""Recurring timer backed by asyncio tasks."""

import asyncio
import contextlib
import logging
from collections.abc import Awaitable, Callable
from datetime import datetime, timedelta, timezone
from typing import Any

logger = logging.getLogger(__name__)

HookCallback = Callable[[], Awaitable[Any]]


class AsyncioIntervalTimer:
    """Fires registered hooks on a fixed interval inside the running loop.

    Callbacks are bound to hook names with ``register`` before a hook can be
    scheduled. Schedules live only as long as the process and the event loop,
    which is why the drainer checks and re-registers them on every run.

    Example:
        timer = AsyncioIntervalTimer()
        timer.register("edgepurge_drain", drainer.run)
        timer.schedule("edgepurge_drain", 60)
    """

    def __init__(self) -> None:
        self._callbacks: dict[str, HookCallback] = {}
        self._tasks: dict[str, asyncio.Task[None]] = {}
        self._next_runs: dict[str, datetime] = {}

    def register(self, hook: str, callback: HookCallback) -> None:
        """Bind the coroutine function fired for a hook."""
        self._callbacks[hook] = callback

    def is_scheduled(self, hook: str) -> bool:
        task = self._tasks.get(hook)
        return task is not None and not task.done()

    def schedule(self, hook: str, interval: float) -> bool:
        """Start firing a hook every ``interval`` seconds.

        Replaces any existing schedule for the hook.

        Returns:
            False if no callback is registered or no event loop is running.
        """
        callback = self._callbacks.get(hook)
        if callback is None:
            logger.error("No callback registered for timer hook %s", hook)
            return False

        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            logger.error("Cannot schedule %s without a running event loop", hook)
            return False

        self.unschedule(hook)
        interval = max(float(interval), 0.001)
        self._next_runs[hook] = _now() + timedelta(seconds=interval)
        self._tasks[hook] = loop.create_task(
            self._run_forever(hook, callback, interval),
            name=f"timer:{hook}",
        )
        return True

    def unschedule(self, hook: str) -> None:
        task = self._tasks.pop(hook, None)
        if task is not None and not task.done():
            task.cancel()
        self._next_runs.pop(hook, None)

    def next_run(self, hook: str) -> datetime | None:
        if not self.is_scheduled(hook):
            return None
        return self._next_runs.get(hook)

    async def aclose(self) -> None:
        """Cancel every schedule and wait for the tasks to finish."""
        tasks = list(self._tasks.values())
        for hook in list(self._tasks):
            self.unschedule(hook)
        for task in tasks:
            with contextlib.suppress(asyncio.CancelledError):
                await task

    async def _run_forever(
        self,
        hook: str,
        callback: HookCallback,
        interval: float,
    ) -> None:
        while True:
            await asyncio.sleep(interval)
            self._next_runs[hook] = _now() + timedelta(seconds=interval)
            try:
                await callback()
            except Exception:
                # A failing tick must not stop later ticks
                logger.exception("Timer hook %s raised", hook)


def _now() -> datetime:
    return datetime.now(timezone.utc)
