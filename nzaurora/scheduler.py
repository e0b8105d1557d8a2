"""Recurring refresh tasks on the running asyncio loop.

Each task runs immediately on start and then every ``interval`` seconds.
Tasks are independent: a refresh that raises is logged and retried on the
next tick, and never cancels the other tasks.
"""

from __future__ import annotations

import asyncio
from typing import Awaitable, Callable, Dict, List, Optional

from nzaurora.middleware.logging import log_error, log_info

Refresh = Callable[[], Awaitable[object]]


class PollingTask:
    """A named refresh coroutine and its interval."""

    def __init__(self, name: str, interval: float, refresh: Refresh):
        if interval <= 0:
            raise ValueError("interval must be positive")
        self.name = name
        self.interval = interval
        self.refresh = refresh
        self.runs = 0
        self.failures = 0
        self._task: Optional[asyncio.Task] = None

    async def run_once(self) -> None:
        self.runs += 1
        try:
            await self.refresh()
        except Exception as e:
            self.failures += 1
            log_error("polling_task_error", task=self.name, error=str(e))

    async def _loop(self) -> None:
        while True:
            await self.run_once()
            await asyncio.sleep(self.interval)

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()


class PollingScheduler:
    """Owns a set of :class:`PollingTask` loops with explicit start/stop."""

    def __init__(self) -> None:
        self._tasks: Dict[str, PollingTask] = {}

    def add(self, name: str, interval: float, refresh: Refresh) -> PollingTask:
        if name in self._tasks:
            raise ValueError(f"duplicate task name: {name}")
        task = PollingTask(name, interval, refresh)
        self._tasks[name] = task
        return task

    @property
    def tasks(self) -> List[PollingTask]:
        return list(self._tasks.values())

    def start(self) -> None:
        """Schedule every task that is not already running."""
        for task in self._tasks.values():
            if not task.running:
                task._task = asyncio.create_task(task._loop(), name=f"poll:{task.name}")
        log_info("scheduler_started", tasks=[t.name for t in self._tasks.values()])

    async def stop(self) -> None:
        """Cancel every loop and wait for them to finish."""
        pending = [t._task for t in self._tasks.values() if t._task is not None]
        for task in pending:
            task.cancel()
        await asyncio.gather(*pending, return_exceptions=True)
        for task in self._tasks.values():
            task._task = None
        log_info("scheduler_stopped", tasks=len(pending))
