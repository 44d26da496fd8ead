from __future__ import annotations

import asyncio
import inspect
import logging
from typing import Any, Callable

_LOG = logging.getLogger(__name__)


class LoadingTimer:
    """
    Fixed-rate 0 → 1 counter behind the "Creating your plan" screen.

    Every `interval` seconds the counter grows by `step`; once it reaches
    1.0 the task ends and `on_complete` runs exactly once. After `cancel()`
    the callback never runs.
    """

    def __init__(
        self,
        on_complete: Callable[[], Any],
        interval: float = 0.05,
        step: float = 0.01,
        on_tick: Callable[[float], None] | None = None,
    ) -> None:
        if interval < 0 or step <= 0:
            raise ValueError("interval must be >= 0 and step > 0")
        self._on_complete = on_complete
        self._on_tick = on_tick
        self._interval = interval
        self._step = step
        self._steps = max(1, round(1.0 / step))
        self._ticks = 0
        self._task: asyncio.Task | None = None
        self._fired = False
        self._cancelled = False

    @property
    def progress(self) -> float:
        return min(1.0, self._ticks * self._step)

    @property
    def fired(self) -> bool:
        return self._fired

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    def start(self) -> None:
        if self._task is not None:
            return
        self._task = asyncio.get_running_loop().create_task(self._run())

    def cancel(self) -> None:
        self._cancelled = True
        # once fired the task is running the callback itself; let it finish
        if self._task is not None and not self._task.done() and not self._fired:
            self._task.cancel()
            _LOG.debug("loading timer cancelled at %.2f", self.progress)

    async def wait(self) -> None:
        if self._task is not None:
            await asyncio.gather(self._task, return_exceptions=True)

    async def _run(self) -> None:
        while self._ticks < self._steps:
            await asyncio.sleep(self._interval)
            if self._cancelled:
                return
            self._ticks += 1
            if self._on_tick is not None:
                self._on_tick(self.progress)

        if self._cancelled or self._fired:
            return
        self._fired = True
        _LOG.debug("loading timer complete after %d ticks", self._ticks)
        # the task result is never collected
        try:
            result = self._on_complete()
            if inspect.isawaitable(result):
                await result
        except Exception:
            _LOG.exception("loading completion callback failed")
