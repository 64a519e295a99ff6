"""Cancellable scheduled tasks.

The theme applier coalesces bursts of writes by keeping at most one pending
task: every new trigger cancels the pending one and schedules a fresh one.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Callable, Optional, Protocol

logger = logging.getLogger(__name__)


class ScheduledTask(Protocol):
    def cancel(self) -> None: ...

    def cancelled(self) -> bool: ...


class Scheduler(Protocol):
    """Runs a callback once after a delay; the returned task can be cancelled."""

    def call_later(self, delay: float, callback: Callable[[], None]) -> ScheduledTask: ...


class _CompletedTask:
    """Handle for a callback that already ran."""

    def cancel(self) -> None:
        pass

    def cancelled(self) -> bool:
        return False


class AsyncioScheduler:
    """Scheduler backed by the running asyncio event loop.

    Without a running loop (plain synchronous scripts) the callback runs
    immediately, which keeps the last-value-wins guarantee.
    """

    def __init__(self, loop: Optional[asyncio.AbstractEventLoop] = None) -> None:
        self._loop = loop
        self._warned_no_loop = False

    def _get_loop(self) -> Optional[asyncio.AbstractEventLoop]:
        if self._loop is not None and not self._loop.is_closed():
            return self._loop
        try:
            return asyncio.get_running_loop()
        except RuntimeError:
            return None

    def call_later(self, delay: float, callback: Callable[[], None]) -> ScheduledTask:
        loop = self._get_loop()
        if loop is None:
            if not self._warned_no_loop:
                self._warned_no_loop = True
                logger.warning("No running event loop, scheduled callbacks run immediately without debouncing")
            else:
                logger.debug("No running event loop, running scheduled callback immediately")
            callback()
            return _CompletedTask()
        return loop.call_later(max(0.0, delay), callback)


class Debouncer:
    """Keeps a single pending call; each trigger replaces the previous one."""

    def __init__(self, scheduler: Scheduler, delay: float, callback: Callable[[], None]) -> None:
        self._scheduler = scheduler
        self._delay = delay
        self._callback = callback
        self._pending: Optional[ScheduledTask] = None
        self._armed = False

    @property
    def pending(self) -> bool:
        return self._pending is not None

    def trigger(self) -> None:
        self.cancel()
        self._armed = True
        task = self._scheduler.call_later(self._delay, self._fire)
        # A scheduler may run the callback before returning
        if self._armed:
            self._pending = task

    def flush(self) -> None:
        """Run the pending call now, if there is one."""
        if self._pending is None:
            return
        self.cancel()
        self._callback()

    def cancel(self) -> None:
        self._armed = False
        if self._pending is not None:
            self._pending.cancel()
            self._pending = None

    def _fire(self) -> None:
        self._armed = False
        self._pending = None
        self._callback()
