"""Cancellable delayed callbacks.

The draw session never sleeps or spawns threads; it asks a scheduler to run a
callback after a delay and keeps the returned handle so the call can be
cancelled. Two backends are provided:

* :class:`ManualScheduler` runs on a virtual clock that the host advances
  explicitly, the same way animations are advanced with ``update(delta_ms)``.
* :class:`AsyncioScheduler` hands the callbacks to a running asyncio loop.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Callable, Optional
import asyncio
import heapq
import itertools
import logging

logger = logging.getLogger(__name__)

Callback = Callable[[], None]


@dataclass
class TimerHandle:
    """Handle for a scheduled callback.

    Attributes:
        due_ms: Scheduler time at which the callback fires
        label: Optional name used in log output
    """

    due_ms: float
    label: str = ""
    _cancel: Optional[Callback] = field(default=None, repr=False)
    _cancelled: bool = field(default=False, repr=False)
    _fired: bool = field(default=False, repr=False)

    def cancel(self) -> None:
        """Prevent the callback from running. Safe to call more than once."""
        if self._cancelled or self._fired:
            return
        self._cancelled = True
        if self._cancel is not None:
            self._cancel()
        logger.debug(f"Timer cancelled: {self.label or 'unnamed'}")

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    @property
    def fired(self) -> bool:
        return self._fired

    @property
    def pending(self) -> bool:
        return not (self._cancelled or self._fired)


class Scheduler(ABC):
    """Interface for running callbacks after a delay in milliseconds."""

    @property
    @abstractmethod
    def now_ms(self) -> float:
        """Current scheduler time in milliseconds."""

    @abstractmethod
    def schedule(self, delay_ms: float, callback: Callback, label: str = "") -> TimerHandle:
        """Run ``callback`` once after ``delay_ms``.

        Returns:
            Handle that can cancel the pending call
        """


class ManualScheduler(Scheduler):
    """Scheduler driven by an explicit virtual clock.

    Nothing fires until :meth:`advance` is called. Callbacks due within the
    advanced window fire in due-time order (ties in scheduling order), and
    callbacks scheduled while advancing fire in the same call when they fall
    inside the window.
    """

    def __init__(self, start_ms: float = 0.0) -> None:
        self._now = start_ms
        self._queue: list[tuple[float, int, TimerHandle, Callback]] = []
        self._counter = itertools.count()

    @property
    def now_ms(self) -> float:
        return self._now

    @property
    def pending_count(self) -> int:
        """Number of scheduled calls that have neither fired nor been cancelled."""
        return sum(1 for _, _, handle, _ in self._queue if handle.pending)

    def schedule(self, delay_ms: float, callback: Callback, label: str = "") -> TimerHandle:
        if delay_ms < 0:
            raise ValueError("delay_ms must not be negative")
        handle = TimerHandle(due_ms=self._now + delay_ms, label=label)
        heapq.heappush(self._queue, (handle.due_ms, next(self._counter), handle, callback))
        return handle

    def advance(self, delta_ms: float) -> int:
        """Move the clock forward and fire every call that becomes due.

        Args:
            delta_ms: Milliseconds to advance

        Returns:
            Number of callbacks fired
        """
        if delta_ms < 0:
            raise ValueError("delta_ms must not be negative")

        target = self._now + delta_ms
        fired = 0
        while self._queue and self._queue[0][0] <= target:
            due, _, handle, callback = heapq.heappop(self._queue)
            if not handle.pending:
                continue
            self._now = due
            handle._fired = True
            callback()
            fired += 1

        self._now = target
        return fired

    def run_until_idle(self, limit_ms: float = 3_600_000.0) -> int:
        """Advance until no call is pending or ``limit_ms`` has elapsed."""
        fired = 0
        deadline = self._now + limit_ms
        while self.pending_count and self._now < deadline:
            next_due = min(due for due, _, handle, _ in self._queue if handle.pending)
            fired += self.advance(max(0.0, min(next_due, deadline) - self._now))
        return fired


class AsyncioScheduler(Scheduler):
    """Scheduler backed by ``loop.call_later``.

    Args:
        loop: Event loop to use. Defaults to the running loop at schedule time.
        time_scale: Multiplier applied to every delay (0.1 runs ten times faster)
    """

    def __init__(
        self,
        loop: Optional[asyncio.AbstractEventLoop] = None,
        time_scale: float = 1.0,
    ) -> None:
        if time_scale <= 0:
            raise ValueError("time_scale must be positive")
        self._loop = loop
        self._time_scale = time_scale

    def _get_loop(self) -> asyncio.AbstractEventLoop:
        if self._loop is None:
            self._loop = asyncio.get_running_loop()
        return self._loop

    @property
    def now_ms(self) -> float:
        return self._get_loop().time() * 1000.0 / self._time_scale

    def schedule(self, delay_ms: float, callback: Callback, label: str = "") -> TimerHandle:
        if delay_ms < 0:
            raise ValueError("delay_ms must not be negative")
        loop = self._get_loop()
        handle = TimerHandle(due_ms=self.now_ms + delay_ms, label=label)

        def fire() -> None:
            if not handle.pending:
                return
            handle._fired = True
            callback()

        timer = loop.call_later(delay_ms * self._time_scale / 1000.0, fire)
        handle._cancel = timer.cancel
        return handle
