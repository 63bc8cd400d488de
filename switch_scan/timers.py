"""Scheduler implementations for the scan engine.

``TkScheduler`` runs on a real Tk event loop; ``VirtualScheduler`` advances a
virtual clock by hand so timing can be replayed deterministically.
"""

from __future__ import annotations

import heapq
import itertools
import logging
from typing import Any, Callable, Optional

log = logging.getLogger(__name__)


class _TkTimer:
    def __init__(self, root: Any, period_ms: float, callback: Callable[[], None]) -> None:
        self.root = root
        self.period_ms = period_ms
        self.callback = callback
        self._delay = max(1, int(round(period_ms)))
        self._after_id: Optional[str] = None
        self.cancelled = False
        self._arm()

    def _arm(self) -> None:
        self._after_id = self.root.after(self._delay, self._fire)

    def _fire(self) -> None:
        self._after_id = None
        if self.cancelled:
            return
        try:
            self.callback()
        finally:
            # the callback may have cancelled us (e.g. a phase change)
            if not self.cancelled:
                self._arm()

    def cancel(self) -> None:
        self.cancelled = True
        if self._after_id is not None:
            try:
                self.root.after_cancel(self._after_id)
            finally:
                self._after_id = None


class TkScheduler:
    """Repeating timers built on ``root.after``."""

    def __init__(self, root: Any) -> None:
        self.root = root

    def schedule(self, period_ms: float, callback: Callable[[], None]) -> _TkTimer:
        return _TkTimer(self.root, period_ms, callback)


class _VirtualTimer:
    def __init__(self, scheduler: "VirtualScheduler", period_ms: float, callback: Callable[[], None]) -> None:
        self.scheduler = scheduler
        self.period_ms = period_ms
        self.callback = callback
        self.cancelled = False

    def cancel(self) -> None:
        self.cancelled = True

    def __repr__(self) -> str:
        state = "cancelled" if self.cancelled else "live"
        return f"_VirtualTimer(period_ms={self.period_ms}, {state})"


class VirtualScheduler:
    """Deterministic clock: nothing fires until :meth:`advance` is called.

    Ticks due at the same instant fire in the order their timers were
    created.
    """

    def __init__(self) -> None:
        self.now: float = 0.0
        self._queue: list[tuple[float, int, _VirtualTimer]] = []
        self._seq = itertools.count()
        self._timers: list[_VirtualTimer] = []

    def schedule(self, period_ms: float, callback: Callable[[], None]) -> _VirtualTimer:
        if period_ms <= 0:
            raise ValueError(f"period_ms must be > 0 (got {period_ms})")
        timer = _VirtualTimer(self, period_ms, callback)
        self._timers.append(timer)
        heapq.heappush(self._queue, (self.now + period_ms, next(self._seq), timer))
        return timer

    @property
    def live_handles(self) -> list[_VirtualTimer]:
        self._timers = [t for t in self._timers if not t.cancelled]
        return list(self._timers)

    def advance(self, ms: float) -> int:
        """Move the clock forward by ``ms``; return the number of ticks fired."""
        target = self.now + ms
        fired = 0
        while self._queue and self._queue[0][0] <= target:
            due, _, timer = heapq.heappop(self._queue)
            if timer.cancelled:
                continue
            self.now = due
            timer.callback()
            fired += 1
            if not timer.cancelled:
                heapq.heappush(
                    self._queue, (due + timer.period_ms, next(self._seq), timer)
                )
        self.now = target
        log.debug("virtual clock at %.1f ms (%d ticks)", self.now, fired)
        return fired

    def advance_to(self, when: float) -> int:
        if when < self.now:
            raise ValueError(f"cannot move clock back from {self.now} to {when}")
        return self.advance(when - self.now)
