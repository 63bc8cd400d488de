"""Map a single switch activation onto the scanner's phase transitions."""

from __future__ import annotations

import logging
import time
from queue import Empty, SimpleQueue
from typing import Callable, Optional

from .scan_engine import ScanPhase, Scanner
from .selection import OutputEvent, SelectionExecutor

log = logging.getLogger(__name__)


class SwitchRouter:
    """Entry point for switch presses.

    ``on_switch_activated`` must run on the same thread as the scanner's
    timer ticks. Other threads (audio detection, for instance) call
    :meth:`post` and the UI loop drains the queue with :meth:`pump`.
    """

    def __init__(
        self,
        scanner: Scanner,
        executor: SelectionExecutor,
        *,
        debounce_ms: int = 0,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        if debounce_ms < 0:
            raise ValueError(f"debounce_ms must be >= 0 (got {debounce_ms})")
        self.scanner = scanner
        self.executor = executor
        self.debounce_ms = debounce_ms
        self.clock = clock

        self._last_press: Optional[float] = None
        self._press_queue: SimpleQueue[None] = SimpleQueue()

    def on_switch_activated(self) -> Optional[OutputEvent]:
        """Advance the scan state machine by one press.

        Returns the emitted :class:`OutputEvent` when the press confirmed a key.
        """
        if self._debounced():
            return None

        scanner = self.scanner
        phase = scanner.phase
        if phase is ScanPhase.IDLE:
            scanner.surface.clear()
            scanner.start_group_scan()
            return None
        if phase is ScanPhase.GROUPS:
            scanner.start_item_scan()
            return None

        key = scanner.selected_key()
        scanner.stop_scan()
        try:
            return self.executor.resolve_and_emit(key)
        finally:
            # scanning resumes even if an output sink failed
            scanner.surface.clear()
            scanner.start_group_scan()

    def on_speed_changed(self, speed_ms: int) -> None:
        self.scanner.set_speed(speed_ms)

    # ───────── cross-thread delivery ──────────────────────────────────────
    def post(self) -> None:
        """Queue a press from any thread."""
        self._press_queue.put(None)

    def pump(self) -> int:
        """Handle every queued press in arrival order; return how many."""
        handled = 0
        while True:
            try:
                self._press_queue.get_nowait()
            except Empty:
                break
            self.on_switch_activated()
            handled += 1
        return handled

    def _debounced(self) -> bool:
        if not self.debounce_ms:
            return False
        now = self.clock()
        if self._last_press is not None and (now - self._last_press) * 1000 < self.debounce_ms:
            log.debug("switch press ignored (%.0f ms after previous)", (now - self._last_press) * 1000)
            return True
        self._last_press = now
        return False
