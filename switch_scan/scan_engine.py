from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum, auto
from typing import Optional

from .interfaces import HighlightSurface, NullSurface, Scheduler, TimerHandle
from .kb_layout import Key, Keyboard

log = logging.getLogger("switch_scan.scan")

# items scan at twice the group rate
ITEM_SPEED_RATIO = 2


class ScanPhase(Enum):
    IDLE = auto()
    GROUPS = auto()
    ITEMS = auto()


@dataclass
class ScanState:
    phase: ScanPhase = ScanPhase.IDLE
    group_index: Optional[int] = None
    item_index: Optional[int] = None
    speed_ms: int = 1000


def _check_speed(speed_ms) -> int:
    if isinstance(speed_ms, bool) or not isinstance(speed_ms, int):
        raise ValueError(f"speed_ms must be an integer (got {speed_ms!r})")
    if speed_ms <= 0:
        raise ValueError(f"speed_ms must be > 0 (got {speed_ms})")
    return speed_ms


class Scanner:
    """Two-level row/column scanner.

    Owns the scan state and the single live timer. Highlight changes are
    pushed to ``surface``; nothing here knows how they are drawn.
    """

    def __init__(
        self,
        keyboard: Keyboard,
        scheduler: Scheduler,
        speed_ms: int = 1000,
        surface: HighlightSurface | None = None,
    ) -> None:
        self.keyboard = keyboard
        self.scheduler = scheduler
        self.surface = surface or NullSurface()
        self.state = ScanState(speed_ms=_check_speed(speed_ms))

        self._timer: Optional[TimerHandle] = None
        self.period_ms: Optional[float] = None

    @property
    def phase(self) -> ScanPhase:
        return self.state.phase

    # ───────── timer ownership ────────────────────────────────────────────
    def _cancel_timer(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None
            self.period_ms = None

    def _start_timer(self, period_ms: float, tick) -> None:
        self._cancel_timer()
        self._timer = self.scheduler.schedule(period_ms, tick)
        self.period_ms = period_ms

    # ───────── public control API ──────────────────────────────────────────
    def start_group_scan(self) -> None:
        self._cancel_timer()
        st = self.state
        st.phase = ScanPhase.GROUPS
        st.group_index = 0
        st.item_index = None
        self.surface.highlight_group(0, True)
        self._start_timer(st.speed_ms, self._group_tick)
        log.debug("group scan started (%d ms)", st.speed_ms)

    def start_item_scan(self) -> None:
        st = self.state
        assert st.group_index is not None, "start_item_scan() needs a selected group"
        assert 0 <= st.group_index < self.keyboard.group_count, (
            f"group index {st.group_index} out of range"
        )
        self._cancel_timer()
        st.phase = ScanPhase.ITEMS
        self.surface.highlight_group(st.group_index, False)
        st.item_index = 0
        self.surface.highlight_item(st.group_index, 0, True)
        period = st.speed_ms / ITEM_SPEED_RATIO
        self._start_timer(period, self._item_tick)
        log.debug("item scan started in group %d (%s ms)", st.group_index, period)

    def stop_scan(self) -> None:
        """Cancel the live timer, if any, and go idle. Highlights are left as is."""
        self._cancel_timer()
        self.state.phase = ScanPhase.IDLE

    def set_speed(self, speed_ms: int) -> None:
        """Change the scan speed, restarting the current phase at the new rate.

        Restarting a group scan begins again at the first group.
        """
        st = self.state
        st.speed_ms = _check_speed(speed_ms)
        log.debug("scan speed set to %d ms", speed_ms)
        if st.phase is ScanPhase.GROUPS:
            self.surface.highlight_group(st.group_index, False)
            self.start_group_scan()
        elif st.phase is ScanPhase.ITEMS:
            self.surface.highlight_item(st.group_index, st.item_index, False)
            self.start_item_scan()

    def selected_key(self) -> Key:
        st = self.state
        assert st.phase is ScanPhase.ITEMS and st.item_index is not None, (
            "no key is highlighted outside item scanning"
        )
        return self.keyboard.item_at(st.group_index, st.item_index)

    # ───────── ticks ──────────────────────────────────────────────────────
    def _group_tick(self) -> None:
        st = self.state
        self.surface.highlight_group(st.group_index, False)
        st.group_index = (st.group_index + 1) % self.keyboard.group_count
        self.surface.highlight_group(st.group_index, True)

    def _item_tick(self) -> None:
        st = self.state
        self.surface.highlight_item(st.group_index, st.item_index, False)
        st.item_index = (st.item_index + 1) % self.keyboard.item_count(st.group_index)
        self.surface.highlight_item(st.group_index, st.item_index, True)
