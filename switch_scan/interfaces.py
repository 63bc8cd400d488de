"""Interface definitions to decouple the scanning core from I/O."""

from __future__ import annotations

from typing import Callable, Protocol, runtime_checkable


@runtime_checkable
class TimerHandle(Protocol):
    """A live repeating timer."""

    def cancel(self) -> None:
        """Stop the timer. Calling it twice is harmless."""
        ...


@runtime_checkable
class Scheduler(Protocol):
    """Source of repeating, cancelable timers."""

    def schedule(self, period_ms: float, callback: Callable[[], None]) -> TimerHandle:
        """Call ``callback`` every ``period_ms`` until the handle is cancelled."""
        ...


@runtime_checkable
class HighlightSurface(Protocol):
    """Presentation side effects the scanner drives."""

    def highlight_group(self, group: int, on: bool) -> None:
        ...

    def highlight_item(self, group: int, item: int, on: bool) -> None:
        ...

    def clear(self) -> None:
        """Remove every group and item highlight."""
        ...


@runtime_checkable
class OutputSink(Protocol):
    """Receiver of text edits produced by a selection."""

    def append(self, text: str) -> None:
        ...

    def delete_last(self) -> None:
        ...


@runtime_checkable
class Announcer(Protocol):
    """Fire-and-forget feedback channel (speech, status label)."""

    def announce(self, text: str) -> None:
        ...


class NullSurface:
    """Surface that draws nothing; lets the scanner run headless."""

    def highlight_group(self, group: int, on: bool) -> None:
        pass

    def highlight_item(self, group: int, item: int, on: bool) -> None:
        pass

    def clear(self) -> None:
        pass
