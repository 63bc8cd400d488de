from __future__ import annotations

from typing import Callable

from .interfaces import Announcer

EMPTY_MESSAGE = "Input area is empty."


class TextBuffer:
    """In-memory text the user is composing."""

    def __init__(self, text: str = "") -> None:
        self._text = text
        self._listeners: list[Callable[[str], None]] = []

    @property
    def text(self) -> str:
        return self._text

    def subscribe(self, listener: Callable[[str], None]) -> None:
        """Call ``listener(text)`` after every change."""
        self._listeners.append(listener)

    def append(self, text: str) -> None:
        self._text += text
        self._notify()

    def delete_last(self) -> None:
        self._text = self._text[:-1]
        self._notify()

    def clear(self) -> None:
        self._text = ""
        self._notify()

    def read_aloud(self, announcer: Announcer) -> str:
        """Speak the whole buffer, or a notice when it is empty."""
        spoken = self._text or EMPTY_MESSAGE
        announcer.announce(spoken)
        return spoken

    def _notify(self) -> None:
        for listener in self._listeners:
            listener(self._text)

    def __str__(self) -> str:
        return self._text
