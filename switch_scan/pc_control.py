from __future__ import annotations

from typing import Any


class PCController:
    """Type emitted text into the focused window with pynput.

    ``kb`` and ``keys`` default to :class:`pynput.keyboard.Controller` and
    :class:`pynput.keyboard.Key`.
    """

    def __init__(self, kb: Any = None, keys: Any = None) -> None:
        if kb is None or keys is None:
            from pynput.keyboard import Controller, Key as OSKey

            kb = kb or Controller()
            keys = keys or OSKey
        self.kb = kb
        self.keys = keys

    def _tap(self, k) -> None:
        self.kb.press(k)
        self.kb.release(k)

    def append(self, text: str) -> None:
        # newlines go through the Enter key so every target app sees a keypress
        for i, line in enumerate(text.split("\n")):
            if i:
                self._tap(self.keys.enter)
            if line:
                self.kb.type(line)

    def delete_last(self) -> None:
        self._tap(self.keys.backspace)
