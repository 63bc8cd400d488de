"""Spoken feedback using pyttsx3 on a background thread."""

from __future__ import annotations

import logging
import queue
import threading
from typing import Callable, Optional

log = logging.getLogger(__name__)


class SpeechAnnouncer:
    """Queue text to be read aloud without blocking the scanner.

    The engine is created lazily on the worker thread. If it can't be
    started, announcements are dropped after a single warning.
    """

    def __init__(
        self,
        on_text: Optional[Callable[[str], None]] = None,
        engine_factory: Optional[Callable[[], object]] = None,
        rate: Optional[int] = None,
    ) -> None:
        self.on_text = on_text
        self.engine_factory = engine_factory or _pyttsx3_engine
        self.rate = rate

        self._queue: queue.SimpleQueue[Optional[str]] = queue.SimpleQueue()
        self._thread: Optional[threading.Thread] = None
        self._lock = threading.Lock()
        self.available = True

    def announce(self, text: str) -> None:
        if self.on_text is not None:
            self.on_text(text)
        if not self.available:
            return
        self._ensure_thread()
        self._queue.put(text)

    def close(self) -> None:
        if self._thread is not None:
            self._queue.put(None)
            self._thread.join(timeout=1.0)
            self._thread = None

    def _ensure_thread(self) -> None:
        if self._thread is not None:
            return
        with self._lock:
            if self._thread is None:
                self._thread = threading.Thread(target=self._worker, daemon=True)
                self._thread.start()

    def _worker(self) -> None:
        try:
            engine = self.engine_factory()
            if self.rate is not None:
                engine.setProperty("rate", self.rate)
        except Exception:
            log.warning("speech engine unavailable; announcements disabled", exc_info=True)
            self.available = False
            return

        while True:
            text = self._queue.get()
            if text is None:
                break
            # only the newest pending text is worth saying
            try:
                while True:
                    nxt = self._queue.get_nowait()
                    if nxt is None:
                        return
                    text = nxt
            except queue.Empty:
                pass
            try:
                engine.say(text)
                engine.runAndWait()
            except Exception:
                log.warning("speech failed for %r", text, exc_info=True)


def _pyttsx3_engine():
    import pyttsx3

    return pyttsx3.init()
