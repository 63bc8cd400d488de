"""Turn a confirmed key into a text edit plus a spoken confirmation."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Iterable

from .interfaces import Announcer, OutputSink
from .kb_layout import Key
from .key_types import ActionKind

log = logging.getLogger(__name__)


class EditKind(str, Enum):
    append = "append"
    delete_last = "delete_last"


@dataclass(frozen=True)
class OutputEvent:
    kind: EditKind
    text: str = ""
    announcement: str = ""


def resolve(key: Key) -> OutputEvent:
    """Map ``key`` to the edit it produces, without performing it."""
    action = key.action
    if action is ActionKind.delete:
        return OutputEvent(EditKind.delete_last, "", "Delete")
    if action is ActionKind.space:
        return OutputEvent(EditKind.append, " ", "Space")
    if action is ActionKind.enter:
        return OutputEvent(EditKind.append, "\n", "Enter")
    text = key.payload.lower()
    return OutputEvent(EditKind.append, text, text)


class SelectionExecutor:
    def __init__(
        self,
        sinks: Iterable[OutputSink] = (),
        announcer: Announcer | None = None,
    ) -> None:
        self.sinks = list(sinks)
        self.announcer = announcer

    def resolve_and_emit(self, key: Key) -> OutputEvent:
        event = resolve(key)
        for sink in self.sinks:
            if event.kind is EditKind.delete_last:
                sink.delete_last()
            else:
                sink.append(event.text)
        log.info("selected %r -> %s %r", key.label, event.kind.value, event.text)
        self._announce(event.announcement)
        return event

    def _announce(self, text: str) -> None:
        if self.announcer is None:
            return
        try:
            self.announcer.announce(text)
        except Exception:
            # feedback is optional; text output already happened
            log.warning("announcement of %r failed", text, exc_info=True)
