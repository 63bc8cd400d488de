from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from typing import Iterable, Optional

from .key_types import ActionKind


@dataclass(frozen=True, slots=True)
class Key:
    label: str
    action: ActionKind = ActionKind.character
    payload: Optional[str] = None  # text a character key emits; defaults to label

    def __post_init__(self):
        object.__setattr__(self, "action", ActionKind.parse(self.action))
        if self.action is ActionKind.character:
            if self.payload is None:
                object.__setattr__(self, "payload", self.label)
            if not self.payload:
                raise ValueError(
                    f"character key needs a non-empty payload (got label {self.label!r})"
                )


class KeyboardRow(Sequence[Key]):
    """One scan group."""

    def __init__(self, keys: Iterable[Key]):
        keys = tuple(keys)
        if not keys:
            raise ValueError("KeyboardRow must contain at least one Key")
        self._keys = keys

    def __len__(self) -> int:
        return len(self._keys)

    def __getitem__(self, index):
        return self._keys[index]

    def __repr__(self) -> str:
        return f"KeyboardRow({[k.label for k in self._keys]!r})"


class Keyboard(Sequence[KeyboardRow]):
    """Immutable grid of rows; the read-only side of the layout provider."""

    def __init__(self, rows: Iterable[KeyboardRow]):
        rows = tuple(rows)
        if not rows:
            raise ValueError("Keyboard must contain at least one row")
        self._rows = rows

    def __len__(self) -> int:
        return len(self._rows)

    def __getitem__(self, index):
        return self._rows[index]

    @property
    def group_count(self) -> int:
        return len(self._rows)

    def item_count(self, group: int) -> int:
        return len(self._rows[group])

    def item_at(self, group: int, item: int) -> Key:
        return self._rows[group][item]

    @classmethod
    def from_labels(cls, rows: Iterable[Iterable[str]]) -> "Keyboard":
        """Build a keyboard of character keys, e.g. ``[["A", "B"], ["C", "D"]]``."""
        return cls(KeyboardRow(Key(label) for label in row) for row in rows)
