from enum import Enum, auto


# Authoritative list of key actions. Any new key kind must be added here.
class ActionKind(str, Enum):
    def _generate_next_value_(name, *_):
        return name

    character = auto()  # emit the key's payload, lower-cased
    delete    = auto()  # remove the last character
    space     = auto()
    enter     = auto()  # newline

    @classmethod
    def parse(cls, value: "str | ActionKind | None") -> "ActionKind":
        """Return the member for ``value``; ``None`` means a character key."""
        if value is None:
            return cls.character
        if isinstance(value, cls):
            return value
        try:
            return cls(value)
        except ValueError:
            raise ValueError(f"Unknown key action {value!r}") from None
