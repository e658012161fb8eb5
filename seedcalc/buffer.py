"""The calculator's input buffer."""

from __future__ import annotations

MAX_CHARS = 100


class InputBuffer:
    """Accumulating text of the expression being typed.

    The buffer itself never refuses a character: `append` records it and
    reports whether the length limit is now exceeded, leaving the state
    transition to the caller.
    """

    def __init__(self, max_chars: int = MAX_CHARS) -> None:
        if max_chars <= 0:
            raise ValueError(f"max_chars must be positive, got {max_chars}")
        self.max_chars = max_chars
        self._chars: list[str] = []

    def __len__(self) -> int:
        return len(self._chars)

    def __str__(self) -> str:
        return self.text

    @property
    def text(self) -> str:
        return "".join(self._chars)

    @property
    def is_empty(self) -> bool:
        return not self._chars

    @property
    def overflowed(self) -> bool:
        return len(self._chars) > self.max_chars

    @property
    def last_char(self) -> str:
        return self._chars[-1] if self._chars else ""

    def append(self, text: str) -> bool:
        """Append text. Returns True if the buffer is now over its limit."""
        self._chars.extend(text)
        return self.overflowed

    def backspace(self) -> None:
        """Remove the last character, if any."""
        if self._chars:
            self._chars.pop()

    def truncate(self, count: int) -> None:
        """Remove the last `count` characters."""
        if count > 0:
            del self._chars[-count:]

    def clear(self) -> None:
        self._chars.clear()
