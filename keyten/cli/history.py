"""Persistent input history in the user's state directory."""

from __future__ import annotations

from collections import deque
from pathlib import Path

import platformdirs

CAPACITY = 10_000
_NEWLINE_ESCAPE = "<\\n>"


def _escape(entry: str) -> str:
    return entry.replace("\n", _NEWLINE_ESCAPE)


def _unescape(line: str) -> str:
    return line.replace(_NEWLINE_ESCAPE, "\n")


class History:
    """File-backed history keeping at most ``capacity`` entries."""

    def __init__(self, path: str | Path, capacity: int = CAPACITY) -> None:
        if capacity < 1:
            raise ValueError("history capacity must be at least 1")
        self.path = Path(path)
        self.capacity = capacity
        self._entries: deque[str] = deque(maxlen=capacity)
        try:
            text = self.path.read_text(encoding="utf-8")
        except FileNotFoundError:
            text = ""
        self._entries.extend(_unescape(line) for line in text.splitlines() if line)

    def append(self, line: str) -> None:
        """Record ``line``; blank lines and repeats of the last entry are skipped."""
        if not line.strip() or (self._entries and self._entries[-1] == line):
            return
        full = len(self._entries) == self.capacity
        self._entries.append(line)
        self.path.parent.mkdir(parents=True, exist_ok=True)
        if full:
            self.path.write_text(
                "".join(_escape(e) + "\n" for e in self._entries), encoding="utf-8"
            )
        else:
            with self.path.open("a", encoding="utf-8") as fh:
                fh.write(_escape(line) + "\n")

    def entries(self) -> list[str]:
        """All entries, oldest first."""
        return list(self._entries)


def history_path() -> Path:
    """Location of the history file."""
    return Path(platformdirs.user_state_dir("keyten", appauthor=False)) / "history"


def open_history() -> History | None:
    """Open the history file, creating its directory; ``None`` if unusable."""
    path = history_path()
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
    except OSError:
        pass
    try:
        return History(path)
    except OSError:
        return None