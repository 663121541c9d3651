"""Tab completion of identifiers against the bound-name registry."""

from __future__ import annotations

from dataclasses import dataclass

from keyten.cli.names import Names


def _is_word(c: str) -> bool:
    return c == "_" or (c.isascii() and c.isalnum())


@dataclass(frozen=True)
class Suggestion:
    """A completion replacing ``line[start:end]`` with ``value``."""

    value: str
    start: int
    end: int
    append_whitespace: bool = False


class Completer:
    """Completes the identifier that ends at the cursor."""

    def __init__(self, names: Names) -> None:
        self._names = names

    def complete(self, line: str, pos: int) -> list[Suggestion]:
        end = min(pos, len(line))
        head = line[:end]
        start = end - (len(head) - len(head.rstrip("")))
        start = end
        while start > 0 and _is_word(head[start - 1]):
            start -= 1
        prefix = head[start:]
        if not prefix:
            return []
        return [Suggestion(name, start, end) for name in self._names.prefix_matches(prefix)]