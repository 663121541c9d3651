"""Registry of bound variable names, kept apart from the environment.

The highlighter and completer only need to know which identifiers are bound,
so they read this small snapshot, refreshed after each evaluation.
"""

from __future__ import annotations

from typing import Iterator

from keyten.env import Env


def _decode(packed: int) -> str | None:
    raw = (packed & 0xFFFFFFFFFFFFFFFF).to_bytes(8, "little")
    end = raw.find(b"\0")
    if end >= 0:
        raw = raw[:end]
    if not raw:
        return None
    try:
        return raw.decode("utf-8")
    except UnicodeDecodeError:
        return None


class Names:
    """Sorted set of currently bound names."""

    def __init__(self) -> None:
        self._names: tuple[str, ...] = ()

    def refresh_from(self, env: Env) -> None:
        """Replace the registry with the names bound in ``env``."""
        decoded = (_decode(sym) for sym, _ in env)
        self._names = tuple(sorted({n for n in decoded if n is not None}))

    def __contains__(self, name: object) -> bool:
        return name in self._names

    def prefix_matches(self, prefix: str) -> Iterator[str]:
        """Yield the bound names starting with ``prefix``, in sorted order."""
        return (n for n in self._names if n.startswith(prefix))

    def __iter__(self) -> Iterator[str]:
        return iter(self._names)

    def __len__(self) -> int:
        return len(self._names)