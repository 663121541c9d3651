"""Flat variable environment mapping packed symbols to values."""

from __future__ import annotations

from typing import Iterator

from keyten.values import KObj


class Env:
    """Name bindings for the evaluator."""

    def __init__(self) -> None:
        self._bindings: dict[int, KObj] = {}

    def lookup(self, name: int) -> KObj | None:
        """Return the value bound to ``name``, or ``None``."""
        return self._bindings.get(name)

    def bind(self, name: int, value: KObj) -> None:
        """Bind ``name``, replacing any previous value."""
        self._bindings[name] = value

    def unbind(self, name: int) -> None:
        """Remove a binding if present."""
        self._bindings.pop(name, None)

    def __iter__(self) -> Iterator[tuple[int, KObj]]:
        """Iterate over ``(symbol, value)`` pairs."""
        return iter(list(self._bindings.items()))

    def __len__(self) -> int:
        return len(self._bindings)

    def __bool__(self) -> bool:
        return True