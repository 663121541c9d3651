"""Fixed-length bit vector used for per-chunk null masks."""

from __future__ import annotations

_WORD_BITS = 64
_WORD_MASK = (1 << _WORD_BITS) - 1


class BitVec:
    """A zero-initialised vector of bits stored in 64-bit words."""

    __slots__ = ("_words", "_len")

    def __init__(self, length: int) -> None:
        if length < 0:
            raise ValueError("BitVec length must be non-negative")
        self._len = length
        self._words = [0] * ((length + _WORD_BITS - 1) // _WORD_BITS)

    def __len__(self) -> int:
        return self._len

    def _locate(self, i: int) -> tuple[int, int]:
        if not 0 <= i < self._len:
            raise IndexError(f"bit index {i} out of range for length {self._len}")
        return i >> 6, i & 63

    def set(self, i: int) -> None:
        """Set bit ``i`` to one."""
        w, b = self._locate(i)
        self._words[w] = (self._words[w] | (1 << b)) & _WORD_MASK

    def get(self, i: int) -> bool:
        """Return whether bit ``i`` is set."""
        w, b = self._locate(i)
        return (self._words[w] >> b) & 1 == 1

    def clear(self) -> None:
        """Reset every bit to zero."""
        self._words = [0] * len(self._words)

    def __iter__(self):
        return (self.get(i) for i in range(self._len))

    def __repr__(self) -> str:
        return f"BitVec(len={self._len}, set={sum(self)})"