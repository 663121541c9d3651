"""Runtime values: kinds, atoms, vectors, lambdas and packed symbols."""

from __future__ import annotations

import math
from dataclasses import dataclass
from enum import Enum
from typing import Any, Iterable

HAS_NULLS = 0x01

NULL_I16 = -(2**15)
NULL_I32 = -(2**31)
NULL_I64 = -(2**63)
INF_I64 = 2**63 - 1
NULL_F64 = math.nan
INF_F64 = math.inf


class Kind(Enum):
    """Element kind of a value."""

    BOOL = "bool"
    U8 = "u8"
    CHAR = "char"
    I16 = "i16"
    I32 = "i32"
    I64 = "i64"
    F32 = "f32"
    F64 = "f64"
    SYM = "sym"
    DATE = "date"
    TIME_S = "time_s"
    TIME_MS = "time_ms"
    TIME_US = "time_us"
    TIME_NS = "time_ns"
    DT_S = "dt_s"
    DT_MS = "dt_ms"
    DT_US = "dt_us"
    DT_NS = "dt_ns"
    LIST = "list"
    DICT = "dict"
    TABLE = "table"
    LAMBDA = "lambda"

    def elem_size(self) -> int:
        """Storage size in bytes of one element of this kind."""
        return _ELEM_SIZES[self]


_ELEM_SIZES = {
    Kind.BOOL: 1,
    Kind.U8: 1,
    Kind.CHAR: 1,
    Kind.I16: 2,
    Kind.I32: 4,
    Kind.I64: 8,
    Kind.F32: 4,
    Kind.F64: 8,
    Kind.SYM: 8,
    Kind.DATE: 8,
    Kind.TIME_S: 8,
    Kind.TIME_MS: 8,
    Kind.TIME_US: 8,
    Kind.TIME_NS: 8,
    Kind.DT_S: 8,
    Kind.DT_MS: 8,
    Kind.DT_US: 8,
    Kind.DT_NS: 8,
    Kind.LIST: 8,
    Kind.DICT: 8,
    Kind.TABLE: 8,
    Kind.LAMBDA: 8,
}

_INT_NULLS = {
    Kind.I16: NULL_I16,
    Kind.I32: NULL_I32,
    Kind.I64: NULL_I64,
    Kind.DATE: NULL_I64,
    Kind.TIME_S: NULL_I64,
    Kind.TIME_MS: NULL_I64,
    Kind.TIME_US: NULL_I64,
    Kind.TIME_NS: NULL_I64,
    Kind.DT_S: NULL_I64,
    Kind.DT_MS: NULL_I64,
    Kind.DT_US: NULL_I64,
    Kind.DT_NS: NULL_I64,
}


def _is_null(kind: Kind, v: Any) -> bool:
    if kind in (Kind.F32, Kind.F64):
        return isinstance(v, float) and math.isnan(v)
    null = _INT_NULLS.get(kind)
    return null is not None and v == null


@dataclass
class KObj:
    """A value: an atom (``data`` is a scalar) or a vector (``data`` is a list)."""

    kind: Kind
    data: Any
    atom: bool
    attr: int = 0

    def is_atom(self) -> bool:
        return self.atom

    def has_nulls(self) -> bool:
        return bool(self.attr & HAS_NULLS)

    def __len__(self) -> int:
        return 1 if self.atom else len(self.data)

    def __bool__(self) -> bool:
        return True


def alloc_atom(kind: Kind, value: Any) -> KObj:
    """Build an atom of ``kind``; null sentinels set the null attribute."""
    attr = HAS_NULLS if _is_null(kind, value) else 0
    return KObj(kind, value, atom=True, attr=attr)


def alloc_vec(kind: Kind, items: Iterable[Any]) -> KObj:
    """Build a vector of ``kind``; the null attribute is set if any item is null."""
    data = list(items)
    attr = HAS_NULLS if any(_is_null(kind, v) for v in data) else 0
    return KObj(kind, data, atom=False, attr=attr)


def alloc_lambda(inner: Any) -> KObj:
    """Wrap a lambda body as a callable atom."""
    return KObj(Kind.LAMBDA, inner, atom=True)


def encode_sym(name: str) -> int:
    """Pack a name of at most 8 bytes into a little-endian signed 64-bit int."""
    raw = name.encode("utf-8")
    if len(raw) > 8:
        raise ValueError(f"symbol {name!r} longer than 8 bytes")
    if b"\0" in raw:
        raise ValueError("symbol may not contain NUL bytes")
    return int.from_bytes(raw.ljust(8, b"\0"), "little", signed=True)


def decode_sym(packed: int) -> str:
    """Unpack a symbol; bytes after the first NUL are ignored."""
    raw = (packed & 0xFFFFFFFFFFFFFFFF).to_bytes(8, "little")
    end = raw.find(b"\0")
    if end >= 0:
        raw = raw[:end]
    return raw.decode("utf-8", errors="replace")