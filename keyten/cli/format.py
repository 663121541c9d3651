"""Pretty-printer for values with terminal-width truncation.

A vector that does not fit on one line is cut short and ends in ``..``.
The width comes from the terminal on standard output, then the ``COLUMNS``
environment variable, then 80.
"""

from __future__ import annotations

import math
import os
import re
from decimal import Decimal
from typing import Any, Callable, Sequence

from keyten.values import INF_I64, NULL_I16, NULL_I32, NULL_I64, Kind, KObj, decode_sym

ELLIPSIS = ".."
DEFAULT_WIDTH = 80

_CSI = re.compile(r"\x1b\[[^\x40-\x7e]*[\x40-\x7e]?")

_DIM = ("2",)
_DIM_ITALIC = ("2", "3")
_GREEN = ("32",)
_CYAN = ("36",)

_COMPOSITE = frozenset({Kind.LIST, Kind.DICT, Kind.TABLE, Kind.LAMBDA})
_TEMPORAL = frozenset(
    {
        Kind.DATE,
        Kind.TIME_S,
        Kind.TIME_MS,
        Kind.TIME_US,
        Kind.TIME_NS,
        Kind.DT_S,
        Kind.DT_MS,
        Kind.DT_US,
        Kind.DT_NS,
    }
)


def _paint(text: str, *codes: str) -> str:
    return f"\x1b[{';'.join(codes)}m{text}\x1b[0m"


def format_value(value: KObj) -> str:
    """Render ``value`` to fit the current terminal width."""
    return format_with_width(value, terminal_width())


def format_with_width(value: KObj, max_width: int) -> str:
    """Render ``value`` aiming to fit within ``max_width`` columns."""
    kind = value.kind
    if kind is Kind.CHAR:
        return _format_chars(value)
    if kind is Kind.SYM:
        return _format_sym(value, max_width)
    if kind in _COMPOSITE:
        return _paint(f"<{kind.name.capitalize()}>", *_DIM)
    if kind in (Kind.BOOL, Kind.U8):
        render: Callable[[Any], str] = _render_byte
    elif kind in _TEMPORAL:
        render = _render_i64
    else:
        render = _RENDERERS[kind]
    if value.is_atom():
        return render(value.data)
    return _render_vec(value.data, render, max_width)


def _render_vec(xs: Sequence[Any], render: Callable[[Any], str], max_width: int) -> str:
    parts: list[str] = []
    width = 0
    last_index = len(xs) - 1
    trunc_budget = max(0, max_width - (len(ELLIPSIS) + 1))
    for i, v in enumerate(xs):
        r = render(v)
        extra = (1 if parts else 0) + visible_len(r)
        remaining = max(0, max_width - width)
        # Stop early when this element would leave no room for the marker,
        # or when even this element alone does not fit.
        if (i != last_index and width + extra > trunc_budget) or extra > remaining:
            parts.append(ELLIPSIS)
            return " ".join(parts)
        parts.append(r)
        width += extra
    return " ".join(parts)


def _char(v: Any) -> str:
    return chr(v) if isinstance(v, int) else str(v)


def _format_chars(value: KObj) -> str:
    if value.is_atom():
        text = _char(value.data)
    else:
        text = "".join(_char(v) for v in value.data)
    return _paint(f'"{text}"', *_GREEN)


def _sym_text(v: Any) -> str:
    return decode_sym(v) if isinstance(v, int) else str(v)


def _format_sym(value: KObj, max_width: int) -> str:
    if value.is_atom():
        return _paint(f"`{_sym_text(value.data)}", *_CYAN)
    # Symbols are written without separating spaces: `a`b`c
    out: list[str] = []
    width = 0
    trunc_budget = max(0, max_width - (len(ELLIPSIS) + 1))
    last_index = len(value.data) - 1
    for i, v in enumerate(value.data):
        styled = _paint(f"`{_sym_text(v)}", *_CYAN)
        w = visible_len(styled)
        if i != last_index and width + w > trunc_budget:
            out.append(ELLIPSIS)
            return "".join(out)
        out.append(styled)
        width += w
    return "".join(out)


def _render_byte(v: Any) -> str:
    return str(int(v))


def _render_i16(v: int) -> str:
    return _paint("0Nh", *_DIM_ITALIC) if v == NULL_I16 else str(v)


def _render_i32(v: int) -> str:
    return _paint("0Ni", *_DIM_ITALIC) if v == NULL_I32 else str(v)


def _render_i64(v: int) -> str:
    if v == NULL_I64:
        return _paint("0N", *_DIM_ITALIC)
    if v == INF_I64:
        return _paint("0W", *_DIM_ITALIC)
    return str(v)


def _render_f32(v: float) -> str:
    if math.isnan(v):
        return _paint("0ne", *_DIM_ITALIC)
    if math.isinf(v):
        return _paint("0we", *_DIM_ITALIC)
    return _format_float(v)


def _render_f64(v: float) -> str:
    if math.isnan(v):
        return _paint("0n", *_DIM_ITALIC)
    if math.isinf(v):
        return _paint("0w", *_DIM_ITALIC)
    return _format_float(v)


def _format_float(v: float) -> str:
    v = float(v)
    if v.is_integer() and abs(v) < 1e16:
        return f"{v:.1f}"
    # Shortest round-tripping digits, always in positional notation.
    return format(Decimal(repr(v)), "f")


_RENDERERS: dict[Kind, Callable[[Any], str]] = {
    Kind.I16: _render_i16,
    Kind.I32: _render_i32,
    Kind.I64: _render_i64,
    Kind.F32: _render_f32,
    Kind.F64: _render_f64,
}


def visible_len(s: str) -> int:
    """Printed width of ``s``, ignoring ANSI CSI escape sequences."""
    return len(_CSI.sub("", s))


def terminal_width() -> int:
    """Width of the terminal on stdout, else ``$COLUMNS``, else 80."""
    try:
        cols = os.get_terminal_size(1).columns
    except (OSError, ValueError):
        cols = 0
    if cols > 0:
        return cols
    try:
        n = int(os.environ.get("COLUMNS", ""))
    except ValueError:
        n = 0
    return n if n > 0 else DEFAULT_WIDTH