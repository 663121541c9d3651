import math
import os
import re

import pytest

from keyten.ast import (
    AdverbExpr,
    AdvId,
    AssignExpr,
    AtomExpr,
    AtomLit,
    DyadExpr,
    MonadExpr,
    NameExpr,
    OpId,
    SeqExpr,
    VecExpr,
)
from keyten.cli.format import (
    format_value,
    format_with_width,
    terminal_width,
    visible_len,
)
from keyten.context import Ctx
from keyten.env import Env
from keyten.evaluator import eval_async, evaluate
from keyten.values import NULL_I64, Kind, alloc_atom, alloc_vec, encode_sym

_ANSI = re.compile(r"\x1b\[[0-9;]*m")


def _strip(s):
    return _ANSI.sub("", s)


def _no_terminal(*_args, **_kwargs):
    raise OSError("not a terminal")


@pytest.fixture(autouse=True)
def fixed_terminal(monkeypatch):
    monkeypatch.setattr(os, "get_terminal_size", _no_terminal)
    monkeypatch.setenv("COLUMNS", "80")


def i64(v):
    return AtomExpr(AtomLit(Kind.I64, v))


def i64_vec(*vals):
    return VecExpr(Kind.I64, [AtomLit(Kind.I64, v) for v in vals])


def run(expr):
    return evaluate(expr, Env(), Ctx.quiet())


def test_vec_plus_atom():
    r = run(DyadExpr(OpId.PLUS, i64_vec(1, 2, 3), i64(10)))
    assert format_value(r) == "11 12 13"


def test_over_sum():
    r = run(AdverbExpr(AdvId.OVER, OpId.PLUS, i64_vec(1, 2, 3, 4, 5)))
    assert format_value(r) == "15"


def test_div_promotes_to_float():
    r = run(DyadExpr(OpId.DIV, i64(7), i64(2)))
    assert format_value(r) == "3.5"


def test_null_renders_with_ansi():
    r = run(DyadExpr(OpId.PLUS, i64_vec(1, NULL_I64, 3), i64(10)))
    s = format_value(r)
    assert "11" in s
    assert "0N" in s
    assert "13" in s
    assert "\x1b[" in s


def test_assign_then_use():
    x = encode_sym("x")
    expr = SeqExpr(
        [
            AssignExpr(x, i64_vec(1, 2, 3)),
            AdverbExpr(AdvId.OVER, OpId.PLUS, NameExpr(x)),
        ]
    )
    assert format_value(run(expr)) == "6"


def test_long_vector_truncated_with_ellipsis():
    r = run(MonadExpr(OpId.BANG, i64(1000)))
    s = format_with_width(r, 40)
    assert s.endswith("..")
    assert len(s) <= 40
    assert s.startswith("0 1 2")


def test_short_vector_not_truncated():
    r = run(MonadExpr(OpId.BANG, i64(10)))
    assert format_with_width(r, 80) == "0 1 2 3 4 5 6 7 8 9"


def test_atom_never_truncated():
    r = run(AdverbExpr(AdvId.OVER, OpId.PLUS, MonadExpr(OpId.BANG, i64(1000))))
    assert format_value(r) == "499500"


@pytest.mark.asyncio
async def test_eval_async_under_event_loop():
    expr = AdverbExpr(AdvId.OVER, OpId.PLUS, i64_vec(1, 2, 3, 4, 5))
    r = await eval_async(expr, Env(), Ctx.quiet())
    assert format_value(r) == "15"


@pytest.mark.parametrize("width", [10, 25, 40, 79])
def test_truncated_output_fits_width(width):
    r = alloc_vec(Kind.I64, range(1000))
    s = format_with_width(r, width)
    assert visible_len(s) <= width
    assert s.endswith("..")


def test_integral_float_keeps_decimal_point():
    assert format_value(alloc_atom(Kind.F64, 2.0)) == "2.0"


def test_float_nan_and_inf_markers():
    v = alloc_vec(Kind.F64, [1.5, math.nan, math.inf])
    assert _strip(format_value(v)) == "1.5 0n 0w"


def test_integer_infinity_marker():
    v = alloc_vec(Kind.I64, [2**63 - 1, 4])
    assert _strip(format_value(v)) == "0W 4"


def test_symbols_written_without_spaces():
    v = alloc_vec(Kind.SYM, [encode_sym("a"), encode_sym("b"), encode_sym("c")])
    assert _strip(format_value(v)) == "`a`b`c"


def test_symbol_atom():
    assert _strip(format_value(alloc_atom(Kind.SYM, encode_sym("abc")))) == "`abc"


def test_char_vector_is_quoted():
    v = alloc_vec(Kind.CHAR, [ord(c) for c in "hi"])
    assert _strip(format_value(v)) == '"hi"'


def test_list_kind_shows_placeholder():
    v = alloc_vec(Kind.LIST, [alloc_atom(Kind.I64, 1)])
    assert _strip(format_value(v)) == "<List>"


def test_bool_vector():
    v = alloc_vec(Kind.BOOL, [1, 0, 1])
    assert format_value(v) == "1 0 1"


def test_visible_len_ignores_escapes():
    assert visible_len("\x1b[1;36mabc\x1b[0m") == 3


def test_terminal_width_from_columns(monkeypatch):
    monkeypatch.setenv("COLUMNS", "120")
    assert terminal_width() == 120


def test_terminal_width_falls_back(monkeypatch):
    monkeypatch.setenv("COLUMNS", "wide")
    assert terminal_width() == 80