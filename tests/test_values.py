import math

import pytest

from keyten.values import (
    INF_I64,
    NULL_I64,
    Kind,
    alloc_atom,
    alloc_lambda,
    alloc_vec,
    decode_sym,
    encode_sym,
)


@pytest.mark.parametrize("name", ["x", "abc", "foo_bar", "abcdefgh", "Z9"])
def test_sym_round_trip(name):
    assert decode_sym(encode_sym(name)) == name


def test_sym_little_endian_packing():
    assert encode_sym("a") == ord("a")


def test_empty_sym_is_zero():
    assert encode_sym("") == 0
    assert decode_sym(0) == ""


def test_sym_too_long_rejected():
    with pytest.raises(ValueError):
        encode_sym("abcdefghi")


def test_distinct_names_pack_differently():
    assert encode_sym("ab") != encode_sym("ba")
    assert decode_sym(encode_sym("ab")) != decode_sym(encode_sym("ba"))


def test_i64_elem_size():
    assert Kind.I64.elem_size() == 8
    assert Kind.F64.elem_size() == Kind.I64.elem_size() == Kind.SYM.elem_size()
    assert Kind.BOOL.elem_size() == Kind.CHAR.elem_size() == Kind.U8.elem_size()


def test_vector_without_nulls():
    v = alloc_vec(Kind.I64, [1, 2, 3])
    assert not v.is_atom()
    assert len(v) == 3
    assert not v.has_nulls()
    assert v.data == [1, 2, 3]


def test_vector_with_i64_null_flagged():
    v = alloc_vec(Kind.I64, [1, NULL_I64, 3])
    assert v.has_nulls()


def test_infinity_is_not_null():
    v = alloc_vec(Kind.I64, [INF_I64])
    assert not v.has_nulls()


def test_vector_with_nan_flagged():
    v = alloc_vec(Kind.F64, [1.0, math.nan])
    assert v.has_nulls()


def test_atom_null_flag_and_length():
    a = alloc_atom(Kind.I64, NULL_I64)
    assert a.is_atom()
    assert a.has_nulls()
    assert len(a) == 1
    assert not alloc_atom(Kind.I64, 7).has_nulls()


def test_empty_vector_still_truthy():
    v = alloc_vec(Kind.F64, [])
    assert len(v) == 0
    assert bool(v) is True


def test_lambda_atom_holds_inner():
    inner = object()
    f = alloc_lambda(inner)
    assert f.kind is Kind.LAMBDA
    assert f.is_atom()
    assert f.data is inner