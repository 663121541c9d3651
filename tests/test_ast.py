from keyten.ast import (
    AdvId,
    AdverbExpr,
    AtomExpr,
    AtomLit,
    DyadExpr,
    LambdaExpr,
    LambdaInner,
    OpId,
    SeqExpr,
    Span,
)
from keyten.values import INF_I64, NULL_I64, Kind, encode_sym


def test_span_merge_covers_both():
    a = Span(3, 7)
    b = Span(5, 12)
    m = Span.merge(a, b)
    assert m == Span(3, 12)
    assert Span.merge(b, a) == m


def test_span_merge_with_contained_span():
    outer = Span(0, 20)
    assert Span.merge(outer, Span(4, 6)) == outer


def test_atom_lit_kinds():
    assert AtomLit(Kind.I64, 42).kind() is Kind.I64
    assert AtomLit(Kind.I64, NULL_I64).kind() is Kind.I64
    assert AtomLit(Kind.I64, INF_I64).kind() is Kind.I64
    assert AtomLit(Kind.BOOL, True).kind() is Kind.BOOL
    assert AtomLit(Kind.SYM, encode_sym("a")).kind() is Kind.SYM


def test_div_verb_is_percent():
    assert OpId("%") is OpId.DIV
    assert OpId.PLUS.value == "+"


def test_adverb_glyphs():
    assert AdvId("/") is AdvId.OVER
    assert AdvId("':") is AdvId.EACH_PRIOR


def test_default_span_is_empty():
    e = AtomExpr(AtomLit(Kind.I64, 1))
    assert e.span == Span()
    assert e.span.start == e.span.end


def test_nested_expression_structure():
    one = AtomExpr(AtomLit(Kind.I64, 1), Span(0, 1))
    two = AtomExpr(AtomLit(Kind.I64, 2), Span(4, 5))
    d = DyadExpr(OpId.PLUS, one, two, Span.merge(one.span, two.span))
    assert d.span == Span(0, 5)
    adv = AdverbExpr(AdvId.OVER, OpId.PLUS, d)
    seq = SeqExpr([d, adv])
    assert seq.items[-1].arg is d


def test_lambda_inner_shares_body():
    body = AtomExpr(AtomLit(Kind.I64, 0))
    x = encode_sym("x")
    lam = LambdaExpr([x], body)
    inner = LambdaInner(tuple(lam.params), lam.body)
    assert inner.body is body
    assert inner.params == (x,)