"""Tree-walking evaluator over the syntax tree.

``eval_async`` is the canonical implementation; it awaits the adverb kernels
so their chunk yields reach the calling event loop. ``evaluate`` drives it to
completion on the current thread.
"""

from __future__ import annotations

import asyncio
import math
from typing import Callable

from keyten import adverb
from keyten.ast import (
    AdverbExpr,
    AdvId,
    ApplyExpr,
    AssignExpr,
    AtomExpr,
    AtomLit,
    CondExpr,
    DyadExpr,
    Expr,
    LambdaExpr,
    LambdaInner,
    ListExpr,
    MonadExpr,
    NameExpr,
    OpId,
    SeqExpr,
    Span,
    VecExpr,
)
from keyten.context import (
    Ctx,
    KernelError,
    KernelShapeError,
    KernelTypeError,
    block_on,
)
from keyten.env import Env
from keyten.values import (
    INF_F64,
    INF_I64,
    NULL_F64,
    NULL_I64,
    Kind,
    KObj,
    alloc_atom,
    alloc_lambda,
    alloc_vec,
    decode_sym,
)


class EvalError(Exception):
    """Base class for evaluation errors."""


class UndefinedNameError(EvalError):
    """A name was looked up that has no binding."""

    def __init__(self, name: int, span: Span) -> None:
        self.name = name
        self.span = span
        super().__init__(f"undefined name `{decode_sym(name)}`")


class EvalKernelError(EvalError):
    """A kernel failed while evaluating an expression."""

    def __init__(self, err: KernelError, span: Span) -> None:
        self.err = err
        self.span = span
        super().__init__(f"kernel: {type(err).__name__}")


class EvalTypeError(EvalError):
    """The expression is not well-typed or not supported."""

    def __init__(self, msg: str, span: Span) -> None:
        self.msg = msg
        self.span = span
        super().__init__(msg)


class EmptyExpressionError(EvalError):
    """An empty sequence or list was evaluated."""

    def __init__(self) -> None:
        super().__init__("empty expression")


_UNIFORM_KINDS = frozenset({Kind.I64, Kind.F64, Kind.BOOL, Kind.CHAR, Kind.SYM, Kind.U8})
_INTLIKE = frozenset({Kind.BOOL, Kind.U8, Kind.I64})
_NUMERIC = _INTLIKE | {Kind.F64}


def evaluate(expr: Expr, env: Env, ctx: Ctx | None = None) -> KObj:
    """Evaluate ``expr`` synchronously in ``env``."""
    return block_on(eval_async(expr, env, ctx))


async def eval_async(expr: Expr, env: Env, ctx: Ctx | None = None) -> KObj:
    """Evaluate ``expr`` in ``env``, yielding to the event loop inside kernels."""
    return await _eval(expr, env, ctx if ctx is not None else Ctx.quiet())


async def _eval(expr: Expr, env: Env, ctx: Ctx) -> KObj:
    if isinstance(expr, AtomExpr):
        return _make_atom(expr.lit)
    if isinstance(expr, VecExpr):
        return _make_vec(expr.kind, expr.items)
    if isinstance(expr, ListExpr):
        return await _eval_list(expr, env, ctx)
    if isinstance(expr, NameExpr):
        value = env.lookup(expr.sym)
        if value is None:
            raise UndefinedNameError(expr.sym, expr.span)
        return value
    if isinstance(expr, AssignExpr):
        value = await _eval(expr.value, env, ctx)
        env.bind(expr.name, value)
        return value
    if isinstance(expr, DyadExpr):
        x = await _eval(expr.lhs, env, ctx)
        y = await _eval(expr.rhs, env, ctx)
        fn = _DYADS.get(expr.verb)
        if fn is None:
            raise EvalTypeError(
                f"dyadic `{expr.verb.value}` not supported", expr.span
            )
        try:
            result = fn(x, y)
        except KernelError as err:
            raise EvalKernelError(err, expr.span) from err
        await asyncio.sleep(0)
        return result
    if isinstance(expr, MonadExpr):
        x = await _eval(expr.arg, env, ctx)
        if expr.verb not in _MONADS:
            raise EvalTypeError(
                "monadic form not supported for this verb", expr.span
            )
        try:
            return _apply_monad(expr.verb, x)
        except KernelError as err:
            raise EvalKernelError(err, expr.span) from err
    if isinstance(expr, AdverbExpr):
        x = await _eval(expr.arg, env, ctx)
        try:
            return await _apply_adverb(expr.adv, expr.verb, x, ctx)
        except KernelError as err:
            raise EvalKernelError(err, expr.span) from err
    if isinstance(expr, SeqExpr):
        if not expr.items:
            raise EmptyExpressionError()
        last = None
        for item in expr.items:
            last = await _eval(item, env, ctx)
        return last
    if isinstance(expr, CondExpr):
        c = await _eval(expr.cond, env, ctx)
        branch = expr.then_branch if _is_truthy(c) else expr.else_branch
        return await _eval(branch, env, ctx)
    if isinstance(expr, LambdaExpr):
        return alloc_lambda(LambdaInner(tuple(expr.params), expr.body))
    if isinstance(expr, ApplyExpr):
        return await _eval_apply(expr, env, ctx)
    raise EvalTypeError(f"unknown expression {type(expr).__name__}", Span())


async def _eval_list(expr: ListExpr, env: Env, ctx: Ctx) -> KObj:
    if not expr.items:
        raise EmptyExpressionError()
    vals = [await _eval(item, env, ctx) for item in expr.items]
    k0 = vals[0].kind
    if (
        k0 in _UNIFORM_KINDS
        and all(v.is_atom() and v.kind is k0 for v in vals)
    ):
        return alloc_vec(k0, (v.data for v in vals))
    return alloc_vec(Kind.LIST, vals)


async def _eval_apply(expr: ApplyExpr, env: Env, ctx: Ctx) -> KObj:
    f = await _eval(expr.func, env, ctx)
    if f.kind is not Kind.LAMBDA:
        raise EvalTypeError(f"not callable: kind {f.kind.value}", expr.span)
    vals = [await _eval(a, env, ctx) for a in expr.args]
    inner: LambdaInner = f.data
    if len(vals) != len(inner.params):
        raise EvalTypeError(
            f"arity mismatch: expected {len(inner.params)}, got {len(vals)}",
            expr.span,
        )
    # Parameters shadow caller bindings only for the duration of the call.
    saved = [(p, env.lookup(p)) for p in inner.params]
    for p, v in zip(inner.params, vals):
        env.bind(p, v)
    try:
        return await _eval(inner.body, env, ctx)
    finally:
        for p, prev in saved:
            if prev is None:
                env.unbind(p)
            else:
                env.bind(p, prev)


async def _apply_adverb(adv: AdvId, verb: OpId, x: KObj, ctx: Ctx) -> KObj:
    if adv is AdvId.OVER:
        return await adverb.over_async(verb, x, ctx)
    if adv is AdvId.SCAN:
        return await adverb.scan_async(verb, x, ctx)
    if adv is AdvId.EACH_PRIOR:
        return await adverb.eachprior_async(verb, x, ctx)
    # Each: uniform vectors of the basic kinds behave like the monadic verb.
    if x.is_atom() or x.kind in (Kind.I64, Kind.F64, Kind.BOOL):
        return _apply_monad(verb, x)
    raise KernelTypeError(f"each: unsupported kind {x.kind.value}")


def _is_truthy(c: KObj) -> bool:
    if c.is_atom():
        if c.kind in (Kind.BOOL, Kind.U8, Kind.CHAR, Kind.I64, Kind.SYM):
            return c.data != 0
        if c.kind is Kind.F64:
            return c.data != 0.0
        return True
    if len(c) == 0:
        return False
    if c.kind in (Kind.BOOL, Kind.U8, Kind.CHAR, Kind.I64):
        return c.data[0] != 0
    if c.kind is Kind.F64:
        return c.data[0] != 0.0
    return True


def _make_atom(lit: AtomLit) -> KObj:
    value = lit.value
    if lit.kind() is Kind.BOOL:
        value = 1 if value else 0
    return alloc_atom(lit.kind(), value)


def _to_f64(lit: AtomLit) -> float:
    if lit.kind() is Kind.F64:
        return lit.value
    if lit.kind() is Kind.I64:
        if lit.value == NULL_I64:
            return NULL_F64
        if lit.value == INF_I64:
            return INF_F64
        return float(lit.value)
    return 0.0


def _make_vec(kind: Kind, items: list[AtomLit]) -> KObj:
    if kind is Kind.F64:
        return alloc_vec(Kind.F64, (_to_f64(lit) for lit in items))
    if kind in (Kind.CHAR, Kind.SYM):
        return alloc_vec(kind, (lit.value if lit.kind() is kind else 0 for lit in items))
    return alloc_vec(
        Kind.I64, (lit.value if lit.kind() is Kind.I64 else 0 for lit in items)
    )


# ---- arithmetic ------------------------------------------------------


def _wrap(v: int) -> int:
    return ((v + (1 << 63)) % (1 << 64)) - (1 << 63)


def _divide(a: float, b: float) -> float:
    if b == 0.0:
        if a == 0.0 or math.isnan(a):
            return math.nan
        return math.copysign(math.inf, a) * math.copysign(1.0, b)
    return a / b


_INT_OPS: dict[OpId, Callable[[int, int], int]] = {
    OpId.PLUS: lambda a, b: a + b,
    OpId.MINUS: lambda a, b: a - b,
    OpId.TIMES: lambda a, b: a * b,
}

_FLOAT_OPS: dict[OpId, Callable[[float, float], float]] = {
    OpId.PLUS: lambda a, b: a + b,
    OpId.MINUS: lambda a, b: a - b,
    OpId.TIMES: lambda a, b: a * b,
    OpId.DIV: _divide,
}


def _arith(op: OpId, x: KObj, y: KObj) -> KObj:
    if x.kind not in _NUMERIC or y.kind not in _NUMERIC:
        raise KernelTypeError(f"`{op.value}` on {x.kind.value} and {y.kind.value}")
    if not x.is_atom() and not y.is_atom() and len(x) != len(y):
        raise KernelShapeError(f"length {len(x)} vs {len(y)}")
    as_float = op is OpId.DIV or Kind.F64 in (x.kind, y.kind)

    def floats(o: KObj, v):
        if o.kind is Kind.I64 and v == NULL_I64:
            return NULL_F64
        return float(v)

    if as_float:
        fop = _FLOAT_OPS[op]

        def elem(a, b):
            return fop(floats(x, a), floats(y, b))

        kind = Kind.F64
    else:
        iop = _INT_OPS[op]

        def elem(a, b):
            if (x.kind is Kind.I64 and a == NULL_I64) or (
                y.kind is Kind.I64 and b == NULL_I64
            ):
                return NULL_I64
            return _wrap(iop(a, b))

        kind = Kind.I64

    if x.is_atom() and y.is_atom():
        return alloc_atom(kind, elem(x.data, y.data))
    if x.is_atom():
        return alloc_vec(kind, (elem(x.data, b) for b in y.data))
    if y.is_atom():
        return alloc_vec(kind, (elem(a, y.data) for a in x.data))
    return alloc_vec(kind, (elem(a, b) for a, b in zip(x.data, y.data)))


_DYADS: dict[OpId, Callable[[KObj, KObj], KObj]] = {
    op: (lambda x, y, op=op: _arith(op, x, y))
    for op in (OpId.PLUS, OpId.MINUS, OpId.TIMES, OpId.DIV)
}


def _negate(x: KObj) -> KObj:
    if x.kind is Kind.I64:
        return _arith(OpId.MINUS, alloc_atom(Kind.I64, 0), x)
    if x.kind is Kind.F64:
        return _arith(OpId.MINUS, alloc_atom(Kind.F64, 0.0), x)
    raise KernelTypeError(f"negate on {x.kind.value}")


def _til(x: KObj) -> KObj:
    if not (x.is_atom() and x.kind is Kind.I64) or x.data == NULL_I64:
        raise KernelTypeError("til expects an integer atom")
    return alloc_vec(Kind.I64, range(max(0, x.data)))


def _identity(x: KObj) -> KObj:
    if x.kind in (Kind.DICT, Kind.TABLE):
        raise KernelTypeError(f"flip on {x.kind.value}")
    return x


_MONADS: dict[OpId, Callable[[KObj], KObj]] = {
    OpId.PLUS: _identity,
    OpId.MINUS: _negate,
    OpId.BANG: _til,
}


def _apply_monad(op: OpId, x: KObj) -> KObj:
    fn = _MONADS.get(op)
    if fn is None:
        raise KernelTypeError(f"monadic `{op.value}` not supported")
    return fn(x)