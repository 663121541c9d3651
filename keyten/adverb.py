"""Adverbs: over (``op/x``), scan (``op\\x``) and eachprior (``op':x``).

Folds run as chunked kernels so they observe cancellation and report
progress; large integer and float folds may be split across worker threads
when parallel execution is enabled on the runtime.
"""

from __future__ import annotations

import asyncio
import threading
from concurrent.futures import ThreadPoolExecutor
from itertools import accumulate
from typing import Callable, Sequence, TypeVar

from keyten.ast import OpId
from keyten.chunk import ChunkStep, drive_async, drive_sync
from keyten.context import Ctx, KernelCancelled, KernelTypeError, block_on
from keyten.values import NULL_I64, Kind, KObj, alloc_atom, alloc_vec

I64_CHUNK = 1 << 16
F64_CHUNK = 1 << 16
PARALLEL_THRESHOLD = 1 << 16

_A = TypeVar("_A")
_K = TypeVar("_K", bound=ChunkStep)


def _wrap_i64(v: int) -> int:
    return ((v + (1 << 63)) % (1 << 64)) - (1 << 63)


def _add_i64(a: int, b: int) -> int:
    return _wrap_i64(a + b)


def _sub_i64(a: int, b: int) -> int:
    return _wrap_i64(a - b)


class _Chunked(ChunkStep):
    def __init__(self, xs: Sequence, chunk: int) -> None:
        self._xs = xs
        self._off = 0
        self._chunk = max(1, chunk)

    def _next_slice(self) -> Sequence | None:
        if self._off >= len(self._xs):
            return None
        end = min(self._off + self._chunk, len(self._xs))
        part = self._xs[self._off:end]
        self._off = end
        return part


class SumI64(_Chunked):
    """Wrapping 64-bit integer sum."""

    def __init__(self, xs: Sequence[int], chunk: int) -> None:
        super().__init__(xs, chunk)
        self.acc = 0

    def step(self) -> int | None:
        part = self._next_slice()
        if part is None:
            return None
        self.acc = _wrap_i64(self.acc + sum(part))
        return len(part)


class SumI64SkipNulls(_Chunked):
    """Wrapping 64-bit integer sum that ignores null elements."""

    def __init__(self, xs: Sequence[int], chunk: int) -> None:
        super().__init__(xs, chunk)
        self.acc = 0

    def step(self) -> int | None:
        part = self._next_slice()
        if part is None:
            return None
        self.acc = _wrap_i64(self.acc + sum(v for v in part if v != NULL_I64))
        return len(part)


class SumF64(_Chunked):
    """Sequential floating-point sum."""

    def __init__(self, xs: Sequence[float], chunk: int) -> None:
        super().__init__(xs, chunk)
        self.acc = 0.0

    def step(self) -> int | None:
        part = self._next_slice()
        if part is None:
            return None
        acc = self.acc
        for v in part:
            acc += v
        self.acc = acc
        return len(part)


def _balanced(n: int, parts: int) -> list[range]:
    base, extra = divmod(n, parts)
    ranges = []
    start = 0
    for i in range(parts):
        size = base + (1 if i < extra else 0)
        ranges.append(range(start, start + size))
        start += size
    return ranges


def _parallel_reduce(
    n: int,
    ctx: Ctx,
    identity: _A,
    make: Callable[[range], _K],
    extract: Callable[[_K], _A],
    combine: Callable[[_A, _A], _A],
) -> _A:
    workers = max(1, min(ctx.runtime.worker_count(), n))
    lock = threading.Lock()

    def run(r: range) -> _A:
        kernel = make(r)
        while (step := kernel.step()) is not None:
            with lock:
                ctx.progress += step
            if ctx.cancelled.is_set() or ctx.runtime.global_cancel.is_set():
                raise KernelCancelled()
        return extract(kernel)

    with ThreadPoolExecutor(max_workers=workers) as pool:
        partials = list(pool.map(run, _balanced(n, workers)))
    acc = identity
    for p in partials:
        acc = combine(acc, p)
    return acc


def _chunk(ctx: Ctx, default: int) -> int:
    return ctx.chunk_elems or default


def _go_parallel(ctx: Ctx, n: int) -> bool:
    return ctx.runtime.parallel_enabled() and n >= PARALLEL_THRESHOLD


def _plus_over_i64(x: KObj, ctx: Ctx) -> KObj:
    chunk = _chunk(ctx, I64_CHUNK)
    k = SumI64SkipNulls(x.data, chunk) if x.has_nulls() else SumI64(x.data, chunk)
    drive_sync(k, ctx)
    return alloc_atom(Kind.I64, k.acc)


def _plus_over_f64(x: KObj, ctx: Ctx) -> KObj:
    k = SumF64(x.data, _chunk(ctx, F64_CHUNK))
    drive_sync(k, ctx)
    return alloc_atom(Kind.F64, k.acc)


async def _plus_over_i64_async(x: KObj, ctx: Ctx) -> KObj:
    xs = x.data
    chunk = _chunk(ctx, I64_CHUNK)
    if not x.has_nulls() and _go_parallel(ctx, len(xs)):
        acc = _parallel_reduce(
            len(xs), ctx, 0,
            lambda r: SumI64(xs[r.start:r.stop], chunk),
            lambda k: k.acc,
            _add_i64,
        )
    else:
        k = SumI64SkipNulls(xs, chunk) if x.has_nulls() else SumI64(xs, chunk)
        await drive_async(k, ctx)
        acc = k.acc
    return alloc_atom(Kind.I64, acc)


async def _plus_over_f64_async(x: KObj, ctx: Ctx) -> KObj:
    xs = x.data
    chunk = _chunk(ctx, F64_CHUNK)
    if _go_parallel(ctx, len(xs)):
        # Float addition is not associative: partial sums may differ from the
        # sequential result in the last bits.
        acc = _parallel_reduce(
            len(xs), ctx, 0.0,
            lambda r: SumF64(xs[r.start:r.stop], chunk),
            lambda k: k.acc,
            lambda a, b: a + b,
        )
    else:
        k = SumF64(xs, chunk)
        await drive_async(k, ctx)
        acc = k.acc
    return alloc_atom(Kind.F64, acc)


def over(op: OpId, x: KObj, ctx: Ctx) -> KObj:
    """Fold ``op`` across ``x`` synchronously; atoms are returned unchanged."""
    if x.is_atom():
        return x
    if op is OpId.PLUS and x.kind is Kind.I64:
        return _plus_over_i64(x, ctx)
    if op is OpId.PLUS and x.kind is Kind.F64:
        return _plus_over_f64(x, ctx)
    raise KernelTypeError(f"over: unsupported {op.value} on {x.kind.value}")


async def over_async(op: OpId, x: KObj, ctx: Ctx) -> KObj:
    """Fold ``op`` across ``x``, yielding between chunks."""
    if x.is_atom():
        return x
    if op is OpId.PLUS and x.kind is Kind.I64:
        return await _plus_over_i64_async(x, ctx)
    if op is OpId.PLUS and x.kind is Kind.F64:
        return await _plus_over_f64_async(x, ctx)
    raise KernelTypeError(f"over: unsupported {op.value} on {x.kind.value}")


async def scan_async(op: OpId, x: KObj, ctx: Ctx) -> KObj:
    """Running aggregate of ``op`` over ``x``; same length as ``x``."""
    if x.is_atom():
        return x
    if op is OpId.PLUS and x.kind is Kind.I64:
        result = alloc_vec(Kind.I64, accumulate(x.data, _add_i64))
    elif op is OpId.PLUS and x.kind is Kind.F64:
        result = alloc_vec(Kind.F64, accumulate(x.data, lambda a, b: a + b))
    else:
        raise KernelTypeError(f"scan: unsupported {op.value} on {x.kind.value}")
    await asyncio.sleep(0)
    return result


async def eachprior_async(op: OpId, x: KObj, ctx: Ctx) -> KObj:
    """Apply ``op`` to consecutive pairs: ``[x0, f(x1, x0), f(x2, x1), ...]``."""
    if x.is_atom():
        return x
    if x.kind is Kind.I64 and op is OpId.MINUS:
        fn = _sub_i64
    elif x.kind is Kind.I64 and op is OpId.PLUS:
        fn = _add_i64
    else:
        raise KernelTypeError(f"eachprior: unsupported {op.value} on {x.kind.value}")
    xs = x.data
    return alloc_vec(Kind.I64, [*xs[:1], *(fn(cur, prev) for prev, cur in zip(xs, xs[1:]))])


def over_blocking(op: OpId, x: KObj, ctx: Ctx) -> KObj:
    """Run ``over_async`` to completion on the current thread."""
    return block_on(over_async(op, x, ctx))