"""Execution context threaded through kernels, and a minimal coroutine driver."""

from __future__ import annotations

import asyncio
import os
import threading
from dataclasses import dataclass, field
from typing import Any, Awaitable, TypeVar

T = TypeVar("T")


class KernelError(Exception):
    """Base class for errors raised by kernels."""


class KernelCancelled(KernelError):
    """The computation was cancelled."""


class KernelOom(KernelError):
    """The computation ran out of memory."""


class KernelTypeError(KernelError):
    """Operand kinds are not supported by the kernel."""


class KernelShapeError(KernelError):
    """Operand lengths do not conform."""


class Runtime:
    """Process-wide settings: parallel execution and global cancellation."""

    def __init__(self, workers: int | None = None) -> None:
        self._parallel = False
        self._workers = max(1, workers or os.cpu_count() or 1)
        self.global_cancel = threading.Event()

    def set_parallel(self, enabled: bool) -> None:
        self._parallel = bool(enabled)

    def parallel_enabled(self) -> bool:
        return self._parallel

    def worker_count(self) -> int:
        return self._workers


RUNTIME = Runtime()


@dataclass
class RenderSink:
    """UI wake-up channel signalled at chunk boundaries every ``stride`` elements."""

    stride: int = 0
    last_notified_progress: int = 0
    notify: asyncio.Event = field(default_factory=asyncio.Event)


@dataclass
class Ctx:
    """Per-call context: runtime, cancellation flag, progress counter, render sink."""

    runtime: Runtime = field(default_factory=lambda: RUNTIME)
    cancelled: threading.Event = field(default_factory=threading.Event)
    progress: int = 0
    render: RenderSink | None = None
    chunk_elems: int = 0

    @classmethod
    def quiet(cls) -> Ctx:
        """A context with no render sink and the kernel-default chunk size."""
        return cls()

    def with_chunk(self, chunk_elems: int) -> Ctx:
        self.chunk_elems = chunk_elems
        return self

    def with_render(self, render: RenderSink) -> Ctx:
        self.render = render
        return self


def block_on(coro: Awaitable[T]) -> T:
    """Run an awaitable to completion on the current thread.

    Only bare yields (such as ``asyncio.sleep(0)``) are supported; awaiting
    anything that needs an event loop raises ``RuntimeError``.
    """
    it: Any = coro.__await__()
    try:
        while True:
            yielded = it.send(None)
            if yielded is not None:
                it.close()
                raise RuntimeError("block_on cannot wait on an event-loop future")
    except StopIteration as done:
        return done.value