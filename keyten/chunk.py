"""Chunked streaming kernels and the drivers that run them.

A kernel processes one chunk of input per ``step()`` call. ``drive_sync``
runs it to completion without any async machinery; ``drive_async`` yields to
the event loop between chunks. Both observe cancellation and record progress
at every chunk boundary.
"""

from __future__ import annotations

import asyncio
from abc import ABC, abstractmethod

from keyten.context import Ctx, KernelCancelled


class ChunkStep(ABC):
    """A streaming kernel that processes one chunk at a time."""

    @abstractmethod
    def step(self) -> int | None:
        """Process one chunk; return the element count, or ``None`` when exhausted."""


def _is_cancelled(ctx: Ctx) -> bool:
    return ctx.cancelled.is_set() or ctx.runtime.global_cancel.is_set()


def drive_sync(kernel: ChunkStep, ctx: Ctx) -> None:
    """Run ``kernel`` to completion on the current thread.

    Raises ``KernelCancelled`` once a chunk finishes after cancellation was
    requested, either on the context or process-wide.
    """
    while (n := kernel.step()) is not None:
        ctx.progress += n
        if _is_cancelled(ctx):
            raise KernelCancelled()


async def drive_async(kernel: ChunkStep, ctx: Ctx) -> None:
    """Run ``kernel`` to completion, yielding between chunks.

    When the context carries a render sink it is signalled each time progress
    advances by at least its stride, on cancellation, and once at the end.
    """
    sink = ctx.render
    while (n := kernel.step()) is not None:
        ctx.progress += n
        if _is_cancelled(ctx):
            if sink is not None:
                sink.notify.set()
            raise KernelCancelled()
        if sink is not None and sink.stride > 0:
            if ctx.progress - sink.last_notified_progress >= sink.stride:
                sink.last_notified_progress = ctx.progress
                sink.notify.set()
        await asyncio.sleep(0)
    if sink is not None:
        sink.notify.set()