import pytest

from keyten.chunk import ChunkStep, drive_async, drive_sync
from keyten.context import Ctx, KernelCancelled, RenderSink, Runtime, block_on


class CountUp(ChunkStep):
    def __init__(self, remaining, chunk):
        self.remaining = remaining
        self.chunk = chunk

    def step(self):
        if self.remaining == 0:
            return None
        n = min(self.chunk, self.remaining)
        self.remaining -= n
        return n


def test_drive_sync_progresses_to_completion():
    ctx = Ctx.quiet()
    k = CountUp(1_000, 64)
    drive_sync(k, ctx)
    assert ctx.progress == 1_000
    assert k.remaining == 0


def test_drive_sync_observes_cancellation():
    ctx = Ctx.quiet()
    ctx.cancelled.set()
    k = CountUp(1_000, 64)
    with pytest.raises(KernelCancelled):
        drive_sync(k, ctx)
    assert ctx.progress > 0
    assert ctx.progress < 1_000


def test_drive_sync_observes_global_cancel():
    runtime = Runtime(workers=1)
    runtime.global_cancel.set()
    ctx = Ctx(runtime=runtime)
    with pytest.raises(KernelCancelled):
        drive_sync(CountUp(1_000, 64), ctx)
    assert 0 < ctx.progress < 1_000


def test_drive_async_under_block_on():
    ctx = Ctx.quiet()
    block_on(drive_async(CountUp(1_000, 64), ctx))
    assert ctx.progress == 1_000


@pytest.mark.asyncio
async def test_drive_async_in_event_loop_notifies_sink():
    sink = RenderSink(stride=100)
    ctx = Ctx.quiet().with_render(sink)
    await drive_async(CountUp(1_000, 64), ctx)
    assert ctx.progress == 1_000
    assert sink.notify.is_set()
    assert 0 < sink.last_notified_progress <= 1_000


def test_drive_async_zero_stride_never_records_progress():
    sink = RenderSink(stride=0)
    ctx = Ctx.quiet().with_render(sink)
    block_on(drive_async(CountUp(500, 50), ctx))
    assert sink.last_notified_progress == 0
    assert sink.notify.is_set()


def test_drive_async_cancel_signals_sink():
    sink = RenderSink(stride=1_000_000)
    ctx = Ctx.quiet().with_render(sink)
    ctx.cancelled.set()
    with pytest.raises(KernelCancelled):
        block_on(drive_async(CountUp(1_000, 64), ctx))
    assert sink.notify.is_set()
    assert ctx.progress < 1_000