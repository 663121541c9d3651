"""Single-line progress display on standard error.

Each tick overprints the line with a spinner, the element count, elapsed
time and an exponential moving average of elements per second.
"""

from __future__ import annotations

import sys
import time
from typing import Callable, TextIO

from keyten.context import Ctx, RenderSink

SPINNER = (
    "\u2807",
    "\u2811",
    "\u2819",
    "\u2839",
    "\u2879",
    "\u28F8",
    "\u28D8",
    "\u28D4",
    "\u28C6",
    "\u2847",
)

_CLEAR_LINE = "\r\x1b[K"


def _is_tty(stream: TextIO) -> bool:
    try:
        return bool(stream.isatty())
    except (AttributeError, ValueError):
        return False


def _paint(text: str, *codes: str) -> str:
    return f"\x1b[{';'.join(codes)}m{text}\x1b[0m"


def fmt_count(n: int) -> str:
    """Compact count: ``999``, ``1.5K``, ``2.0M``, ``3.00B``."""
    if n < 1_000:
        return str(n)
    if n < 1_000_000:
        return f"{n / 1_000:.1f}K"
    if n < 1_000_000_000:
        return f"{n / 1_000_000:.1f}M"
    return f"{n / 1_000_000_000:.2f}B"


class ProgressPrinter:
    """Renders progress lines; does nothing unless the stream is a terminal."""

    def __init__(
        self,
        stream: TextIO | None = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._stream = stream
        self._clock = clock
        now = clock()
        self._started_at = now
        self._last_instant = now
        self._last_progress = 0
        self._rate = 0.0
        self._frame = 0

    def tick(self, processed: int) -> None:
        """Print one progress line for the latest element count."""
        stream = sys.stderr if self._stream is None else self._stream
        if not _is_tty(stream):
            return
        now = self._clock()
        dt = now - self._last_instant
        if dt > 0:
            inst = max(0, processed - self._last_progress) / dt
            self._rate = inst if self._rate == 0.0 else 0.3 * inst + 0.7 * self._rate
            self._last_progress = processed
            self._last_instant = now
        self._frame += 1
        spinner = SPINNER[self._frame % len(SPINNER)]
        elapsed = now - self._started_at
        line = (
            f"  {_paint(spinner, '1', '33')} {fmt_count(processed)} elems  "
            f"{elapsed:.1f}s  {fmt_count(int(self._rate))}/s   "
            f"{_paint('[^C] cancel', '36')}"
        )
        stream.write(_CLEAR_LINE + line)
        stream.flush()

    @staticmethod
    def clear() -> None:
        """Erase the progress line on standard error."""
        stream = sys.stderr
        if not _is_tty(stream):
            return
        stream.write(_CLEAR_LINE)
        stream.flush()


async def run_progress_loop(sink: RenderSink, ctx: Ctx) -> None:
    """Redraw once per wake of ``sink``; runs until cancelled."""
    printer = ProgressPrinter()
    while True:
        await sink.notify.wait()
        sink.notify.clear()
        printer.tick(ctx.progress)