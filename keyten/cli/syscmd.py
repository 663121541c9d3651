"""System commands: input lines beginning with a backslash.

``\\t expr`` times an evaluation, ``\\v`` lists bound names, ``\\p [0|1]``
shows or sets parallel execution, ``\\h`` / ``\\?`` prints help and a bare
``\\`` or ``\\\\`` quits.
"""

from __future__ import annotations

import time
from enum import Enum
from typing import Callable

from keyten.cli.format import format_value
from keyten.cli.names import Names
from keyten.context import RUNTIME, KernelCancelled, KernelError
from keyten.env import Env
from keyten.evaluator import EvalError, EvalKernelError
from keyten.values import KObj

Runner = Callable[[str, Env], KObj]

_PARALLEL_HINT = "(`\\p 1` to enable, `\\p 0` to disable)"

_HELP_LINES = (
    "System commands (start with `\\`):",
    "  \\t expr    time the evaluation of expr (prints value + elapsed)",
    "  \\v         list bound variable names",
    "  \\p [0|1]   show or toggle parallel kernel execution",
    "  \\h, \\?     this help",
    "  \\\\         quit",
    "",
    "Language:",
    "  Verbs:           +  -  *  %",
    "  Monadic verbs:   -x (negate)  !n (til: 0..n-1)",
    "  Adverbs:         +/  (over)",
    '  Atoms:           42  3.14  "a"  `sym  0N  0n  0W  0w',
    "  Vectors:         1 2 3   1.5 2.5 3.5   `a`b `c",
    "  Assignment:      x: 1 2 3",
)

_HELP_FOOTER = "Try: \\t +/!1000000   |   Tab completes names   |   Ctrl-C cancels"


class SysOutcome(Enum):
    """What the read loop should do after a system command."""

    CONTINUE = "continue"
    QUIT = "quit"


def _paint(text: str, *codes: str) -> str:
    return f"\x1b[{';'.join(codes)}m{text}\x1b[0m"


def dispatch(line: str, env: Env, run: Runner | None = None) -> SysOutcome:
    """Carry out the system command in ``line``.

    ``run`` evaluates an expression in ``env``; it is needed only by ``\\t``.
    """
    if not line.startswith("\\"):
        raise ValueError(f"not a system command: {line!r}")
    rest = line[1:].lstrip()
    if not rest or rest == "\\":
        return SysOutcome.QUIT

    parts = rest.split(None, 1)
    cmd = parts[0]
    args = parts[1].strip() if len(parts) > 1 else ""

    if cmd == "t":
        _cmd_time(args, env, run)
    elif cmd == "v":
        _cmd_vars(env)
    elif cmd == "p":
        _cmd_parallel(args)
    elif cmd in ("h", "?"):
        print(_help_text())
    else:
        print(_paint(f"unknown system command: \\{cmd}", "31"))
    return SysOutcome.CONTINUE


def _debug_str(s: str) -> str:
    return '"' + s.replace("\\", "\\\\").replace('"', '\\"') + '"'


def _cmd_parallel(arg: str) -> None:
    if not arg:
        state = "on" if RUNTIME.parallel_enabled() else "off"
        print(
            f"parallel: {_paint(state, '1', '32')}   "
            f"workers: {_paint(str(RUNTIME.worker_count()), '1', '32')}   "
            f"{_paint(_PARALLEL_HINT, '2')}"
        )
        return
    arg = arg.strip()
    if arg in ("1", "on", "true"):
        RUNTIME.set_parallel(True)
        print(
            f"parallel: {_paint('on', '1', '32')}   "
            f"workers: {_paint(str(RUNTIME.worker_count()), '1', '32')}"
        )
    elif arg in ("0", "off", "false"):
        RUNTIME.set_parallel(False)
        print(f"parallel: {_paint('off', '1', '32')}")
    else:
        print(
            _paint(
                f"\\p: unknown argument {_debug_str(arg)}; expected 0|1|on|off", "31"
            )
        )


def _error(msg: str) -> str:
    return _paint(f"error: {msg}", "1", "31")


def _run_and_render(run: Runner, expr: str, env: Env) -> str:
    cancelled = _paint("cancelled", "33")
    try:
        return format_value(run(expr, env))
    except KernelCancelled:
        return cancelled
    except EvalKernelError as err:
        if isinstance(err.err, KernelCancelled):
            return cancelled
        return _error(str(err))
    except (EvalError, KernelError, ValueError, SyntaxError) as err:
        return _error(str(err))


def _cmd_time(expr: str, env: Env, run: Runner | None) -> None:
    if not expr:
        print(_paint("usage: \\t expr   (times the evaluation of expr)", "31"))
        return
    if run is None:
        print(_error("no evaluator available"))
        return
    start = time.perf_counter()
    rendered = _run_and_render(run, expr, env)
    ms = (time.perf_counter() - start) * 1000.0
    timing = _paint(f"({format_ms(ms)})", "2")
    print(f"{rendered}   {timing}")


def _cmd_vars(env: Env) -> None:
    names = Names()
    names.refresh_from(env)
    if not len(names):
        print(_paint("  (no variables bound)", "2"))
        return
    for name in names:
        print(f"  {_paint(name, '1', '93')}")


def _help_text() -> str:
    return "\n".join([*_HELP_LINES, _paint(_HELP_FOOTER, "90")])


def format_ms(ms: float) -> str:
    """Human-readable duration from milliseconds: µs, ms or s."""
    if ms < 1.0:
        return f"{ms * 1000.0:.0f} µs"
    if ms < 1000.0:
        return f"{ms:.2f} ms"
    return f"{ms / 1000.0:.3f} s"