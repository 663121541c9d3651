# keyten

keyten is a small array language in the K tradition. Values are atoms or
homogeneous vectors (booleans, integers, floats, characters, symbols) or
lambdas, and expressions are evaluated by a tree-walking evaluator whose
reductions run in chunks, so long computations report progress and can be
cancelled.

The package has two parts:

- `keyten` — the language core:
  - `keyten.values`: `Kind`, `KObj`, `alloc_atom`, `alloc_vec`,
    `alloc_lambda`, the null and infinity sentinels (`NULL_I64`, `INF_I64`,
    `NULL_F64`, `INF_F64`, ...) and `encode_sym` / `decode_sym`, which pack
    names of up to 8 bytes into 64-bit integers;
  - `keyten.ast`: the expression tree (`AtomExpr`, `VecExpr`, `ListExpr`,
    `NameExpr`, `AssignExpr`, `DyadExpr`, `MonadExpr`, `AdverbExpr`,
    `SeqExpr`, `CondExpr`, `LambdaExpr`, `ApplyExpr`), `AtomLit`, `OpId`,
    `AdvId` and `Span`;
  - `keyten.context`: `Ctx`, `Runtime`, `RenderSink`, `block_on` and the
    `KernelError` family (`KernelCancelled`, `KernelTypeError`,
    `KernelShapeError`, `KernelOom`);
  - `keyten.env`: `Env`, the variable environment;
  - `keyten.chunk`: `ChunkStep`, `drive_sync` and `drive_async`;
  - `keyten.adverb`: `over`, `over_async`, `over_blocking`, `scan_async`,
    `eachprior_async` and the sum kernels `SumI64`, `SumI64SkipNulls`,
    `SumF64`;
  - `keyten.evaluator`: `evaluate` and `eval_async`;
  - `keyten.bitvec`: `BitVec`, a fixed-length bit vector.
- `keyten.cli` — pieces of an interactive front end: result formatting that
  fits the terminal width, a bound-name registry, name completion, syntax
  highlighting, bracket validation, a progress line, system commands, a
  prompt, a persistent history, a system probe and a start-up banner.

## Installation

```
pip install keyten
```

For running the tests:

```
pip install "keyten[test]"
pytest
```

## Evaluating expressions

Expressions are built from the node classes in `keyten.ast` and evaluated
against an `Env`:

```python
from keyten.ast import AdverbExpr, AdvId, AtomExpr, AtomLit, MonadExpr, OpId
from keyten.context import Ctx
from keyten.env import Env
from keyten.evaluator import evaluate
from keyten.values import Kind
from keyten.cli.format import format_with_width

# +/!1000
expr = AdverbExpr(
    AdvId.OVER, OpId.PLUS,
    MonadExpr(OpId.BANG, AtomExpr(AtomLit(Kind.I64, 1000))),
)
value = evaluate(expr, Env(), Ctx.quiet())
format_with_width(value, 80)   # '499500'
```

- `evaluate(expr, env, ctx)` runs to completion on the current thread;
- `eval_async(expr, env, ctx)` is the coroutine form, which yields between
  chunks so a progress printer or a cancellation handler can run alongside.

`Ctx.quiet()` gives a context with no render sink and the default chunk
size. Setting `ctx.cancelled` (a `threading.Event`) or
`ctx.runtime.global_cancel` stops a running reduction at the next chunk
boundary with `KernelCancelled`. `Runtime.set_parallel(True)` lets large
integer and float sums be split across worker threads.

What the evaluator supports:

- dyadic `+ - *` on integers and floats (wrapping 64-bit integer arithmetic,
  nulls propagate) and `%`, which always gives floats; atoms broadcast
  against vectors, and vectors of different lengths raise
  `KernelShapeError`;
- monadic `+` (identity), `-` (negate) and `!` (til: `0 .. n-1`);
- adverbs: `+/` (over) and `+\` (scan) on integer and float vectors, `'`
  (each) with the monadic verbs, and `+':` / `-':` (eachprior) on integer
  vectors;
- assignment, `;` sequences, `$[c;t;e]` conditionals, lambdas and their
  application — parameters are bound only for the duration of a call;
- parenthesised lists, which become a uniform vector when every item is an
  atom of the same basic kind, and a generic list otherwise.

Errors are raised as subclasses of `EvalError`: `UndefinedNameError`,
`EvalKernelError` (wrapping the `KernelError` in `.err`), `EvalTypeError`
and `EmptyExpressionError`.

## Formatting results

`keyten.cli.format.format_with_width(value, max_width)` renders a value the
K way: vectors are space separated, floats with whole values keep a `.0`,
characters are quoted, symbols are written `` `a`b`c``, integer nulls and
infinities show as `0N` / `0W` and float ones as `0n` / `0w`. Vectors that
do not fit are cut short and end in `..`. `format_value(value)` uses
`terminal_width()`, which reads the terminal, then `$COLUMNS`, then falls
back to 80. `visible_len(s)` measures a string without its ANSI escapes.

## Front-end helpers

```python
from keyten.cli.validator import brackets_balanced
from keyten.cli.progress import fmt_count
from keyten.cli.syscmd import format_ms

brackets_balanced("(1;2")   # False: the line is not complete yet
fmt_count(1500)             # '1.5K'
format_ms(0.5)              # '500 µs'
```

- `Names` (`keyten.cli.names`) holds the sorted set of bound names; call
  `refresh_from(env)` after each evaluation. `Completer(names).complete(line,
  pos)` returns `Suggestion`s for the identifier ending at `pos`, and
  `Highlighter(names)` splits a line into styled segments (`highlight`) or
  returns it with ANSI colours (`render`), setting bound names apart.
- `ProgressPrinter` draws a spinner, element count, elapsed time and rate on
  standard error when it is a terminal; `run_progress_loop(sink, ctx)`
  redraws each time the context's `RenderSink` is signalled.
- `dispatch(line, env, run)` in `keyten.cli.syscmd` carries out a line that
  starts with `\`: `\t expr` times `run(expr, env)` and prints the value with
  the elapsed time, `\v` lists bound names, `\p [0|1|on|off]` shows or sets
  parallel execution, `\h` or `\?` prints help, and `\` or `\\` returns
  `SysOutcome.QUIT`; everything else returns `SysOutcome.CONTINUE`.
- `Prompt` renders the prompt pieces and `EditMode` names the editing modes.
- `History(path, capacity)` is a file-backed history that skips blank lines
  and repeats; `open_history()` opens the one at `history_path()` in the
  user's state directory.
- `SysInfo.probe()` reports the CPU model, memory, core count and platform.

## Banner

```
keyten-banner
```

prints the start-up banner: version, build date and commit, platform, CPU
model, memory and core count, framed to fit the terminal.
`render_banner(info, width)` returns the same text for a given `SysInfo`
and width.

## What the package does not do

There is no parser from source text: expressions are built from the
`keyten.ast` classes, and `dispatch` takes the function that turns the text
after `\t` into a value as its `run` argument. There is also no interactive
read-eval-print command; `keyten.cli` provides the parts from which one
can be assembled. Verbs other than those listed above (such as `#`, `,`,
`=`, `<`, `>`, `^`, `?`) raise `EvalTypeError` or `EvalKernelError`, and
dictionaries and tables are not supported.