"""Startup banner: a framed box with the logo, build details and a system summary."""

from __future__ import annotations

import subprocess
import sys
from dataclasses import dataclass
from datetime import datetime, timezone
from functools import lru_cache
from pathlib import Path

from keyten.cli.format import terminal_width
from keyten.cli.sysinfo import SysInfo

VERSION = "0.1.0"
MIN_WIDTH = 56
MAX_WIDTH = 72
INNER_PAD = 3

_FRAME = ("90",)
_LOGO = ("1", "36")
_TAG = ("96",)
_LABEL = ("90",)
_VALUE = ("97",)
_META = ("37",)
_HINT = ("90",)


def _paint(text: str, codes: tuple[str, ...]) -> str:
    return f"\x1b[{';'.join(codes)}m{text}\x1b[0m"


@dataclass(frozen=True)
class BuildInfo:
    """Version, build date and source revision shown in the banner."""

    version: str
    build_date: str
    commit: str


def _build_date() -> str:
    try:
        mtime = Path(__file__).stat().st_mtime
    except OSError:
        return "unknown"
    return datetime.fromtimestamp(mtime, timezone.utc).strftime("%Y-%m-%d")


def _git_commit() -> str:
    try:
        out = subprocess.run(
            ["git", "rev-parse", "--short=8", "HEAD"],
            cwd=Path(__file__).resolve().parent,
            capture_output=True,
            text=True,
            check=False,
            timeout=5,
        )
    except (OSError, subprocess.SubprocessError):
        return "unknown"
    commit = out.stdout.strip()
    return commit if out.returncode == 0 and commit else "unknown"


@lru_cache(maxsize=1)
def build_info() -> BuildInfo:
    """Version, build date and short commit hash, with ``"unknown"`` fallbacks."""
    return BuildInfo(VERSION, _build_date(), _git_commit())


def clip_to(s: str, max_len: int) -> str:
    """Shorten ``s`` to ``max_len`` characters, ending in an ellipsis if cut."""
    if len(s) <= max_len:
        return s
    return s[: max(0, max_len - 1)] + "\u2026"


def _blank(inner_w: int) -> str:
    return f"{_paint('│', _FRAME)}{' ' * inner_w}{_paint('│', _FRAME)}"


def _line(inner_w: int, content: str, visible: int) -> str:
    pad_right = max(0, inner_w - INNER_PAD - visible)
    return (
        f"{_paint('│', _FRAME)}{' ' * INNER_PAD}{content}"
        f"{' ' * pad_right}{_paint('│', _FRAME)}"
    )


def render_banner(info: SysInfo, width: int) -> str:
    """Render the banner for a terminal ``width`` columns wide."""
    build = build_info()
    term_w = min(max(width, MIN_WIDTH), MAX_WIDTH)
    inner_w = max(0, term_w - 2)
    dot = _paint("\u00b7", _LABEL)

    lines = [_paint(f"╭{'─' * inner_w}╮", _FRAME), _blank(inner_w)]

    logo = _paint("\U0001D55Ceyten", _LOGO)
    tag = _paint("streaming array language", _TAG)
    lines.append(
        _line(inner_w, f"{logo}  {dot}  {tag}", len("\U0001D55Ceyten  ·  streaming array language"))
    )
    lines.append(_blank(inner_w))

    version_line = " ".join(
        [
            _paint(f"v{build.version}", _VALUE),
            dot,
            _paint(build.build_date, _META),
            dot,
            _paint(build.commit, _META),
            dot,
            _paint(info.os_arch, _META),
        ]
    )
    plain = f"v{build.version} · {build.build_date} · {build.commit} · {info.os_arch}"
    lines.append(_line(inner_w, version_line, len(plain)))
    lines.append(_blank(inner_w))

    cpu_text = clip_to(info.cpu_model, max(0, inner_w - (INNER_PAD * 2 + 6)))
    mem_str = f"{info.mem_gib:.1f} GiB" if info.mem_gib > 0.0 else "unknown"
    for label, value in (("CPU  ", cpu_text), ("RAM  ", mem_str), ("cores", str(info.cores))):
        content = f"{_paint(label, _LABEL)}  {_paint(value, _VALUE)}"
        lines.append(_line(inner_w, content, len(f"{label}  {value}")))

    lines.append(_blank(inner_w))
    lines.append(_paint(f"╰{'─' * inner_w}╯", _FRAME))
    lines.append(
        "  " + _paint("type \\h for help  \u00b7  \\\\ to quit  \u00b7  Tab completes", _HINT)
    )
    lines.append("")
    return "\n".join(lines)


def print_banner() -> str:
    """Write the banner for the current terminal to stdout and return it."""
    text = render_banner(SysInfo.probe(), terminal_width())
    sys.stdout.write(text + "\n")
    sys.stdout.flush()
    return text


def main(argv: list[str] | None = None) -> int:
    """Print the startup banner."""
    print_banner()
    return 0