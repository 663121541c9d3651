import re

from keyten.cli.banner import (
    MAX_WIDTH,
    MIN_WIDTH,
    build_info,
    clip_to,
    main,
    render_banner,
)
from keyten.cli.sysinfo import SysInfo

_CSI = re.compile(r"\x1b\[[0-9;]*m")


def _plain_lines(text):
    return [_CSI.sub("", line) for line in text.split("\n")]


def _info(cpu="Example CPU", mem=8.0):
    return SysInfo(cpu_model=cpu, mem_gib=mem, cores=4, os_arch="linux/x86_64")


def test_clip_to_keeps_short_text():
    assert clip_to("abc", 3) == "abc"


def test_clip_to_adds_ellipsis():
    clipped = clip_to("abcdef", 4)
    assert len(clipped) == 4
    assert clipped.endswith("\u2026")
    assert clipped[:3] == "abc"


def test_framed_lines_have_uniform_width():
    lines = _plain_lines(render_banner(_info(), 60))
    framed = [line for line in lines if line.startswith("│")]
    assert framed
    assert all(len(line) == 60 for line in framed)
    assert lines[0][0] == "╭" and len(lines[0]) == 60


def test_width_is_clamped():
    wide = _plain_lines(render_banner(_info(), 500))
    narrow = _plain_lines(render_banner(_info(), 5))
    assert len(wide[0]) == MAX_WIDTH
    assert len(narrow[0]) == MIN_WIDTH


def test_content_mentions_system_values():
    text = "\n".join(_plain_lines(render_banner(_info(), 60)))
    assert "Example CPU" in text
    assert "8.0 GiB" in text
    assert "linux/x86_64" in text
    assert build_info().version in text


def test_unknown_memory_and_long_cpu_clipped():
    text = "\n".join(_plain_lines(render_banner(_info(cpu="X" * 200, mem=0.0), 60)))
    assert "unknown" in text
    assert "X\u2026" in text
    assert "X" * 200 not in text


def test_main_prints_banner(capsys):
    assert main([]) == 0
    out = capsys.readouterr().out
    assert "streaming array language" in out
    assert "type \\h for help" in out