import pytest

from keyten.cli.sysinfo import (
    SysInfo,
    _parse_cpuinfo,
    _parse_meminfo,
    probe_mem_gib,
)


def test_parse_cpuinfo_finds_model_name():
    text = "processor\t: 0\nvendor_id\t: Example\nmodel name\t: Example CPU 3000\n"
    assert _parse_cpuinfo(text) == "Example CPU 3000"


def test_parse_cpuinfo_missing_model():
    assert _parse_cpuinfo("processor\t: 0\nflags\t: fpu\n") is None


def test_parse_cpuinfo_takes_first_entry():
    text = "model name : First\nmodel name : Second\n"
    assert _parse_cpuinfo(text) == "First"


def test_parse_meminfo_total():
    text = "MemTotal:       1048576 kB\nMemFree:  1024 kB\n"
    assert _parse_meminfo(text) == pytest.approx(1.0)


def test_parse_meminfo_missing_or_bad():
    assert _parse_meminfo("MemFree: 10 kB\n") is None
    assert _parse_meminfo("MemTotal: lots kB\n") is None
    assert _parse_meminfo("MemTotal:\n") is None


def test_probe_invariants():
    info = SysInfo.probe()
    assert info.cores >= 1
    os_name, _, arch = info.os_arch.partition("/")
    assert os_name and arch
    assert info.mem_gib >= 0.0
    assert info.cpu_model.strip() == info.cpu_model or info.cpu_model == "unknown"


def test_probe_mem_is_positive_when_known():
    m = probe_mem_gib()
    assert m is None or m > 0