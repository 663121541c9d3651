"""Lightweight platform probe: CPU model, total RAM, logical core count.

Falls back to ``"unknown"`` or ``0`` where the platform does not expose the
information cheaply.
"""

from __future__ import annotations

import os
import platform
import subprocess
import sys
from dataclasses import dataclass
from pathlib import Path

_OS_NAMES = {"darwin": "macos", "win32": "windows", "cygwin": "windows"}
_ARCH_NAMES = {
    "amd64": "x86_64",
    "x64": "x86_64",
    "arm64": "aarch64",
    "i386": "x86",
    "i686": "x86",
}


@dataclass(frozen=True)
class SysInfo:
    """A snapshot of the host's CPU, memory, core count and platform."""

    cpu_model: str
    mem_gib: float
    cores: int
    os_arch: str

    @staticmethod
    def probe() -> SysInfo:
        """Inspect the running system."""
        return SysInfo(
            cpu_model=probe_cpu() or "unknown",
            mem_gib=probe_mem_gib() or 0.0,
            cores=_cores(),
            os_arch=f"{_os_name()}/{_arch()}",
        )


def _cores() -> int:
    if hasattr(os, "sched_getaffinity"):
        try:
            return max(1, len(os.sched_getaffinity(0)))
        except OSError:
            pass
    return os.cpu_count() or 1


def _os_name() -> str:
    plat = sys.platform
    if plat in _OS_NAMES:
        return _OS_NAMES[plat]
    return plat.rstrip("0123456789") or "unknown"


def _arch() -> str:
    machine = platform.machine().lower()
    return _ARCH_NAMES.get(machine, machine) or "unknown"


def _sysctl(name: str) -> str | None:
    try:
        out = subprocess.run(
            ["sysctl", "-n", name],
            capture_output=True,
            text=True,
            check=False,
            timeout=5,
        )
    except (OSError, subprocess.SubprocessError):
        return None
    if out.returncode != 0:
        return None
    return out.stdout.strip()


def _read(path: str) -> str | None:
    try:
        return Path(path).read_text(encoding="utf-8", errors="replace")
    except OSError:
        return None


def _parse_cpuinfo(text: str) -> str | None:
    """Model name from the text of ``/proc/cpuinfo``."""
    for line in text.splitlines():
        if line.startswith("model name"):
            rest = line[len("model name"):]
            idx = rest.find(":")
            if idx >= 0:
                return rest[idx + 1:].strip()
    return None


def _parse_meminfo(text: str) -> float | None:
    """Total memory in GiB from the text of ``/proc/meminfo``."""
    for line in text.splitlines():
        if line.startswith("MemTotal:"):
            fields = line[len("MemTotal:"):].split()
            if not fields:
                return None
            try:
                kb = float(fields[0])
            except ValueError:
                return None
            return kb / 1024.0 / 1024.0
    return None


def probe_cpu() -> str | None:
    """CPU model name, or ``None`` if the platform does not say."""
    if sys.platform.startswith("linux"):
        text = _read("/proc/cpuinfo")
        return None if text is None else _parse_cpuinfo(text)
    if sys.platform == "darwin":
        return _sysctl("machdep.cpu.brand_string")
    return None


def probe_mem_gib() -> float | None:
    """Total physical memory in GiB, or ``None`` if unknown."""
    if sys.platform.startswith("linux"):
        text = _read("/proc/meminfo")
        return None if text is None else _parse_meminfo(text)
    if sys.platform == "darwin":
        raw = _sysctl("hw.memsize")
        if raw is None:
            return None
        try:
            return float(raw) / 1024.0 / 1024.0 / 1024.0
        except ValueError:
            return None
    return None