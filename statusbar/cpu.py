"""CPU components: current frequency and usage since the previous reading."""

from __future__ import annotations

from pathlib import Path

from .util import fmt_human, read_uint, warn

PROC_STAT = "/proc/stat"
CPU_FREQ = "/sys/devices/system/cpu/cpu0/cpufreq/scaling_cur_freq"

# user nice system idle iowait irq softirq
_FIELDS = 7
_BUSY = (0, 1, 2, 5, 6)


def _read_times(path: str | Path) -> list[float] | None:
    try:
        with open(path, encoding="utf-8", errors="replace") as fp:
            line = fp.readline()
    except OSError:
        warn(f"fopen '{path}':")
        return None
    try:
        values = [float(field) for field in line.split()[1 : 1 + _FIELDS]]
    except ValueError:
        return None
    return values if len(values) == _FIELDS else None


class CpuUsage:
    """CPU usage in percent between two successive calls."""

    def __init__(self, path: str | Path = PROC_STAT) -> None:
        self.path = path
        self._previous: list[float] | None = None

    def __call__(self, unused: object = None) -> str | None:
        previous = self._previous
        current = _read_times(self.path)
        if current is None:
            return None
        self._previous = current

        if previous is None or previous[0] == 0:
            return None

        total = sum(current) - sum(previous)
        if total == 0:
            return None
        busy = sum(current[i] for i in _BUSY) - sum(previous[i] for i in _BUSY)
        return str(int(100 * busy / total))


_cpu_usage = CpuUsage()


def cpu_freq(unused: object = None, path: str | Path = CPU_FREQ) -> str | None:
    """Return the current frequency of the first CPU, read in kHz."""
    freq = read_uint(path)
    if freq is None:
        return None
    return fmt_human(freq * 1000, 1000)


def cpu_perc(unused: object = None) -> str | None:
    """Return the CPU usage since the previous call."""
    return _cpu_usage(unused)