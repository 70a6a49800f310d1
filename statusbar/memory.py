"""Memory and swap components reading /proc/meminfo."""

from __future__ import annotations

from pathlib import Path

from .util import fmt_human, warn

MEMINFO = "/proc/meminfo"


def parse_meminfo(text: str) -> dict[str, int]:
    """Parse meminfo text into a mapping of field name to value in kB."""
    fields: dict[str, int] = {}
    for line in text.splitlines():
        name, sep, rest = line.partition(":")
        if not sep:
            continue
        parts = rest.split()
        if not parts:
            continue
        try:
            fields[name.strip()] = int(parts[0])
        except ValueError:
            continue
    return fields


def _read(path: str | Path, *names: str) -> tuple[int, ...] | None:
    try:
        text = Path(path).read_text(encoding="utf-8", errors="replace")
    except OSError:
        warn(f"fopen '{path}':")
        return None
    fields = parse_meminfo(text)
    try:
        return tuple(fields[name] for name in names)
    except KeyError:
        return None


def ram_free(unused: object = None, path: str | Path = MEMINFO) -> str | None:
    """Return the available memory."""
    values = _read(path, "MemAvailable")
    if values is None:
        return None
    (available,) = values
    return fmt_human(available * 1024, 1024)


def ram_perc(unused: object = None, path: str | Path = MEMINFO) -> str | None:
    """Return the memory usage in percent, not counting buffers and cache."""
    values = _read(path, "MemTotal", "MemFree", "Buffers", "Cached")
    if values is None:
        return None
    total, free, buffers, cached = values
    if total == 0:
        return None
    return str(100 * ((total - free) - (buffers + cached)) // total)


def ram_total(unused: object = None, path: str | Path = MEMINFO) -> str | None:
    """Return the total memory in whole GiB."""
    values = _read(path, "MemTotal")
    if values is None:
        return None
    (total,) = values
    return f"{total // 1024 // 1024}G"


def ram_used(unused: object = None, path: str | Path = MEMINFO) -> str | None:
    """Return the used memory in whole GiB, not counting buffers and cache."""
    values = _read(path, "MemTotal", "MemFree", "Buffers", "Cached")
    if values is None:
        return None
    total, free, buffers, cached = values
    return f"{(total - free - buffers - cached) // 1024 // 1024}G"


def swap_free(unused: object = None, path: str | Path = MEMINFO) -> str | None:
    """Return the free swap space."""
    values = _read(path, "SwapFree")
    if values is None:
        return None
    (free,) = values
    return fmt_human(free * 1024, 1024)


def swap_perc(unused: object = None, path: str | Path = MEMINFO) -> str | None:
    """Return the swap usage in percent, not counting swap cache."""
    values = _read(path, "SwapTotal", "SwapFree", "SwapCached")
    if values is None:
        return None
    total, free, cached = values
    if total == 0:
        return None
    return str(int(100 * (total - free - cached) / total))


def swap_total(unused: object = None, path: str | Path = MEMINFO) -> str | None:
    """Return the total swap space."""
    values = _read(path, "SwapTotal")
    if values is None:
        return None
    (total,) = values
    return fmt_human(total * 1024, 1024)


def swap_used(unused: object = None, path: str | Path = MEMINFO) -> str | None:
    """Return the used swap space, not counting swap cache."""
    values = _read(path, "SwapTotal", "SwapFree", "SwapCached")
    if values is None:
        return None
    total, free, cached = values
    return fmt_human((total - free - cached) * 1024, 1024)