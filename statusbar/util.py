"""Shared helpers: warnings, human-readable sizes and small file readers."""

from __future__ import annotations

import re
import sys
from pathlib import Path

# A status line is read into a 1024-byte buffer, leaving room for the terminator.
LINE_MAX = 1022

_PREFIXES = {
    1000: ("", "k", "M", "G", "T", "P", "E", "Z", "Y"),
    1024: ("", "Ki", "Mi", "Gi", "Ti", "Pi", "Ei", "Zi", "Yi"),
}

_UINT = re.compile(r"\s*\+?(\d+)")


def warn(message: str) -> None:
    """Print a warning to stderr.

    A message ending in ':' is followed by a description of the
    exception currently being handled, if any.
    """
    if message.endswith(":"):
        error = sys.exc_info()[1]
        if isinstance(error, OSError) and error.strerror:
            detail = error.strerror
        elif error is not None:
            detail = str(error)
        else:
            detail = "Unknown error"
        message = f"{message} {detail}"
    print(message, file=sys.stderr)


def fmt_human(num: float, base: int) -> str:
    """Format a number with a decimal (1000) or binary (1024) unit prefix."""
    try:
        prefixes = _PREFIXES[base]
    except KeyError:
        raise ValueError(f"fmt_human: Invalid base {base!r}") from None

    scaled = float(num)
    index = 0
    while index < len(prefixes) - 1 and scaled >= base:
        scaled /= base
        index += 1
    return f"{scaled:.1f} {prefixes[index]}"


def read_first_line(path: str | Path) -> str | None:
    """Return the first line of a file without its newline.

    Returns None if the file cannot be opened or is empty.
    """
    try:
        with open(path, encoding="utf-8", errors="replace") as fp:
            line = fp.readline(LINE_MAX)
    except OSError:
        warn(f"fopen '{path}':")
        return None
    if not line:
        return None
    return line.rstrip("\n") if line.endswith("\n") else line


def read_uint(path: str | Path) -> int | None:
    """Read the leading unsigned integer of a file, or None."""
    try:
        with open(path, encoding="utf-8", errors="replace") as fp:
            text = fp.read(4096)
    except OSError:
        warn(f"fopen '{path}':")
        return None
    match = _UINT.match(text)
    return int(match.group(1)) if match else None