"""Components that read files, directories and command output."""

from __future__ import annotations

import os
import subprocess
from pathlib import Path

from .util import LINE_MAX, read_first_line, warn


def cat(path: str | Path) -> str | None:
    """Return the first line of a file, or None if it is empty or unreadable."""
    line = read_first_line(path)
    return line or None


def num_files(path: str | Path) -> str | None:
    """Return the number of entries in a directory."""
    try:
        count = sum(1 for _ in os.scandir(path))
    except OSError:
        warn(f"opendir '{path}':")
        return None
    return str(count)


def run_command(cmd: str) -> str | None:
    """Run a shell command and return the first line of its output."""
    try:
        result = subprocess.run(cmd, shell=True, stdout=subprocess.PIPE, check=False)
    except OSError:
        warn(f"popen '{cmd}':")
        return None
    text = result.stdout.decode("utf-8", errors="replace")
    line = text.splitlines(keepends=True)[0][:LINE_MAX] if text else ""
    if line.endswith("\n"):
        line = line[:-1]
    return line or None