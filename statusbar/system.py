"""Components describing the host: time, identity, load, disks and sensors."""

from __future__ import annotations

import os
import platform
import pwd
import socket
import sys
import time
from pathlib import Path

from .util import fmt_human, read_uint, warn

ENTROPY_AVAIL = "/proc/sys/kernel/random/entropy_avail"
_BUFFER_SIZE = 1024


def datetime(fmt: str) -> str | None:
    """Return the local time formatted with strftime."""
    result = time.strftime(fmt, time.localtime())
    if not result or len(result) >= _BUFFER_SIZE:
        warn("strftime: Result string exceeds buffer size")
        return None
    return result


def hostname(unused: object = None) -> str | None:
    """Return the host name."""
    try:
        return socket.gethostname()
    except OSError:
        warn("gethostbyname:")
        return None


def kernel_release(unused: object = None) -> str | None:
    """Return the kernel release, as `uname -r` prints it."""
    release = platform.uname().release
    if not release:
        warn("uname: Failed to obtain kernel release")
        return None
    return release


def load_avg(unused: object = None) -> str | None:
    """Return the 1, 5 and 15 minute load averages."""
    try:
        one, five, fifteen = os.getloadavg()
    except OSError:
        warn("getloadavg: Failed to obtain load average")
        return None
    return f"{one:.2f} {five:.2f} {fifteen:.2f}"


def _uptime_clock() -> int:
    for name in ("CLOCK_BOOTTIME", "CLOCK_UPTIME", "CLOCK_MONOTONIC"):
        clock = getattr(time, name, None)
        if clock is not None:
            return clock
    raise OSError("no suitable clock")


def uptime(unused: object = None) -> str | None:
    """Return the system uptime as hours and minutes."""
    clock = None
    try:
        clock = _uptime_clock()
        seconds = int(time.clock_gettime(clock))
    except OSError:
        warn(f"clock_gettime {clock}")
        return None
    hours, rest = divmod(seconds, 3600)
    return f"{hours}h {rest // 60}m"


def gid(unused: object = None) -> str:
    """Return the group id of the current user."""
    return str(os.getgid())


def uid(unused: object = None) -> str:
    """Return the effective user id."""
    return str(os.geteuid())


def username(unused: object = None) -> str | None:
    """Return the name of the effective user."""
    euid = os.geteuid()
    try:
        return pwd.getpwuid(euid).pw_name
    except KeyError:
        warn(f"getpwuid '{euid}': no such user")
        return None


def entropy(unused: object = None, path: str | Path = ENTROPY_AVAIL) -> str | None:
    """Return the available kernel entropy."""
    if path == ENTROPY_AVAIL and sys.platform.startswith(("openbsd", "freebsd")):
        return "\u221e"
    value = read_uint(path)
    return None if value is None else str(value)


def _statvfs(path: str | Path) -> os.statvfs_result | None:
    try:
        return os.statvfs(path)
    except OSError:
        warn(f"statvfs '{path}':")
        return None


def disk_free(path: str | Path) -> str | None:
    """Return the space available to unprivileged users."""
    fs = _statvfs(path)
    return None if fs is None else fmt_human(fs.f_frsize * fs.f_bavail, 1024)


def disk_perc(path: str | Path) -> str | None:
    """Return the disk usage in percent."""
    fs = _statvfs(path)
    if fs is None or fs.f_blocks == 0:
        return None
    return str(int(100 * (1 - fs.f_bavail / fs.f_blocks)))


def disk_total(path: str | Path) -> str | None:
    """Return the total size of the file system."""
    fs = _statvfs(path)
    return None if fs is None else fmt_human(fs.f_frsize * fs.f_blocks, 1024)


def disk_used(path: str | Path) -> str | None:
    """Return the used space of the file system."""
    fs = _statvfs(path)
    if fs is None:
        return None
    return fmt_human(fs.f_frsize * (fs.f_blocks - fs.f_bfree), 1024)


def temp(file: str | Path) -> str | None:
    """Return the temperature in degrees Celsius from a millidegree sensor file."""
    value = read_uint(file)
    return None if value is None else str(value // 1000)