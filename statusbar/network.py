"""Network components: interface addresses, throughput and wireless state."""

from __future__ import annotations

import array
import fcntl
import re
import socket
import struct
from pathlib import Path

import psutil

from .util import LINE_MAX, fmt_human, read_uint, warn

NET_SYSFS = "/sys/class/net"
PROC_WIRELESS = "/proc/net/wireless"
DEFAULT_INTERVAL = 1000

SIOCGIWESSID = 0x8B1B
IW_ESSID_MAX_SIZE = 32
IFNAMSIZ = 16
_IWREQ_SIZE = 32

_UINT64 = 1 << 64
_QUALITY = re.compile(r"\s*[+-]?\d+\s+([+-]?\d+)")


def _ip(interface: str, family: int) -> str | None:
    try:
        addresses = psutil.net_if_addrs()
    except OSError:
        warn("getifaddrs:")
        return None
    for entry in addresses.get(interface, ()):
        if entry.family == family:
            return entry.address
    return None


def ipv4(interface: str) -> str | None:
    """Return the first IPv4 address of an interface."""
    return _ip(interface, socket.AF_INET)


def ipv6(interface: str) -> str | None:
    """Return the first IPv6 address of an interface."""
    return _ip(interface, socket.AF_INET6)


class NetSpeed:
    """Transfer rate of an interface between two successive calls."""

    def __init__(
        self,
        direction: str,
        interval: int = DEFAULT_INTERVAL,
        sysfs: str | Path = NET_SYSFS,
    ) -> None:
        if direction not in ("rx", "tx"):
            raise ValueError(f"direction must be 'rx' or 'tx', not {direction!r}")
        if interval <= 0:
            raise ValueError("interval must be positive")
        self.direction = direction
        self.interval = interval
        self.sysfs = Path(sysfs)
        self._bytes = 0

    def __call__(self, interface: str) -> str | None:
        previous = self._bytes
        path = self.sysfs / interface / "statistics" / f"{self.direction}_bytes"
        current = read_uint(path)
        if current is None:
            return None
        self._bytes = current
        if previous == 0:
            return None
        delta = (current - previous) % _UINT64
        return fmt_human(delta * 1000 // self.interval, 1024)


_rx = NetSpeed("rx")
_tx = NetSpeed("tx")


def netspeed_rx(interface: str) -> str | None:
    """Return the receive rate of an interface since the previous call."""
    return _rx(interface)


def netspeed_tx(interface: str) -> str | None:
    """Return the transmit rate of an interface since the previous call."""
    return _tx(interface)


def rssi_to_perc(rssi: int) -> int:
    """Map a signal strength in dBm onto 0..100 percent."""
    if rssi >= -50:
        return 100
    if rssi <= -100:
        return 0
    return 2 * (rssi + 100)


def wifi_perc(
    interface: str,
    sysfs: str | Path = NET_SYSFS,
    proc_wireless: str | Path = PROC_WIRELESS,
) -> str | None:
    """Return the link quality of a wireless interface in percent."""
    operstate = Path(sysfs) / interface / "operstate"
    try:
        with open(operstate, encoding="utf-8", errors="replace") as fp:
            status = fp.readline(4)
    except OSError:
        warn(f"fopen '{operstate}':")
        return None
    if status != "up\n":
        return None

    try:
        with open(proc_wireless, encoding="utf-8", errors="replace") as fp:
            lines = [fp.readline(LINE_MAX) for _ in range(3)]
    except OSError:
        warn(f"fopen '{proc_wireless}':")
        return None
    line = lines[2]
    if not line:
        return None

    start = line.find(interface)
    if start < 0:
        return None
    match = _QUALITY.match(line, start + len(interface) + 2)
    if match is None:
        return None
    quality = int(match.group(1))
    # 70 is the maximum link quality reported by the kernel
    return str(int(quality / 70 * 100))


def wifi_essid(interface: str) -> str | None:
    """Return the ESSID a wireless interface is associated with."""
    name = interface.encode()
    if len(name) >= IFNAMSIZ:
        warn("vsnprintf: Output truncated")
        return None

    essid = array.array("B", bytes(IW_ESSID_MAX_SIZE + 1))
    address, _ = essid.buffer_info()
    request = struct.pack("16sPHH", name, address, IW_ESSID_MAX_SIZE + 1, 0)
    request += bytes(max(0, _IWREQ_SIZE - len(request)))

    try:
        sock = socket.socket(socket.AF_INET, socket.SOCK_DGRAM)
    except OSError:
        warn("socket 'AF_INET':")
        return None
    with sock:
        try:
            fcntl.ioctl(sock.fileno(), SIOCGIWESSID, request)
        except OSError:
            warn("ioctl 'SIOCGIWESSID':")
            return None

    value = essid.tobytes().split(b"\0", 1)[0].decode("utf-8", errors="replace")
    return value or None