"""Volume component reading an OSS mixer device."""

from __future__ import annotations

import fcntl
import os
import struct
from pathlib import Path

from .util import warn

_INT = struct.Struct("i")


def _ior(kind: str, number: int, size: int) -> int:
    return (2 << 30) | (size << 16) | (ord(kind) << 8) | number


SOUND_MIXER_READ_DEVMASK = _ior("M", 0xFE, _INT.size)

SOUND_DEVICE_NAMES = (
    "vol", "bass", "treble", "synth", "pcm", "speaker", "line", "mic", "cd",
    "mix", "pcm2", "rec", "igain", "ogain", "line1", "line2", "line3",
    "dig1", "dig2", "dig3", "phin", "phout", "video", "radio", "monitor",
)


def _mixer_read(device: int) -> int:
    return _ior("M", device, _INT.size)


def _ioctl_int(fd: int, request: int) -> int:
    return _INT.unpack(fcntl.ioctl(fd, request, _INT.pack(0)))[0]


def vol_perc(card: str | Path) -> str | None:
    """Return the master volume (left channel) of a mixer device in percent."""
    try:
        fd = os.open(card, os.O_RDONLY | os.O_NONBLOCK)
    except OSError:
        warn(f"open '{card}':")
        return None

    value = None
    try:
        try:
            devmask = _ioctl_int(fd, SOUND_MIXER_READ_DEVMASK)
        except OSError:
            warn("ioctl 'SOUND_MIXER_READ_DEVMASK':")
            return None
        for index, name in enumerate(SOUND_DEVICE_NAMES):
            if devmask & (1 << index) and name == "vol":
                try:
                    value = _ioctl_int(fd, _mixer_read(index))
                except OSError:
                    warn(f"ioctl 'MIXER_READ({index})':")
                    return None
    finally:
        os.close(fd)

    if value is None:
        return None
    return str(value & 0xFF)