"""Battery components reading the Linux power-supply class in sysfs."""

from __future__ import annotations

import os
import re
from pathlib import Path

from .util import read_uint, warn

POWER_SUPPLY = "/sys/class/power_supply"

_STATE_SYMBOLS = {
    "Charging": "+",
    "Discharging": "-",
    "Full": "o",
    "Not charging": "o",
}

_INT = re.compile(r"\s*([+-]?\d+)")
_STATE = re.compile(r"[A-Za-z ]{1,12}")


def _read_state(path: Path) -> str | None:
    try:
        text = path.read_text(encoding="utf-8", errors="replace")
    except OSError:
        warn(f"fopen '{path}':")
        return None
    match = _STATE.match(text)
    return match.group(0) if match else None


def _pick(base: Path, *names: str) -> Path | None:
    for name in names:
        path = base / name
        if os.access(path, os.R_OK):
            return path
    return None


def battery_perc(bat: str, sysfs: str | Path = POWER_SUPPLY) -> str | None:
    """Return the battery capacity in percent."""
    path = Path(sysfs) / bat / "capacity"
    try:
        text = path.read_text(encoding="utf-8", errors="replace")
    except OSError:
        warn(f"fopen '{path}':")
        return None
    match = _INT.match(text)
    return str(int(match.group(1))) if match else None


def battery_state(bat: str, sysfs: str | Path = POWER_SUPPLY) -> str | None:
    """Return '+', '-', 'o' or '?' for the battery's charging state."""
    state = _read_state(Path(sysfs) / bat / "status")
    if state is None:
        return None
    return _STATE_SYMBOLS.get(state, "?")


def battery_remaining(bat: str, sysfs: str | Path = POWER_SUPPLY) -> str | None:
    """Return the time left while discharging, or an empty string otherwise."""
    base = Path(sysfs) / bat
    state = _read_state(base / "status")
    if state is None:
        return None

    charge_path = _pick(base, "charge_now", "energy_now")
    if charge_path is None:
        return None
    charge_now = read_uint(charge_path)
    if charge_now is None:
        return None

    if state != "Discharging":
        return ""

    current_path = _pick(base, "current_now", "power_now")
    if current_path is None:
        return None
    current_now = read_uint(current_path)
    if not current_now:
        return None

    timeleft = charge_now / current_now
    hours = int(timeleft)
    minutes = int((timeleft - hours) * 60)
    return f"{hours}h {minutes}m"