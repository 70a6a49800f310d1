import pytest

from statusbar.battery import battery_perc, battery_remaining, battery_state


@pytest.fixture
def sysfs(tmp_path):
    (tmp_path / "BAT0").mkdir()
    return tmp_path


def _write(sysfs, name, text):
    (sysfs / "BAT0" / name).write_text(text)


def test_battery_perc(sysfs):
    _write(sysfs, "capacity", "57\n")
    assert battery_perc("BAT0", sysfs) == "57"


def test_battery_perc_missing(sysfs):
    assert battery_perc("BAT0", sysfs) is None
    assert battery_perc("BAT9", sysfs) is None


@pytest.mark.parametrize(
    "status,symbol",
    [("Charging", "+"), ("Discharging", "-"), ("Full", "o"), ("Not charging", "o"), ("Unknown", "?")],
)
def test_battery_state(sysfs, status, symbol):
    _write(sysfs, "status", status + "\n")
    assert battery_state("BAT0", sysfs) == symbol


def test_battery_state_missing(sysfs):
    assert battery_state("BAT0", sysfs) is None


def test_battery_remaining_discharging(sysfs):
    _write(sysfs, "status", "Discharging\n")
    _write(sysfs, "charge_now", "5000\n")
    _write(sysfs, "current_now", "2000\n")
    assert battery_remaining("BAT0", sysfs) == "2h 30m"


def test_battery_remaining_energy_and_power(sysfs):
    _write(sysfs, "status", "Discharging\n")
    _write(sysfs, "energy_now", "3000\n")
    _write(sysfs, "power_now", "1000\n")
    assert battery_remaining("BAT0", sysfs) == "3h 0m"


def test_battery_remaining_charging_is_empty(sysfs):
    _write(sysfs, "status", "Charging\n")
    _write(sysfs, "charge_now", "5000\n")
    assert battery_remaining("BAT0", sysfs) == ""


def test_battery_remaining_zero_current(sysfs):
    _write(sysfs, "status", "Discharging\n")
    _write(sysfs, "charge_now", "5000\n")
    _write(sysfs, "current_now", "0\n")
    assert battery_remaining("BAT0", sysfs) is None


def test_battery_remaining_no_charge_file(sysfs):
    _write(sysfs, "status", "Discharging\n")
    assert battery_remaining("BAT0", sysfs) is None