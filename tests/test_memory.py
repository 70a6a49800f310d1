import pytest

from statusbar.memory import (
    parse_meminfo,
    ram_free,
    ram_perc,
    ram_total,
    ram_used,
    swap_free,
    swap_perc,
    swap_total,
    swap_used,
)
from statusbar.util import fmt_human

SAMPLE = """\
MemTotal:        8388608 kB
MemFree:         1048576 kB
MemAvailable:    3145728 kB
Buffers:         1048576 kB
Cached:          2097152 kB
SwapCached:      1048576 kB
Active:           123456 kB
SwapTotal:       3145728 kB
SwapFree:        1048576 kB
HugePages_Total:       0
"""


@pytest.fixture
def meminfo(tmp_path):
    path = tmp_path / "meminfo"
    path.write_text(SAMPLE)
    return path


def test_parse_meminfo_reads_fields():
    fields = parse_meminfo(SAMPLE)
    assert fields["MemTotal"] == 8388608
    assert fields["SwapCached"] == 1048576
    assert fields["HugePages_Total"] == 0


def test_parse_meminfo_skips_malformed_lines():
    fields = parse_meminfo("garbage line\nEmpty:\nBad: abc kB\nGood: 7 kB\n")
    assert fields == {"Good": 7}


def test_ram_free_uses_available(meminfo):
    assert ram_free(None, meminfo) == fmt_human(3145728 * 1024, 1024)


def test_ram_total_in_gib(meminfo):
    assert ram_total(None, meminfo) == "8G"


def test_ram_used_in_gib(meminfo):
    assert ram_used(None, meminfo) == "4G"


def test_ram_perc(meminfo):
    assert ram_perc(None, meminfo) == "50"


def test_ram_perc_with_zero_total(tmp_path):
    path = tmp_path / "meminfo"
    path.write_text("MemTotal: 0 kB\nMemFree: 0 kB\nBuffers: 0 kB\nCached: 0 kB\n")
    assert ram_perc(None, path) is None


def test_ram_missing_field(tmp_path):
    path = tmp_path / "meminfo"
    path.write_text("MemTotal: 1024 kB\n")
    assert ram_used(None, path) is None
    assert ram_free(None, path) is None


def test_missing_file(tmp_path):
    absent = tmp_path / "absent"
    assert ram_total(None, absent) is None
    assert swap_total(None, absent) is None


def test_swap_free_and_total(meminfo):
    assert swap_free(None, meminfo) == fmt_human(1048576 * 1024, 1024)
    assert swap_total(None, meminfo) == fmt_human(3145728 * 1024, 1024)


def test_swap_used_excludes_cache(meminfo):
    # total minus free minus cached equals the free amount in the sample
    assert swap_used(None, meminfo) == swap_free(None, meminfo)


def test_swap_perc_is_a_percentage(meminfo):
    assert 0 <= int(swap_perc(None, meminfo)) <= 100


def test_swap_perc_without_swap(tmp_path):
    path = tmp_path / "meminfo"
    path.write_text("SwapCached: 0 kB\nSwapTotal: 0 kB\nSwapFree: 0 kB\n")
    assert swap_perc(None, path) is None


def test_swap_missing_field(tmp_path):
    path = tmp_path / "meminfo"
    path.write_text("SwapTotal: 1024 kB\n")
    assert swap_used(None, path) is None