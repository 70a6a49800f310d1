import re

import pytest

from statusbar.util import fmt_human, read_first_line, read_uint, warn

_PREFIX_1000 = ["", "k", "M", "G", "T", "P", "E", "Z", "Y"]
_PREFIX_1024 = ["", "Ki", "Mi", "Gi", "Ti", "Pi", "Ei", "Zi", "Yi"]


def _parse(text):
    match = re.fullmatch(r"(\d+\.\d) (\w*)", text)
    assert match, text
    return float(match.group(1)), match.group(2)


def test_fmt_human_binary_kibibyte():
    assert fmt_human(1024, 1024) == "1.0 Ki"


def test_fmt_human_zero_has_empty_prefix():
    assert fmt_human(0, 1000) == "0.0 "


@pytest.mark.parametrize("base,prefixes", [(1000, _PREFIX_1000), (1024, _PREFIX_1024)])
@pytest.mark.parametrize("num", [1, 999, 1000, 1023, 1024, 5_000_000, 7 * 1024**3, 123456789012])
def test_fmt_human_round_trip(base, prefixes, num):
    value, prefix = _parse(fmt_human(num, base))
    assert prefix in prefixes
    exponent = prefixes.index(prefix)
    assert value < base or exponent == len(prefixes) - 1
    assert abs(value * base**exponent - num) <= 0.05 * base**exponent


def test_fmt_human_huge_number_uses_last_prefix():
    _, prefix = _parse(fmt_human(10**40, 1000))
    assert prefix == _PREFIX_1000[-1]


def test_fmt_human_invalid_base():
    with pytest.raises(ValueError):
        fmt_human(10, 10)


def test_warn_plain(capsys):
    warn("something happened")
    assert capsys.readouterr().err == "something happened\n"


def test_warn_with_colon_appends_error(capsys):
    try:
        raise FileNotFoundError(2, "No such file or directory")
    except OSError:
        warn("fopen 'x':")
    assert capsys.readouterr().err == "fopen 'x': No such file or directory\n"


def test_read_first_line(tmp_path):
    path = tmp_path / "f"
    path.write_text("first\nsecond\n")
    assert read_first_line(path) == "first"


def test_read_first_line_empty_and_missing(tmp_path, capsys):
    empty = tmp_path / "empty"
    empty.write_text("")
    assert read_first_line(empty) is None
    assert read_first_line(tmp_path / "missing") is None
    assert "fopen" in capsys.readouterr().err


def test_read_uint(tmp_path):
    path = tmp_path / "n"
    path.write_text("  42\n")
    assert read_uint(path) == 42


def test_read_uint_invalid(tmp_path):
    path = tmp_path / "n"
    path.write_text("abc\n")
    assert read_uint(path) is None
    assert read_uint(tmp_path / "missing") is None