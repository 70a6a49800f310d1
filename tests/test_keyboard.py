import pytest

from statusbar.keyboard import format_indicators, get_layout, keyboard_indicators, keymap


def test_toggle_all_off_is_lowercase():
    assert format_indicators("cn", 0) == "cn"


def test_toggle_all_on_is_uppercase():
    assert format_indicators("cn", 3) == "CN"


def test_toggle_order_follows_format():
    assert format_indicators("nc", 2) == "Nc"


def test_optional_hidden_when_off():
    assert format_indicators("c?n?", 0) == ""


def test_optional_shown_when_on():
    assert format_indicators("c?n?", 3) == "cn"


def test_optional_preserves_case():
    assert format_indicators("C?n?", 1) == "C"


def test_uppercase_toggle_letter_lowered_when_off():
    assert format_indicators("CN", 0) == "cn"


def test_format_truncated_to_four_characters():
    assert format_indicators("cncnc", 0) == "cncn"


def test_unknown_characters_ignored():
    assert format_indicators("x?c", 1) == "C"


@pytest.mark.parametrize("mask", [0, 1, 2, 3])
def test_toggle_length_is_fixed(mask):
    assert len(format_indicators("cn", mask)) == 2


def test_layout_first_group():
    assert get_layout("pc+us+de:2+inet(evdev)", 0) == "us"


def test_layout_second_group():
    assert get_layout("pc+us+de:2+inet(evdev)", 1) == "de"


def test_layout_group_past_end_gives_last():
    assert get_layout("pc+us+de:2+inet(evdev)", 5) == "de"


def test_layout_only_invalid_symbols():
    assert get_layout("evdev+base+pc105", 0) is None


def test_layout_digit_groups_skipped():
    assert get_layout("pc+us:2+3", 1) == "us"


def test_indicators_without_display(monkeypatch):
    monkeypatch.delenv("DISPLAY", raising=False)
    assert keyboard_indicators("cn") is None


def test_indicators_with_malformed_display(monkeypatch):
    monkeypatch.setenv("DISPLAY", "nodisplay")
    assert keyboard_indicators("cn") is None


def test_keymap_without_display(monkeypatch):
    monkeypatch.delenv("DISPLAY", raising=False)
    assert keymap() is None