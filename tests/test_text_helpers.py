from __future__ import annotations

from tune_deck.ui import text_helpers


def test_truncate_line_adds_ellipsis() -> None:
    assert text_helpers._truncate_line("Hello world", 8) == "Hello w…"
    assert text_helpers._truncate_line("Hi", 8) == "Hi"
    assert text_helpers._truncate_line("Hi", 0) == ""


def test_ellipsize_uses_three_dots() -> None:
    assert text_helpers.ellipsize("Bohemian Rhapsody", 10) == "Bohemia..."
    assert text_helpers.ellipsize("Bohemian Rhapsody", 3) == "..."
    assert text_helpers.ellipsize("Short", 10) == "Short"


def test_fit_pads_and_cuts_to_exact_cells() -> None:
    assert text_helpers.fit("ab", 4) == "ab  "
    assert text_helpers.fit("abcdef", 4) == "abcd"
    assert text_helpers.fit("日本語", 4) == "日本"


def test_format_duration() -> None:
    assert text_helpers.format_duration(0) == "0:00"
    assert text_helpers.format_duration(65.9) == "1:05"
    assert text_helpers.format_duration(3725) == "1:02:05"
    assert text_helpers.format_duration(-3) == "0:00"
