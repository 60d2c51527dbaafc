from __future__ import annotations

from rich.text import Text

from tune_deck.ui.status_controller import StatusController


def test_show_message_default_timeouts() -> None:
    controller = StatusController(now=lambda: 10.0)
    controller.show_message("Warn", level="warn")
    assert controller._message is not None
    assert controller._message.until == 16.0
    controller.show_message("Error", level="error")
    assert controller._message is not None
    assert controller._message.until == 16.0
    controller.show_message("Info", level="info")
    assert controller._message is not None
    assert controller._message.until == 13.0


def test_show_message_timeout_zero_persists() -> None:
    controller = StatusController(now=lambda: 0.0)
    controller.show_message("Hello", timeout=0)
    assert controller._message is not None
    assert controller._message.until is None
    assert "Hello" in controller.render_line(80).plain


def test_render_line_applies_styles() -> None:
    controller = StatusController(now=lambda: 0.0)
    controller.show_message("Warn", level="warn", timeout=5.0)
    line = controller.render_line(40)
    assert isinstance(line, Text)
    assert line.plain == "Warn"
    assert line.style == "#ffcc66"
    controller.show_message("Error", level="error", timeout=5.0)
    line = controller.render_line(40)
    assert line.style == "#ff5f52"


def test_message_expiration_falls_back_to_hint() -> None:
    now_value = [0.0]
    controller = StatusController(now=lambda: now_value[0])
    controller.show_message("Queued Hey Jude", timeout=1.0)
    assert "Queued" in controller.render_line(80).plain
    now_value[0] = 2.0
    line = controller.render_line(80).plain
    assert "Queued" not in line
    assert "Space: play/pause" in line


def test_hint_follows_context() -> None:
    controller = StatusController(now=lambda: 0.0)
    assert "skip to track" in controller.render_line(80, context="queue").plain
    assert "Esc: cancel" in controller.render_line(80, context="search").plain
    assert "Tab: switch" in controller.render_line(80, context="playlists").plain


def test_clear_message_resets_state() -> None:
    controller = StatusController(now=lambda: 0.0)
    controller.show_message("Hello", timeout=5.0)
    controller.clear_message()
    assert controller._message is None
    assert "Hello" not in controller.render_line(80).plain


def test_long_message_is_truncated() -> None:
    controller = StatusController(now=lambda: 0.0)
    controller.show_message("x" * 50, timeout=0)
    assert controller.render_line(10).plain == "x" * 9 + "…"
