"""Tests for buildview.output.sanitize."""

from __future__ import annotations

from buildview.output.sanitize import clean_line, sanitize_control_chars, strip_ansi


# ---------------------------------------------------------------------------
# strip_ansi
# ---------------------------------------------------------------------------


class TestStripAnsi:
    def test_no_ansi(self) -> None:
        assert strip_ansi("hello world") == "hello world"

    def test_color_codes(self) -> None:
        assert strip_ansi("\x1b[31mred\x1b[0m") == "red"

    def test_multiple_codes(self) -> None:
        text = "\x1b[1;31;40mhello\x1b[0m \x1b[32mworld\x1b[0m"
        assert strip_ansi(text) == "hello world"

    def test_cursor_movement(self) -> None:
        assert strip_ansi("\x1b[2Ahello") == "hello"

    def test_osc_title(self) -> None:
        assert strip_ansi("\x1b]0;cargo build\x07Compiling") == "Compiling"

    def test_gcc_colored_diagnostic(self) -> None:
        text = "\x1b[01m\x1b[Kmain.c:3:5:\x1b[m\x1b[K \x1b[01;31m\x1b[Kerror:\x1b[m\x1b[K oops"
        assert strip_ansi(text) == "main.c:3:5: error: oops"


# ---------------------------------------------------------------------------
# sanitize_control_chars
# ---------------------------------------------------------------------------


class TestSanitizeControlChars:
    def test_preserves_tab(self) -> None:
        assert sanitize_control_chars("a\tb") == "a\tb"

    def test_strips_null_and_bell(self) -> None:
        assert sanitize_control_chars("a\x00b\x07c") == "abc"

    def test_strips_del_and_c1(self) -> None:
        assert sanitize_control_chars("a\x7fb\x80c\x9fd") == "abcd"

    def test_keeps_unicode(self) -> None:
        assert sanitize_control_chars("café 日本語 ▶") == "café 日本語 ▶"

    def test_strips_format_chars(self) -> None:
        assert sanitize_control_chars("a￹b￺c￻d") == "abcd"


# ---------------------------------------------------------------------------
# clean_line
# ---------------------------------------------------------------------------


class TestCleanLine:
    def test_strips_line_endings(self) -> None:
        assert clean_line("hello\r\n") == "hello"
        assert clean_line("hello\n") == "hello"

    def test_expands_tabs(self) -> None:
        assert clean_line("a\tb") == "a" + " " * 7 + "b"
        assert clean_line("\tx", tab_size=4) == "    x"

    def test_carriage_return_keeps_last_segment(self) -> None:
        assert clean_line("progress 10%\rprogress 100%\n") == "progress 100%"

    def test_combined(self) -> None:
        raw = "\x1b[31merror:\x1b[0m\tbad\x00 thing\r\n"
        assert clean_line(raw) == "error:  bad thing"

    def test_empty(self) -> None:
        assert clean_line("\n") == ""
