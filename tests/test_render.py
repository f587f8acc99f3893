"""Tests for buildview.view.render and buildview.view.spinner."""

from __future__ import annotations

from rich.cells import cell_len

from buildview.output.line import LineKind, OutputLine
from buildview.view.render import (
    ASCII_SELECTION_INDICATOR,
    FOOTER,
    KIND_MARKERS,
    MARKER_WIDTH,
    RowStyle,
    fit_text,
    format_title,
    render_row,
    text_area_width,
)
from buildview.view.spinner import SPINNER_GLYPHS, Spinner


# ---------------------------------------------------------------------------
# fit_text
# ---------------------------------------------------------------------------


class TestFitText:
    def test_pads_short_text(self) -> None:
        assert fit_text("ab", 5) == "ab   "

    def test_exact_fit_unchanged(self) -> None:
        assert fit_text("abcde", 5) == "abcde"

    def test_truncates_with_ellipsis(self) -> None:
        assert fit_text("abcdefgh", 6) == "abc..."

    def test_too_narrow_for_ellipsis(self) -> None:
        assert fit_text("abcdef", 3) == "abc"

    def test_zero_width(self) -> None:
        assert fit_text("abc", 0) == ""

    def test_wide_characters_measured_in_cells(self) -> None:
        result = fit_text("日本語のテキスト", 9)
        assert result.endswith("...")
        assert cell_len(result) == 9


# ---------------------------------------------------------------------------
# render_row
# ---------------------------------------------------------------------------


class TestRenderRow:
    def test_short_line_padded_to_width(self) -> None:
        row = render_row(OutputLine("hello"), False, 20)
        assert row.text == "   hello" + " " * 11 + " "
        assert len(row.text) == 20
        assert row.style is RowStyle.CONTENT

    def test_long_line_truncated(self) -> None:
        row = render_row(OutputLine("x" * 50), False, 20)
        assert text_area_width(20) == 16
        assert row.text == "   " + "x" * 13 + "..." + " "
        assert len(row.text) == 20

    def test_selected_marker_and_style(self) -> None:
        line = OutputLine("boom", kind=LineKind.ERROR)
        row = render_row(line, True, 30)
        assert row.text.startswith(" ▶ boom")
        assert row.style is RowStyle.SELECTED
        assert cell_len(row.text) == 30

    def test_ascii_indicator(self) -> None:
        row = render_row(OutputLine("x"), True, 10, ASCII_SELECTION_INDICATOR)
        assert row.text.startswith(" > x")

    def test_kind_markers(self) -> None:
        error = render_row(OutputLine("e", kind=LineKind.ERROR), False, 10)
        warning = render_row(OutputLine("w", kind=LineKind.WARNING), False, 10)
        plain = render_row(OutputLine("p"), False, 10)
        assert error.text.startswith(" ! e")
        assert warning.text.startswith(" ? w")
        assert plain.text.startswith("   p")

    def test_blank_row(self) -> None:
        row = render_row(None, False, 25)
        assert row.text == " " * 25
        assert row.style is RowStyle.CONTENT

    def test_blank_row_ignores_selected_flag(self) -> None:
        row = render_row(None, True, 25)
        assert row.style is RowStyle.CONTENT

    def test_width_exact_for_many_lengths(self) -> None:
        for width in (0, 1, 4, 5, 10, 62):
            for length in (0, 1, 3, 10, 61, 62, 200):
                for selected in (False, True):
                    row = render_row(OutputLine("y" * length), selected, width)
                    assert cell_len(row.text) == width

    def test_wide_text_keeps_width(self) -> None:
        row = render_row(OutputLine("エラー: 未定義の参照です " * 4), False, 40)
        assert cell_len(row.text) == 40


class TestKindMarkers:
    def test_covers_every_kind(self) -> None:
        assert set(KIND_MARKERS) == set(LineKind)

    def test_marker_width(self) -> None:
        for marker in KIND_MARKERS.values():
            assert len(marker) == MARKER_WIDTH


# ---------------------------------------------------------------------------
# Title and footer
# ---------------------------------------------------------------------------


class TestFormatTitle:
    def test_idle(self) -> None:
        assert format_title(False, False, 0, 0) == "Build Output"

    def test_running_shows_spinner(self) -> None:
        assert format_title(True, False, 3, 1, "/") == "Building... /"

    def test_clean(self) -> None:
        assert format_title(False, True, 0, 0) == "Build Complete (no errors)"

    def test_one_error(self) -> None:
        assert format_title(False, True, 1, 0) == "Build: 1 error, 0 warnings"

    def test_plural_errors_single_warning(self) -> None:
        assert format_title(False, True, 2, 1) == "Build: 2 errors, 1 warning"

    def test_warnings_only(self) -> None:
        assert format_title(False, True, 0, 2) == "Build: 0 errors, 2 warnings"

    def test_footer_lists_keys(self) -> None:
        assert "[Enter]" in FOOTER
        assert "[Esc]" in FOOTER


# ---------------------------------------------------------------------------
# Spinner
# ---------------------------------------------------------------------------


class TestSpinner:
    def test_glyph_set(self) -> None:
        assert SPINNER_GLYPHS == ("|", "/", "-", "\\")

    def test_starts_at_zero(self) -> None:
        spinner = Spinner()
        assert spinner.index == 0
        assert spinner.glyph == "|"

    def test_advance_cycles(self) -> None:
        spinner = Spinner()
        seen = []
        for _ in range(5):
            spinner.advance()
            seen.append(spinner.glyph)
        assert seen == ["/", "-", "\\", "|", "/"]
        assert spinner.index == 1

    def test_reset(self) -> None:
        spinner = Spinner()
        spinner.advance()
        spinner.reset()
        assert spinner.index == 0
