"""Row, title and footer rendering for the build modal.

Every content row is exactly ``content_width`` terminal cells wide::

    " ▶ " + text (content_width - 4 cells) + " "

The three-cell marker shows the selection indicator on the selected
row and the line kind on the others.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass

from rich.cells import cell_len, set_cell_size

from buildview.output.line import LineKind, OutputLine

SELECTION_INDICATOR = "▶"
ASCII_SELECTION_INDICATOR = ">"
ELLIPSIS = "..."
MARKER_WIDTH = 3
TRAILING_PAD = 1

# One entry per LineKind; tests check the table stays exhaustive.
KIND_MARKERS: dict[LineKind, str] = {
    LineKind.ERROR: " ! ",
    LineKind.WARNING: " ? ",
    LineKind.PLAIN: "   ",
}

FOOTER = "[Enter] Goto  [Arrows] Navigate  [Esc] Close"

TITLE_IDLE = "Build Output"
TITLE_CLEAN = "Build Complete (no errors)"
TITLE_RUNNING = "Building... "


class RowStyle(enum.Enum):
    """Which color pair a row is painted with."""

    CONTENT = "content"
    SELECTED = "selected"


@dataclass(frozen=True)
class RenderedRow:
    text: str
    style: RowStyle


def fit_text(text: str, width: int) -> str:
    """Crop with a trailing ellipsis or right-pad so ``text`` fills ``width`` cells."""
    if width <= 0:
        return ""
    if cell_len(text) > width:
        if width <= len(ELLIPSIS):
            return set_cell_size(text, width)
        return set_cell_size(text, width - len(ELLIPSIS)) + ELLIPSIS
    return set_cell_size(text, width)


def text_area_width(content_width: int) -> int:
    return max(content_width - MARKER_WIDTH - TRAILING_PAD, 0)


def render_row(
    line: OutputLine | None,
    selected: bool,
    content_width: int,
    indicator: str = SELECTION_INDICATOR,
) -> RenderedRow:
    """Render one content row; ``None`` gives a blank row."""
    if line is None:
        return RenderedRow(text=" " * max(content_width, 0), style=RowStyle.CONTENT)

    body = fit_text(line.text, text_area_width(content_width))
    if selected:
        marker = f" {indicator} "
        style = RowStyle.SELECTED
    else:
        marker = KIND_MARKERS[line.kind]
        style = RowStyle.CONTENT

    # Guard narrow widths and wide indicator glyphs alike
    text = set_cell_size(marker + body + " ", max(content_width, 0))
    return RenderedRow(text=text, style=style)


def _plural(count: int, word: str) -> str:
    return f"{count} {word}" if count == 1 else f"{count} {word}s"


def format_title(
    running: bool,
    complete: bool,
    error_count: int,
    warning_count: int,
    spinner_glyph: str = "|",
) -> str:
    """Title text for the current build state."""
    if running:
        return TITLE_RUNNING + spinner_glyph
    if complete:
        if error_count == 0 and warning_count == 0:
            return TITLE_CLEAN
        return (
            f"Build: {_plural(error_count, 'error')}, "
            f"{_plural(warning_count, 'warning')}"
        )
    return TITLE_IDLE
