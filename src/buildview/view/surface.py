"""Rendering surface: where the modal paints itself.

``Surface`` is the drawing contract the modal needs. ``CanvasSurface``
implements it on an in-memory cell grid with rich styles; the Textual
widget displays the published grid, and tests read it back as text.
"""

from __future__ import annotations

from typing import Protocol

from rich import box
from rich.cells import cell_len, get_character_cell_size, set_cell_size
from rich.style import Style
from rich.text import Text

from buildview.view.geometry import ViewportGeometry

Cell = tuple[str, "Style | None"]

# Continuation cell for the right half of a double-width character
_WIDE_TAIL = ""


class Surface(Protocol):
    """Drawing primitives used by the build modal."""

    @property
    def size(self) -> tuple[int, int]:
        """(rows, cols)"""
        ...

    def draw_frame(
        self,
        geometry: ViewportGeometry,
        title: str,
        footer: str,
        foreground: str,
        background: str,
    ) -> None: ...

    def set_colors(self, foreground: str, background: str) -> None: ...

    def reset_colors(self) -> None: ...

    def place_cursor(self, row: int, col: int) -> None: ...

    def write_text(self, text: str) -> None: ...

    def flush(self) -> None: ...


def _center(text: str, width: int) -> str:
    if width <= 0:
        return ""
    text = set_cell_size(text, width) if cell_len(text) > width else text
    left = (width - cell_len(text)) // 2
    return set_cell_size(" " * left + text, width)


class CanvasSurface:
    """Cell-grid surface. Writes outside the grid are clipped.

    Nothing drawn is visible through ``lines()``/``region()`` until
    ``flush()`` publishes the grid.
    """

    def __init__(self, rows: int, cols: int, frame_box: box.Box = box.SQUARE) -> None:
        self._rows = max(rows, 0)
        self._cols = max(cols, 0)
        self._box = frame_box
        self._cells: list[list[Cell]] = self._blank()
        self._published: list[list[Cell]] = self._blank()
        self._style: Style | None = None
        self._cursor: tuple[int, int] = (0, 0)
        self.flush_count = 0

    def _blank(self) -> list[list[Cell]]:
        return [[(" ", None)] * self._cols for _ in range(self._rows)]

    @property
    def size(self) -> tuple[int, int]:
        return self._rows, self._cols

    @property
    def cursor(self) -> tuple[int, int]:
        return self._cursor

    def resize(self, rows: int, cols: int) -> None:
        """Change the grid size; both the working and published grids are cleared."""
        self._rows = max(rows, 0)
        self._cols = max(cols, 0)
        self._cells = self._blank()
        self._published = self._blank()
        self._cursor = (0, 0)

    def clear(self) -> None:
        self._cells = self._blank()

    # --- Drawing primitives ---

    def set_colors(self, foreground: str, background: str) -> None:
        self._style = Style(color=foreground, bgcolor=background)

    def reset_colors(self) -> None:
        self._style = None

    def place_cursor(self, row: int, col: int) -> None:
        self._cursor = (row, col)

    def write_text(self, text: str) -> None:
        """Write at the cursor with the current colors, advancing the cursor."""
        row, col = self._cursor
        for ch in text:
            width = get_character_cell_size(ch)
            if width == 0:
                continue
            self._put(row, col, ch)
            if width == 2:
                self._put(row, col + 1, _WIDE_TAIL)
            col += width
        self._cursor = (row, col)

    def _put(self, row: int, col: int, ch: str) -> None:
        if 0 <= row < self._rows and 0 <= col < self._cols:
            self._cells[row][col] = (ch, self._style)

    def draw_frame(
        self,
        geometry: ViewportGeometry,
        title: str,
        footer: str,
        foreground: str,
        background: str,
    ) -> None:
        """Draw borders, title and footer. Content rows only get their side borders."""
        b = self._box
        inner = geometry.frame_width - 2
        left = geometry.frame_left

        def hline(row: int, start: str, fill: str, end: str) -> None:
            self.place_cursor(row, left)
            self.write_text(start + fill * inner + end)

        def boxed(row: int, text: str) -> None:
            self.place_cursor(row, left)
            self.write_text(b.mid_left + _center(text, inner) + b.mid_right)

        self.set_colors(foreground, background)
        hline(geometry.frame_top, b.top_left, b.top, b.top_right)
        boxed(geometry.title_row, title)
        hline(
            geometry.separator_row,
            b.head_row_left,
            b.head_row_horizontal,
            b.head_row_right,
        )
        for row in range(geometry.content_top, geometry.footer_separator_row):
            self.place_cursor(row, left)
            self.write_text(b.mid_left)
            self.place_cursor(row, geometry.frame_right)
            self.write_text(b.mid_right)
        hline(
            geometry.footer_separator_row,
            b.head_row_left,
            b.head_row_horizontal,
            b.head_row_right,
        )
        boxed(geometry.footer_row, footer)
        hline(geometry.frame_bottom, b.bottom_left, b.bottom, b.bottom_right)
        self.reset_colors()

    def flush(self) -> None:
        """Publish the working grid."""
        self._published = [list(row) for row in self._cells]
        self.flush_count += 1

    # --- Reading the published grid ---

    def lines(self) -> list[Text]:
        return [_cells_to_text(row) for row in self._published]

    def region(self, top: int, left: int, bottom: int, right: int) -> list[Text]:
        """Published cells inside the inclusive rectangle, one Text per row."""
        rows = self._published[max(top, 0) : bottom + 1]
        return [_cells_to_text(row[max(left, 0) : right + 1]) for row in rows]

    def row_text(self, row: int) -> str:
        """Plain text of a published row."""
        if not 0 <= row < self._rows:
            return ""
        return "".join(ch for ch, _ in self._published[row])

    def row_style(self, row: int, col: int) -> Style | None:
        """Style of a published cell."""
        if 0 <= row < self._rows and 0 <= col < self._cols:
            return self._published[row][col][1]
        return None


def _cells_to_text(cells: list[Cell]) -> Text:
    text = Text(no_wrap=True, end="")
    run: list[str] = []
    run_style: Style | None = None
    for ch, style in cells:
        if ch == _WIDE_TAIL:
            continue
        if run and style != run_style:
            text.append("".join(run), run_style)
            run = []
        run_style = style
        run.append(ch)
    if run:
        text.append("".join(run), run_style)
    return text
