"""Modal frame geometry from terminal dimensions.

Frame layout, top to bottom::

    top border
    title
    separator
    content rows (content_rows of them)
    footer separator
    footer
    bottom border
"""

from __future__ import annotations

from dataclasses import dataclass

MIN_FRAME_WIDTH = 60
MIN_FRAME_HEIGHT = 10
MIN_CONTENT_ROWS = 3
FRAME_CHROME_ROWS = 6
WIDTH_MARGIN = 0.10
HEIGHT_FRACTION = 0.90


@dataclass(frozen=True)
class ViewportGeometry:
    """Frame bounds (inclusive, zero-based screen coordinates) and content size."""

    frame_top: int
    frame_left: int
    frame_bottom: int
    frame_right: int
    content_rows: int
    content_cols: int

    @property
    def frame_width(self) -> int:
        return self.frame_right - self.frame_left + 1

    @property
    def frame_height(self) -> int:
        return self.frame_bottom - self.frame_top + 1

    @property
    def title_row(self) -> int:
        return self.frame_top + 1

    @property
    def separator_row(self) -> int:
        return self.frame_top + 2

    @property
    def content_top(self) -> int:
        return self.frame_top + 3

    @property
    def content_left(self) -> int:
        return self.frame_left + 1

    @property
    def footer_separator_row(self) -> int:
        return self.frame_bottom - 2

    @property
    def footer_row(self) -> int:
        return self.frame_bottom - 1


def compute_geometry(rows: int, cols: int) -> ViewportGeometry:
    """Centered frame using 80% of the width and 90% of the height.

    Small terminals clamp to a 60x10 frame. When the terminal is smaller
    than that the frame is anchored at the origin and extends past the
    screen edge; the surface clips what does not fit.
    """
    rows = max(rows, 0)
    cols = max(cols, 0)

    margin_cols = int(cols * WIDTH_MARGIN)
    frame_left = margin_cols
    frame_right = cols - margin_cols - 1
    if frame_right - frame_left + 1 < MIN_FRAME_WIDTH:
        frame_left = max((cols - MIN_FRAME_WIDTH) // 2, 0)
        frame_right = frame_left + MIN_FRAME_WIDTH - 1

    total_height = max(int(rows * HEIGHT_FRACTION), MIN_FRAME_HEIGHT)
    content_rows = max(total_height - FRAME_CHROME_ROWS, MIN_CONTENT_ROWS)

    frame_top = max((rows - total_height) // 2, 0)
    frame_bottom = frame_top + total_height - 1

    return ViewportGeometry(
        frame_top=frame_top,
        frame_left=frame_left,
        frame_bottom=frame_bottom,
        frame_right=frame_right,
        content_rows=content_rows,
        content_cols=frame_right - frame_left - 1,
    )
