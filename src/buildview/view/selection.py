"""Selection and scroll state for a list viewport.

Selection changes and the visible window are deliberately decoupled:
the move/page operations only change ``selected_index``, and
``reframe()`` brings ``first_visible_index`` back around the selection
right before a redraw. Several key presses therefore coalesce into one
window adjustment.
"""

from __future__ import annotations

from dataclasses import dataclass


def clamp_index(index: int, line_count: int) -> int:
    """Clamp to ``[0, line_count - 1]``; 0 for an empty list."""
    if line_count <= 0:
        return 0
    return min(max(index, 0), line_count - 1)


@dataclass
class ScrollSelection:
    """``(selected_index, first_visible_index)`` over a list of ``line_count`` rows.

    After any operation ``0 <= selected_index < max(line_count, 1)`` and
    ``first_visible_index >= 0``. After ``reframe()`` the selection also
    lies inside ``[first_visible_index, first_visible_index + content_rows)``.
    """

    selected_index: int = 0
    first_visible_index: int = 0

    def move_down(self, line_count: int) -> None:
        self.selected_index = clamp_index(self.selected_index + 1, line_count)

    def move_up(self, line_count: int) -> None:
        self.selected_index = clamp_index(self.selected_index - 1, line_count)

    def page_down(self, line_count: int, content_rows: int) -> None:
        self.selected_index = clamp_index(self.selected_index + content_rows, line_count)

    def page_up(self, line_count: int, content_rows: int) -> None:
        self.selected_index = clamp_index(self.selected_index - content_rows, line_count)

    def scroll_to_end(self, line_count: int, content_rows: int) -> None:
        """Select the last line, scrolling forward only if it is below the window."""
        if line_count <= 0:
            self.selected_index = 0
            self.first_visible_index = 0
            return

        self.selected_index = line_count - 1
        if self.selected_index >= self.first_visible_index + content_rows:
            self.first_visible_index = max(self.selected_index - content_rows + 1, 0)

    def reframe(self, line_count: int, content_rows: int) -> bool:
        """Move the window so the selection is visible. Returns True if anything changed."""
        before = (self.selected_index, self.first_visible_index)

        if line_count <= 0:
            self.selected_index = 0
            self.first_visible_index = 0
            return before != (0, 0)

        rows = max(content_rows, 1)
        self.selected_index = clamp_index(self.selected_index, line_count)
        self.first_visible_index = max(self.first_visible_index, 0)

        while self.selected_index < self.first_visible_index:
            self.first_visible_index -= 1

        while self.selected_index >= self.first_visible_index + rows:
            self.first_visible_index += 1

        return before != (self.selected_index, self.first_visible_index)

    def drop_front(self, count: int) -> None:
        """Follow ``count`` lines removed from the front of the list."""
        if count <= 0:
            return
        self.selected_index = max(self.selected_index - count, 0)
        self.first_visible_index = max(self.first_visible_index - count, 0)

    def reset(self) -> None:
        self.selected_index = 0
        self.first_visible_index = 0

    def visible_indices(self, content_rows: int) -> range:
        """Logical indices covered by the window (may run past the end of the list)."""
        return range(self.first_visible_index, self.first_visible_index + content_rows)
