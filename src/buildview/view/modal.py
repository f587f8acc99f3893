"""The build output modal: a scrolling, selectable view over an output log."""

from __future__ import annotations

import logging
from typing import Protocol

from buildview.config import ColorConfig
from buildview.output.line import OutputLine
from buildview.view.geometry import ViewportGeometry, compute_geometry
from buildview.view.keys import KeyAction, KeyOutcome
from buildview.view.render import (
    FOOTER,
    SELECTION_INDICATOR,
    RowStyle,
    format_title,
    render_row,
)
from buildview.view.selection import ScrollSelection, clamp_index
from buildview.view.spinner import Spinner
from buildview.view.surface import Surface

logger = logging.getLogger(__name__)


class OutputSource(Protocol):
    """Read side of an output log, as seen by the modal."""

    @property
    def running(self) -> bool: ...

    @property
    def complete(self) -> bool: ...

    @property
    def line_count(self) -> int: ...

    @property
    def error_count(self) -> int: ...

    @property
    def warning_count(self) -> int: ...

    @property
    def dropped_lines(self) -> int: ...

    def line_at(self, index: int) -> OutputLine | None: ...


class BuildView:
    """Modal viewport over a build's output.

    The view borrows ``log``; the build runner owns it. All methods are
    meant to be called from the UI loop only.

    Selection changes never move the window themselves. ``redraw()``
    reframes first, so a burst of key presses costs one window update.
    """

    def __init__(
        self,
        log: OutputSource,
        surface: Surface,
        colors: ColorConfig | None = None,
        indicator: str = SELECTION_INDICATOR,
    ) -> None:
        self._log = log
        self._surface = surface
        self._colors = colors or ColorConfig()
        self._indicator = indicator
        self._state = ScrollSelection()
        self._spinner = Spinner()
        rows, cols = surface.size
        self._geometry = compute_geometry(rows, cols)
        self._visible = False
        self._seen_dropped = log.dropped_lines
        self._last_selection: OutputLine | None = None

    @property
    def log(self) -> OutputSource:
        return self._log

    @property
    def geometry(self) -> ViewportGeometry:
        return self._geometry

    @property
    def state(self) -> ScrollSelection:
        return self._state

    @property
    def spinner(self) -> Spinner:
        return self._spinner

    @property
    def visible(self) -> bool:
        return self._visible

    @property
    def last_selection(self) -> OutputLine | None:
        """The line that was selected when the modal was last hidden."""
        return self._last_selection

    def set_visible(self, visible: bool) -> None:
        """Show or hide the modal.

        Showing recomputes the geometry from the surface size. Hiding
        remembers the selected line in ``last_selection`` and resets the
        selection; it does not touch the build.
        """
        if visible and not self._visible:
            rows, cols = self._surface.size
            self.recalc_geometry(rows, cols)
        elif not visible and self._visible:
            self._last_selection = self.get_selected_line()
            self._state.reset()
        self._visible = visible

    def reset_selection(self) -> None:
        """Forget the selection and ``last_selection`` (a new build started)."""
        self._state.reset()
        self._last_selection = None
        self._seen_dropped = self._log.dropped_lines

    def _follow_evictions(self) -> None:
        # Keep the selection on the same line when the bounded log drops
        # lines from its front.
        dropped = self._log.dropped_lines
        if dropped > self._seen_dropped:
            self._state.drop_front(dropped - self._seen_dropped)
        self._seen_dropped = dropped

    # --- Exposed operations ---

    def recalc_geometry(self, rows: int, cols: int) -> ViewportGeometry:
        self._geometry = compute_geometry(rows, cols)
        logger.debug("Modal geometry for %dx%d: %s", cols, rows, self._geometry)
        return self._geometry

    def advance_spinner(self) -> None:
        self._spinner.advance()

    def scroll_to_end(self) -> None:
        self._follow_evictions()
        self._state.scroll_to_end(self._log.line_count, self._geometry.content_rows)

    def get_selected_line(self) -> OutputLine | None:
        self._follow_evictions()
        index = clamp_index(self._state.selected_index, self._log.line_count)
        return self._log.line_at(index)

    def has_navigable_selection(self) -> bool:
        line = self.get_selected_line()
        return line is not None and line.is_navigable

    def route_key_action(self, action: KeyAction | str | None) -> KeyOutcome:
        """Apply a key action.

        Navigation keys update the selection and redraw. ``enter`` and
        ``escape`` are left to the caller.
        """
        if isinstance(action, str):
            action = KeyAction.from_tag(action)
        if action is None:
            return KeyOutcome.IGNORED

        self._follow_evictions()
        line_count = self._log.line_count
        rows = self._geometry.content_rows
        if action is KeyAction.ARROW_UP:
            self._state.move_up(line_count)
        elif action is KeyAction.ARROW_DOWN:
            self._state.move_down(line_count)
        elif action is KeyAction.PAGE_UP:
            self._state.page_up(line_count, rows)
        elif action is KeyAction.PAGE_DOWN:
            self._state.page_down(line_count, rows)
        elif action is KeyAction.ENTER:
            return KeyOutcome.GOTO
        elif action is KeyAction.ESCAPE:
            return KeyOutcome.CLOSE
        else:
            return KeyOutcome.IGNORED

        self.redraw()
        return KeyOutcome.REDRAWN

    def redraw(self) -> None:
        """Reframe, then paint the frame, the visible rows and the cursor."""
        geo = self._geometry
        log = self._log
        state = self._state
        colors = self._colors
        surface = self._surface

        self._follow_evictions()
        state.reframe(log.line_count, geo.content_rows)

        title = format_title(
            log.running,
            log.complete,
            log.error_count,
            log.warning_count,
            self._spinner.glyph,
        )
        surface.draw_frame(
            geo,
            title,
            FOOTER,
            colors.modal_content_text,
            colors.modal_content_background,
        )

        for offset, index in enumerate(state.visible_indices(geo.content_rows)):
            line = log.line_at(index)
            row = render_row(
                line,
                index == state.selected_index,
                geo.content_cols,
                self._indicator,
            )
            if row.style is RowStyle.SELECTED:
                surface.set_colors(
                    colors.status_bar_text, colors.status_bar_background
                )
            else:
                surface.set_colors(
                    colors.modal_content_text, colors.modal_content_background
                )
            surface.place_cursor(geo.content_top + offset, geo.content_left)
            surface.write_text(row.text)

        surface.reset_colors()
        surface.place_cursor(
            geo.content_top + state.selected_index - state.first_visible_index,
            geo.content_left,
        )
        surface.flush()
