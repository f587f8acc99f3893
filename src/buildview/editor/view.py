"""Editing view: cursor placement on the active document."""

from __future__ import annotations

import logging
from typing import Callable

from buildview.editor.document import Document, DocumentRegistry

logger = logging.getLogger(__name__)


class DocumentEditorView:
    """Moves the active document's cursor and tells listeners to repaint.

    The TUI registers a refresh listener that loads the document into its
    text area and places the caret.
    """

    def __init__(
        self,
        registry: DocumentRegistry,
        on_refresh: Callable[[Document], None] | None = None,
    ) -> None:
        self._registry = registry
        self._on_refresh: list[Callable[[Document], None]] = []
        if on_refresh is not None:
            self._on_refresh.append(on_refresh)

    def add_refresh_listener(self, callback: Callable[[Document], None]) -> None:
        self._on_refresh.append(callback)

    @property
    def document(self) -> Document | None:
        return self._registry.active

    def move_cursor_to(self, line: int, column: int) -> None:
        doc = self._registry.active
        if doc is None:
            logger.debug("No active document; cursor move to %d:%d ignored", line, column)
            return
        doc.goto(line, column)

    def refresh(self) -> None:
        doc = self._registry.active
        if doc is None:
            return
        for callback in self._on_refresh:
            try:
                callback(doc)
            except Exception:
                logger.exception("Error in refresh listener for %s", doc.path)
