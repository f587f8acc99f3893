"""Open documents and the registry that tracks them."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from typing import Callable

logger = logging.getLogger(__name__)

DEFAULT_MAX_FILE_BYTES = 8 * 1024 * 1024


def normalize_path(path: str) -> str:
    """Absolute, symlink-free form used to compare document paths."""
    return os.path.realpath(os.path.expanduser(path))


@dataclass(eq=False)
class Document:
    """A source file loaded for viewing, with a 0-based cursor."""

    path: str
    lines: list[str] = field(default_factory=lambda: [""])
    cursor_line: int = 0
    cursor_column: int = 0

    @classmethod
    def from_text(cls, path: str, text: str) -> Document:
        lines = text.splitlines() or [""]
        return cls(path=normalize_path(path), lines=lines)

    @property
    def name(self) -> str:
        return os.path.basename(self.path)

    @property
    def text(self) -> str:
        return "\n".join(self.lines)

    @property
    def line_count(self) -> int:
        return len(self.lines)

    def goto(self, line: int, column: int) -> None:
        """Move the cursor, clamped to the document's lines and their lengths."""
        self.cursor_line = min(max(line, 0), len(self.lines) - 1)
        self.cursor_column = min(max(column, 0), len(self.lines[self.cursor_line]))


class DocumentRegistry:
    """Documents opened in this session, plus which one is active.

    ``load()`` does synchronous disk I/O. Files over ``max_file_bytes``,
    unreadable files and non-UTF-8 files are refused with a logged warning.
    """

    def __init__(self, max_file_bytes: int = DEFAULT_MAX_FILE_BYTES) -> None:
        self.max_file_bytes = max_file_bytes
        self._documents: list[Document] = []
        self._active: Document | None = None
        self._on_activate: list[Callable[[Document], None]] = []

    @property
    def documents(self) -> list[Document]:
        return list(self._documents)

    @property
    def active(self) -> Document | None:
        return self._active

    def add_activate_listener(self, callback: Callable[[Document], None]) -> None:
        self._on_activate.append(callback)

    def find_by_path(self, path: str) -> Document | None:
        target = normalize_path(path)
        for doc in self._documents:
            if doc.path == target:
                return doc
        return None

    def load(self, path: str) -> bool:
        """Read ``path`` into a new document, register and activate it.

        An already-open document is just activated.
        """
        existing = self.find_by_path(path)
        if existing is not None:
            self.activate(existing)
            return True

        try:
            size = os.path.getsize(path)
            if size > self.max_file_bytes:
                logger.warning(
                    "Not opening %s: %d bytes exceeds limit of %d",
                    path,
                    size,
                    self.max_file_bytes,
                )
                return False
            with open(path, encoding="utf-8") as f:
                text = f.read()
        except (OSError, UnicodeDecodeError) as e:
            logger.warning("Cannot open %s: %s", path, e)
            return False

        doc = self.add(Document.from_text(path, text))
        logger.info("Opened %s (%d lines)", doc.path, doc.line_count)
        return True

    def add(self, doc: Document) -> Document:
        """Register a document and make it active."""
        self._documents.append(doc)
        self.activate(doc)
        return doc

    def activate(self, doc: Document) -> None:
        if doc not in self._documents:
            self._documents.append(doc)
        self._active = doc
        for callback in self._on_activate:
            try:
                callback(doc)
            except Exception:
                logger.exception("Error in activate listener for %s", doc.path)
