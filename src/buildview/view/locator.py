"""Jump from a diagnostic line in the build output to the source location."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from typing import Any, Protocol

from buildview.output.diagnostic import Diagnostic
from buildview.output.line import OutputLine

logger = logging.getLogger(__name__)

NO_PATTERN_MESSAGE = "(no error pattern found on this line)"


class DiagnosticSource(Protocol):
    def parse(self, text: str) -> Diagnostic: ...


class DocumentSource(Protocol):
    def find_by_path(self, path: str) -> Any | None: ...

    def load(self, path: str) -> bool: ...

    def activate(self, doc: Any) -> None: ...


class EditingView(Protocol):
    def move_cursor_to(self, line: int, column: int) -> None: ...

    def refresh(self) -> None: ...


@dataclass(frozen=True)
class NavigationResult:
    """Outcome of a jump request.

    ``line``/``column`` are the 0-based cursor target; ``message`` is the
    status text for the user either way.
    """

    ok: bool
    message: str
    path: str = ""
    line: int = 0
    column: int = 0


class DiagnosticLocator:
    """Resolves a diagnostic line to a document and moves the editor there.

    Relative filenames are resolved against ``base_dir`` (normally the
    build's working directory). Failures leave the active document and
    its cursor untouched.
    """

    def __init__(
        self,
        parser: DiagnosticSource,
        registry: DocumentSource,
        editor: EditingView,
        base_dir: str | None = None,
    ) -> None:
        self._parser = parser
        self._registry = registry
        self._editor = editor
        self.base_dir = base_dir

    def resolve_path(self, filename: str) -> str:
        filename = os.path.expanduser(filename)
        if not os.path.isabs(filename) and self.base_dir:
            filename = os.path.join(self.base_dir, filename)
        return os.path.normpath(filename)

    def locate(self, text: str) -> NavigationResult:
        """Parse ``text`` and jump to the location it names."""
        diag = self._parser.parse(text)
        if not diag.valid:
            logger.debug("No diagnostic location in %r", text)
            return NavigationResult(ok=False, message=NO_PATTERN_MESSAGE)

        path = self.resolve_path(diag.filename)
        doc = self._registry.find_by_path(path)
        if doc is None:
            if not self._registry.load(path):
                return NavigationResult(
                    ok=False,
                    message=f"(cannot open file: {diag.filename})",
                    path=path,
                )
            doc = self._registry.find_by_path(path)
            if doc is None:
                # load() reported success but did not register the document
                logger.warning("Document registry lost %s after loading it", path)
                return NavigationResult(
                    ok=False,
                    message=f"(cannot open file: {diag.filename})",
                    path=path,
                )
        self._registry.activate(doc)

        line = max(diag.line - 1, 0)
        column = max(diag.column - 1, 0)
        self._editor.move_cursor_to(line, column)
        self._editor.refresh()

        logger.info("Jumped to %s:%d:%d", path, diag.line, diag.column)
        return NavigationResult(
            ok=True,
            message=f"({diag.filename}:{diag.line})",
            path=path,
            line=line,
            column=column,
        )

    def locate_line(self, line: OutputLine | None) -> NavigationResult:
        """Jump to the location on an output line (``None`` when nothing is selected)."""
        if line is None:
            return NavigationResult(ok=False, message=NO_PATTERN_MESSAGE)
        return self.locate(line.text)
