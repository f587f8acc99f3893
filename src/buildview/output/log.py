"""Output log: the append-only record of a build's classified lines."""

from __future__ import annotations

import threading
from collections import deque

from buildview.output.diagnostic import DiagnosticParser, classify_line
from buildview.output.line import LineKind, OutputLine


class OutputLog:
    """Thread-safe bounded log of classified build output.

    The build runner owns the log and is the only writer. Views keep a
    borrowed reference and read it from the UI loop.

    Holds up to ``max_lines`` lines; once full, the oldest lines are
    dropped. ``error_count``/``warning_count`` and ``total_lines`` count
    everything appended since ``start()``, including dropped lines.
    """

    def __init__(
        self, max_lines: int = 50_000, parser: DiagnosticParser | None = None
    ) -> None:
        self._lines: deque[OutputLine] = deque(maxlen=max_lines)
        self._parser = parser
        self._lock = threading.Lock()
        self._total_lines: int = 0
        self._error_count: int = 0
        self._warning_count: int = 0
        self._running: bool = False
        self._complete: bool = False
        self._exit_code: int | None = None

    # --- Producer side ---

    def start(self) -> None:
        """Reset for a new build and mark it running."""
        with self._lock:
            self._lines.clear()
            self._total_lines = 0
            self._error_count = 0
            self._warning_count = 0
            self._running = True
            self._complete = False
            self._exit_code = None

    def finish(self, exit_code: int | None = None) -> None:
        """Mark the build complete."""
        with self._lock:
            self._running = False
            self._complete = True
            self._exit_code = exit_code

    def append(self, line: OutputLine) -> None:
        """Append a classified line."""
        with self._lock:
            self._append_locked(line)

    def append_text(self, text: str) -> list[OutputLine]:
        """Split text into lines, classify and append them.

        Returns the appended lines.
        """
        lines = [classify_line(t, self._parser) for t in text.split("\n")]
        with self._lock:
            for line in lines:
                self._append_locked(line)
        return lines

    def _append_locked(self, line: OutputLine) -> None:
        self._lines.append(line)
        self._total_lines += 1
        if line.kind is LineKind.ERROR:
            self._error_count += 1
        elif line.kind is LineKind.WARNING:
            self._warning_count += 1

    # --- Reader side ---

    def line_at(self, index: int) -> OutputLine | None:
        """Return the line at ``index`` or None when out of range."""
        with self._lock:
            if 0 <= index < len(self._lines):
                return self._lines[index]
        return None

    @property
    def line_count(self) -> int:
        """Current number of lines held."""
        with self._lock:
            return len(self._lines)

    @property
    def total_lines(self) -> int:
        """Total number of lines appended since start()."""
        with self._lock:
            return self._total_lines

    @property
    def dropped_lines(self) -> int:
        """Lines evicted from the front since start().

        Index ``i`` before an eviction of ``n`` lines is ``i - n`` after it.
        """
        with self._lock:
            return self._total_lines - len(self._lines)

    @property
    def error_count(self) -> int:
        with self._lock:
            return self._error_count

    @property
    def warning_count(self) -> int:
        with self._lock:
            return self._warning_count

    @property
    def running(self) -> bool:
        with self._lock:
            return self._running

    @property
    def complete(self) -> bool:
        with self._lock:
            return self._complete

    @property
    def exit_code(self) -> int | None:
        with self._lock:
            return self._exit_code

    def __len__(self) -> int:
        return self.line_count
