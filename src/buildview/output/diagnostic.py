"""Diagnostic parsing: find ``file:line[:col]`` locations in tool output.

The parser recognises the location formats emitted by the common
compilers and checkers (GCC, Clang, rustc, mypy, flake8, make) and
Python tracebacks. Extra patterns can be supplied from configuration;
each must define ``file`` and ``line`` groups and may define ``col``.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass

from buildview.output.line import LineKind, OutputLine

logger = logging.getLogger(__name__)

# Python traceback frames: File "pkg/mod.py", line 12, in func
PYTHON_TRACEBACK_PATTERN = r'File "(?P<file>[^"]+)", line (?P<line>\d+)'

# Compiler style: path/to/file.c:42:7: error: ...
COMPILER_PATTERN = (
    r"(?P<file>[^\s:'\"()\[\]<>]+):(?P<line>\d+)(?::(?P<col>\d+))?(?=[:\s,)\]]|$)"
)

DEFAULT_PATTERNS: tuple[str, ...] = (PYTHON_TRACEBACK_PATTERN, COMPILER_PATTERN)

_ERROR_RES = (
    re.compile(r"\b(?:fatal\s+)?error\b\s*(?:\[[^\]]*\])?\s*:", re.IGNORECASE),
    re.compile(r"\*\*\*.*\bError\s+\d+"),
    re.compile(r"^Traceback \(most recent call last\)"),
    re.compile(r"^[A-Za-z_][\w.]*(?:Error|Exception):"),
)
_WARNING_RE = re.compile(r"\bwarning\b\s*(?:\[[^\]]*\])?\s*:", re.IGNORECASE)


@dataclass(frozen=True)
class Diagnostic:
    """Result of parsing one line. ``line``/``column`` are 1-based, 0 if absent."""

    valid: bool = False
    filename: str = ""
    line: int = 0
    column: int = 0


NO_DIAGNOSTIC = Diagnostic()


class DiagnosticParser:
    """Ordered list of location patterns; the first acceptable match wins."""

    def __init__(self, patterns: list[str] | None = None) -> None:
        self._patterns: list[re.Pattern[str]] = []
        for pattern in [*(patterns or []), *DEFAULT_PATTERNS]:
            self.add_pattern(pattern)

    def add_pattern(self, pattern: str) -> bool:
        """Compile and append a pattern. Invalid patterns are logged and skipped."""
        try:
            compiled = re.compile(pattern)
        except re.error as e:
            logger.warning("Ignoring invalid diagnostic pattern %r: %s", pattern, e)
            return False
        if "file" not in compiled.groupindex or "line" not in compiled.groupindex:
            logger.warning(
                "Ignoring diagnostic pattern %r: needs 'file' and 'line' groups",
                pattern,
            )
            return False
        self._patterns.append(compiled)
        return True

    @property
    def patterns(self) -> list[str]:
        return [p.pattern for p in self._patterns]

    def parse(self, text: str) -> Diagnostic:
        """Return the first location found in ``text``."""
        for compiled in self._patterns:
            for match in compiled.finditer(text):
                filename = match.group("file")
                # "12:30:45" is a timestamp, not a file
                if filename.isdigit():
                    continue
                column = 0
                if "col" in compiled.groupindex and match.group("col"):
                    column = int(match.group("col"))
                return Diagnostic(
                    valid=True,
                    filename=filename,
                    line=int(match.group("line")),
                    column=column,
                )
        return NO_DIAGNOSTIC


_default_parser: DiagnosticParser | None = None


def default_parser() -> DiagnosticParser:
    global _default_parser
    if _default_parser is None:
        _default_parser = DiagnosticParser()
    return _default_parser


def parse_diagnostic(text: str) -> Diagnostic:
    """Parse ``text`` with the built-in patterns."""
    return default_parser().parse(text)


def classify_kind(text: str) -> LineKind:
    """Decide whether a line reports an error, a warning, or neither."""
    if any(r.search(text) for r in _ERROR_RES):
        return LineKind.ERROR
    if _WARNING_RE.search(text):
        return LineKind.WARNING
    return LineKind.PLAIN


def classify_line(text: str, parser: DiagnosticParser | None = None) -> OutputLine:
    """Build an ``OutputLine`` from display text."""
    diag = (parser or default_parser()).parse(text)
    return OutputLine(
        text=text,
        kind=classify_kind(text),
        filename=diag.filename,
        line=diag.line,
        column=diag.column,
    )
