"""Output line types."""

from __future__ import annotations

import enum
from dataclasses import dataclass


class LineKind(enum.Enum):
    """Classification of a line of build output."""

    PLAIN = "plain"
    ERROR = "error"
    WARNING = "warning"


@dataclass(frozen=True)
class OutputLine:
    """A single classified line of build output.

    ``filename`` is empty and ``line``/``column`` are 0 when the text
    carries no location.
    """

    text: str
    kind: LineKind = LineKind.PLAIN
    filename: str = ""
    line: int = 0
    column: int = 0

    @property
    def is_navigable(self) -> bool:
        """True when the line points at a concrete file and line."""
        return bool(self.filename) and self.line > 0
