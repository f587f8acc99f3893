"""Running-state spinner."""

from __future__ import annotations

SPINNER_GLYPHS: tuple[str, ...] = ("|", "/", "-", "\\")


class Spinner:
    """Cycles through ``SPINNER_GLYPHS``. Advanced by an external tick."""

    def __init__(self, glyphs: tuple[str, ...] = SPINNER_GLYPHS) -> None:
        self._glyphs = glyphs
        self._index = 0

    def advance(self) -> None:
        self._index = (self._index + 1) % len(self._glyphs)

    def reset(self) -> None:
        self._index = 0

    @property
    def index(self) -> int:
        return self._index

    @property
    def glyph(self) -> str:
        return self._glyphs[self._index]
