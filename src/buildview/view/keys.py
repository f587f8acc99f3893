"""Key actions understood by the build modal."""

from __future__ import annotations

import enum


class KeyAction(enum.Enum):
    """Tagged key actions, one per key press."""

    ARROW_UP = "arrow-up"
    ARROW_DOWN = "arrow-down"
    PAGE_UP = "page-up"
    PAGE_DOWN = "page-down"
    ENTER = "enter"
    ESCAPE = "escape"

    @classmethod
    def from_tag(cls, tag: str) -> KeyAction | None:
        """Parse ``"<arrow-up>"`` or ``"arrow-up"``; None for unknown tags."""
        tag = tag.strip()
        if tag.startswith("<") and tag.endswith(">"):
            tag = tag[1:-1]
        try:
            return cls(tag.lower())
        except ValueError:
            return None

    @classmethod
    def from_key(cls, key: str) -> KeyAction | None:
        """Map a Textual key name (``events.Key.key``) to an action."""
        return _TEXTUAL_KEYS.get(key)


class KeyOutcome(enum.Enum):
    """What the caller should do after a key action was routed."""

    REDRAWN = "redrawn"
    GOTO = "goto"
    CLOSE = "close"
    IGNORED = "ignored"


_TEXTUAL_KEYS: dict[str, KeyAction] = {
    "up": KeyAction.ARROW_UP,
    "down": KeyAction.ARROW_DOWN,
    "pageup": KeyAction.PAGE_UP,
    "pagedown": KeyAction.PAGE_DOWN,
    "enter": KeyAction.ENTER,
    "escape": KeyAction.ESCAPE,
}
