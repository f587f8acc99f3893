"""Line cleaning: make raw process output safe to paint in a fixed-width row."""

from __future__ import annotations

import re

_ANSI_RE = re.compile(r"\x1b\[[0-9;?]*[a-zA-Z]|\x1b\][^\x07]*\x07")

TAB_SIZE = 8


def strip_ansi(text: str) -> str:
    """Strip ANSI escape sequences from text."""
    return _ANSI_RE.sub("", text)


def sanitize_control_chars(text: str) -> str:
    """Remove control characters and binary garbage.

    Keeps printable chars and tabs. Strips C0/C1 controls, DEL and the
    U+FFF9..U+FFFB interlinear annotation format chars.
    """
    cleaned = []
    for ch in text:
        cp = ord(ch)
        if ch == "\t":
            cleaned.append(ch)
        elif cp >= 32 and cp not in range(0x7F, 0xA0):
            if cp not in range(0xFFF9, 0xFFFC):
                cleaned.append(ch)
    return "".join(cleaned)


def clean_line(raw: str, tab_size: int = TAB_SIZE) -> str:
    """Turn one raw output line into plain, tab-free display text.

    Carriage returns keep only the text after the last one, which is what
    a terminal would have shown for progress-style output.
    """
    text = raw.rstrip("\r\n")
    if "\r" in text:
        text = text.rsplit("\r", 1)[-1]
    text = sanitize_control_chars(strip_ansi(text))
    return text.expandtabs(tab_size)
