"""Wire protocol: decouples the build producer from the UI.

Events flow from the build runner to the UI. The UI subscribes to the
wire and reacts on its own loop, so the viewport never has to lock the
output log. The same events drive the TUI and the plain CLI mode.
"""

from __future__ import annotations

import asyncio
import enum
from dataclasses import dataclass, field
from typing import Any


class EventType(enum.Enum):
    BUILD_BEGIN = "build_begin"
    OUTPUT = "output"
    BUILD_END = "build_end"
    STATUS = "status"
    ERROR = "error"


@dataclass
class WireEvent:
    """An event on the wire."""

    type: EventType
    data: dict[str, Any] = field(default_factory=dict)


class Wire:
    """Async message bus: build runner -> UI subscribers.

    Single-producer, multi-consumer broadcast.
    """

    def __init__(self) -> None:
        self._subscribers: list[asyncio.Queue[WireEvent | None]] = []
        self._closed: bool = False

    def send(self, event: WireEvent) -> None:
        """Send an event to all subscribers.

        Silently drops events after ``close()`` has been called.
        """
        if self._closed:
            return
        for q in self._subscribers:
            q.put_nowait(event)

    def send_build_begin(self, command: str) -> None:
        self.send(WireEvent(type=EventType.BUILD_BEGIN, data={"command": command}))

    def send_output(self, count: int, kind: str = "plain", text: str = "") -> None:
        """Announce ``count`` new log lines; ``text`` is the last one."""
        self.send(
            WireEvent(
                type=EventType.OUTPUT,
                data={"count": count, "kind": kind, "text": text},
            )
        )

    def send_build_end(
        self, exit_code: int | None, errors: int = 0, warnings: int = 0
    ) -> None:
        """Notify subscribers that the build finished."""
        self.send(
            WireEvent(
                type=EventType.BUILD_END,
                data={
                    "exit_code": exit_code,
                    "errors": errors,
                    "warnings": warnings,
                },
            )
        )

    def send_status(self, message: str) -> None:
        self.send(WireEvent(type=EventType.STATUS, data={"message": message}))

    def send_error(self, error: str) -> None:
        self.send(WireEvent(type=EventType.ERROR, data={"error": error}))

    def subscribe(self) -> asyncio.Queue[WireEvent | None]:
        """Subscribe to events. Returns a queue to read from."""
        q: asyncio.Queue[WireEvent | None] = asyncio.Queue()
        self._subscribers.append(q)
        return q

    def unsubscribe(self, q: asyncio.Queue) -> None:
        """Unsubscribe from events."""
        if q in self._subscribers:
            self._subscribers.remove(q)

    @property
    def closed(self) -> bool:
        return self._closed

    def close(self) -> None:
        """Signal all subscribers that the wire is closing."""
        self._closed = True
        for q in self._subscribers:
            q.put_nowait(None)
